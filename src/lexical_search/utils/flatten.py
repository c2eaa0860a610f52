"""Field flattening helpers for arbitrary structured records.

Records are plain mappings of unknown, possibly deep, shape. Two views are
produced from them:

* ``discover_string_fields`` walks a record and returns every string leaf
  keyed by its dot-path. Sequences contribute their string elements to the
  path that holds them, so ``{"tags": ["a", "b"]}`` yields ``{"tags": "a b"}``.
* ``resolve_field_text`` resolves a single explicit dot-path and coerces
  primitive leaves (numbers, booleans) to text.

Both walk with an explicit stack and guard against reference cycles by
tracking the ids of the containers on the current descent path; a
container seen again is skipped.
"""

from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Set, Tuple

PATH_SEPARATOR = "."
TEXT_SEPARATOR = " "

_SEQUENCE_TYPES = (list, tuple)


def coerce_primitive(value: Any) -> Optional[str]:
    """Return the text form of a primitive leaf, or None for anything else."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return str(value)
    return None


def get_nested_value(item: Any, path: str) -> Any:
    """
    Resolve a dot-path against nested mappings.

    Args:
        item: Record to read from
        path: Dot-separated key path, e.g. ``"stats.priority"``

    Returns:
        The value at the path, or None when any segment is missing
    """
    current = item
    for key in path.split(PATH_SEPARATOR):
        if isinstance(current, Mapping) and key in current:
            current = current[key]
        else:
            return None
    return current


def resolve_field_text(item: Any, path: str) -> Optional[str]:
    """
    Resolve a dot-path to searchable text.

    Sequences met along the path are fanned out, and their resolved
    elements are joined with a space. None leaves and mapping leaves
    contribute no text.

    Returns:
        The joined text, or None when the path yields nothing
    """
    keys = path.split(PATH_SEPARATOR)
    parts: List[str] = []
    visited: Set[int] = set()

    # (value, depth into keys, id of a sequence being left)
    stack: List[Tuple[Any, int, Optional[int]]] = [(item, 0, None)]
    while stack:
        value, depth, leaving = stack.pop()
        if leaving is not None:
            visited.discard(leaving)
            continue
        if value is None:
            continue

        if isinstance(value, _SEQUENCE_TYPES):
            marker = id(value)
            if marker in visited:
                continue
            visited.add(marker)
            stack.append((None, depth, marker))
            stack.extend((element, depth, None) for element in reversed(value))
            continue

        if depth == len(keys):
            text = coerce_primitive(value)
            if text is not None:
                parts.append(text)
        elif isinstance(value, Mapping) and keys[depth] in value:
            stack.append((value[keys[depth]], depth + 1, None))

    if not parts:
        return None
    return TEXT_SEPARATOR.join(parts)


def discover_string_fields(
    value: Any,
    prefix: str = "",
    visited: Optional[Set[int]] = None,
    fields: Optional[Dict[str, str]] = None
) -> Dict[str, str]:
    """
    Collect every string leaf reachable from ``value``.

    Numbers and booleans are ignored; only explicit field lists opt into
    primitive coercion. The walk uses an explicit stack, so nesting depth
    is not bounded by the interpreter's recursion limit.

    Args:
        value: Record (or sub-record) to walk
        prefix: Dot-path of ``value`` within the root record
        visited: Ids of containers on the current descent path
        fields: Accumulator, created when omitted

    Returns:
        Mapping of dot-path to text
    """
    if fields is None:
        fields = {}
    if visited is None:
        visited = set()

    stack: List[Tuple[Any, str, Optional[int]]] = [(value, prefix, None)]
    while stack:
        node, path, leaving = stack.pop()
        if leaving is not None:
            visited.discard(leaving)
            continue

        if isinstance(node, str):
            _append_text(fields, path, node)
            continue

        is_mapping = isinstance(node, Mapping)
        if not is_mapping and not isinstance(node, _SEQUENCE_TYPES):
            continue

        marker = id(node)
        if marker in visited:
            continue
        visited.add(marker)
        stack.append((None, path, marker))

        if is_mapping:
            children = [
                (child, f"{path}{PATH_SEPARATOR}{key}" if path else str(key), None)
                for key, child in node.items()
            ]
        else:
            # Elements share the path of the sequence that holds them
            children = [(element, path, None) for element in node]
        # Reversed so children pop in their original order
        stack.extend(reversed(children))

    return fields


def _append_text(fields: Dict[str, str], path: str, text: str) -> None:
    existing = fields.get(path)
    fields[path] = text if existing is None else f"{existing}{TEXT_SEPARATOR}{text}"


def extract_searchable_fields(item: Any, field_paths: Optional[List[str]] = None) -> Dict[str, str]:
    """
    Produce the flat field set indexed for one record.

    Args:
        item: Record to flatten
        field_paths: Explicit dot-paths; auto-discovery when empty or None

    Returns:
        Mapping of dot-path to text, omitting paths that yield nothing
    """
    if not field_paths:
        return discover_string_fields(item)

    fields: Dict[str, str] = {}
    for path in field_paths:
        text = resolve_field_text(item, path)
        if text is not None:
            fields[path] = text
    return fields
