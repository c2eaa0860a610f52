"""Input validation and option normalization."""

import logging
import math
from collections.abc import Mapping
from typing import Any, Dict, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError

from ..core.exceptions import ValidationError
from ..models.options import (
    DEFAULT_B,
    DEFAULT_K1,
    DEFAULT_MAX_RESULTS,
    DEFAULT_THRESHOLD,
    ResolvedOptions,
    SearchOptions,
    SearchOptionsModel,
)

logger = logging.getLogger(__name__)


def validate_items(items: Any) -> None:
    """
    Validate the record collection handed to the index builder.

    Args:
        items: Sequence of mapping records

    Raises:
        ValidationError: If items is not a list/tuple of mappings
    """
    if not isinstance(items, (list, tuple)):
        raise ValidationError(f"Items must be a list of records, got {type(items).__name__}")

    for position, item in enumerate(items):
        if not isinstance(item, Mapping):
            raise ValidationError(
                f"Item at position {position} must be a mapping, got {type(item).__name__}"
            )


def validate_query(query: Any) -> None:
    """
    Validate query text.

    Raises:
        ValidationError: If query is not a string
    """
    if query is None:
        return
    if not isinstance(query, str):
        raise ValidationError(f"Query must be a string, got {type(query).__name__}")


def coerce_options(options: Any) -> SearchOptions:
    """
    Accept options as SearchOptions, a mapping, or None.

    Mappings go through SearchOptionsModel so camelCase keys and loose
    numeric types are accepted.

    Raises:
        ValidationError: If options have the wrong shape
    """
    if options is None:
        return SearchOptions()
    if isinstance(options, SearchOptions):
        return options
    if isinstance(options, Mapping):
        try:
            return SearchOptionsModel.model_validate(dict(options)).to_options()
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid search options: {str(e)}")
    raise ValidationError(f"Options must be SearchOptions or a mapping, got {type(options).__name__}")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and not math.isnan(value)


def resolve_options(options: SearchOptions) -> ResolvedOptions:
    """
    Apply defaults and clamp malformed values instead of failing.

    - negative or NaN threshold -> 0
    - max_results <= 0 -> no limit
    - k1 < 0 -> 0, b clamped into [0, 1]
    - non-positive or NaN boosts are ignored

    Args:
        options: Merged search options

    Returns:
        Concrete option values
    """
    threshold = DEFAULT_THRESHOLD if options.threshold is None else options.threshold
    if not _is_number(threshold) or threshold < 0:
        logger.warning(f"Ignoring invalid threshold {threshold!r}, using {DEFAULT_THRESHOLD}")
        threshold = DEFAULT_THRESHOLD

    max_results: Optional[int] = DEFAULT_MAX_RESULTS if options.max_results is None else options.max_results
    if not _is_number(max_results) or math.isinf(max_results) or max_results <= 0:
        logger.debug(f"max_results={max_results!r} disables the result limit")
        max_results = None
    else:
        max_results = int(max_results)

    k1 = DEFAULT_K1 if options.k1 is None else options.k1
    if not _is_number(k1):
        logger.warning(f"Ignoring invalid k1 {k1!r}, using {DEFAULT_K1}")
        k1 = DEFAULT_K1
    elif k1 < 0:
        logger.warning(f"Clamping k1 {k1} to 0")
        k1 = 0.0

    b = DEFAULT_B if options.b is None else options.b
    if not _is_number(b):
        logger.warning(f"Ignoring invalid b {b!r}, using {DEFAULT_B}")
        b = DEFAULT_B
    elif not 0.0 <= b <= 1.0:
        clamped = min(max(b, 0.0), 1.0)
        logger.warning(f"Clamping b {b} to {clamped}")
        b = clamped

    boost: Dict[str, float] = {}
    for field_path, weight in (options.boost or {}).items():
        if not _is_number(weight) or weight <= 0:
            logger.warning(f"Ignoring invalid boost {weight!r} for field '{field_path}'")
            continue
        boost[field_path] = float(weight)

    validate_field_paths(options.fields)
    field_paths = tuple(options.fields) if options.fields else None

    return ResolvedOptions(
        field_paths=field_paths,
        threshold=float(threshold),
        max_results=max_results,
        sort_by=options.sort_by,
        boost=boost,
        k1=float(k1),
        b=float(b),
        case_sensitive=bool(options.case_sensitive)
    )


def validate_field_paths(paths: Optional[Sequence[str]]) -> None:
    """
    Validate an explicit field list.

    Raises:
        ValidationError: If any path is not a string
    """
    if paths is None:
        return
    if isinstance(paths, str):
        raise ValidationError("Fields must be a list of dot-paths, not a single string")
    for path in paths:
        if not isinstance(path, str):
            raise ValidationError(f"Field path must be a string, got {type(path).__name__}")
