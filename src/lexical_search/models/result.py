"""Search result data model."""

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Mapping, TypeVar

T = TypeVar("T", bound=Mapping[str, Any])


@dataclass
class SearchResult(Generic[T]):
    """
    Ranked search hit.

    Attributes:
        item: The original item, by reference
        score: BM25 relevance score (0 for the empty-query listing)
        matches: Query terms that matched the item
    """
    item: T
    score: float
    matches: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate search result."""
        if self.score < 0:
            raise ValueError("Score cannot be negative")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "item": self.item,
            "score": round(self.score, 4),
            "matches": list(self.matches)
        }
