"""Search option models with defaults and merging."""

import logging
from dataclasses import dataclass, field, fields as dataclass_fields, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.0
DEFAULT_MAX_RESULTS = 50
DEFAULT_K1 = 1.2
DEFAULT_B = 0.75


class SortOrder(str, Enum):
    """Result ordering direction for property sorts."""
    ASC = "ASC"
    DESC = "DESC"

    @classmethod
    def parse(cls, value: Any) -> "SortOrder":
        """Case-insensitive lookup; unknown directions fall back to ASC."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            logger.warning(f"Unknown sort order {value!r}, using ASC")
            return cls.ASC


@dataclass(frozen=True)
class SortBy:
    """
    Order results by a property of the original item.

    Attributes:
        property: Dot-path of the item property to sort on
        order: Sort direction, ascending by default
    """
    property: str
    order: SortOrder = SortOrder.ASC

    def __post_init__(self) -> None:
        object.__setattr__(self, "order", SortOrder.parse(self.order))

    @property
    def descending(self) -> bool:
        return self.order is SortOrder.DESC


@dataclass(frozen=True)
class SearchOptions:
    """
    Index and query configuration.

    Every attribute is optional; None means "not set" so that query-time
    overrides only replace the keys they actually carry.

    Attributes:
        fields: Dot-paths to index and search (None = auto-discover strings)
        threshold: Minimum BM25 score for a result
        max_results: Maximum number of results, applied after sorting
        sort_by: Order by an item property instead of by score
        boost: Per-field score multipliers (unlisted fields weigh 1.0)
        k1: BM25 term-frequency saturation
        b: BM25 length normalization
        case_sensitive: Keep token case; fixed when the index is built
    """
    fields: Optional[Sequence[str]] = None
    threshold: Optional[float] = None
    max_results: Optional[int] = None
    sort_by: Optional[SortBy] = None
    boost: Optional[Mapping[str, float]] = None
    k1: Optional[float] = None
    b: Optional[float] = None
    case_sensitive: Optional[bool] = None

    def __post_init__(self) -> None:
        if isinstance(self.sort_by, Mapping):
            object.__setattr__(self, "sort_by", SortBy(**self.sort_by))
        # Detach from the caller's containers; an index keeps these as defaults
        if isinstance(self.fields, (list, tuple)):
            object.__setattr__(self, "fields", tuple(self.fields))
        if isinstance(self.boost, Mapping):
            object.__setattr__(self, "boost", MappingProxyType(dict(self.boost)))

    def merged_with(self, overrides: Optional["SearchOptions"]) -> "SearchOptions":
        """Return a copy where every key set on ``overrides`` wins."""
        if overrides is None:
            return self
        return replace(self, **overrides.to_dict())

    def to_dict(self) -> Dict[str, Any]:
        """Return only the keys that are set."""
        options: Dict[str, Any] = {}
        for f in dataclass_fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if f.name == "fields" and isinstance(value, tuple):
                value = list(value)
            elif f.name == "boost" and isinstance(value, Mapping):
                value = dict(value)
            options[f.name] = value
        return options


@dataclass(frozen=True)
class ResolvedOptions:
    """Concrete option values after defaults and clamping."""
    field_paths: Optional[Tuple[str, ...]] = None
    threshold: float = DEFAULT_THRESHOLD
    max_results: Optional[int] = DEFAULT_MAX_RESULTS
    sort_by: Optional[SortBy] = None
    boost: Dict[str, float] = field(default_factory=dict)
    k1: float = DEFAULT_K1
    b: float = DEFAULT_B
    case_sensitive: bool = False

    def boost_for(self, field_path: str) -> float:
        return self.boost.get(field_path, 1.0)


class SortByModel(BaseModel):
    """Pydantic model for sort configuration in API contexts."""

    model_config = ConfigDict(extra="ignore")

    property: str = Field(..., description="Dot-path of the property to sort on")
    order: SortOrder = Field(SortOrder.ASC, description="ASC or DESC")

    @field_validator("order", mode="before")
    @classmethod
    def normalize_order(cls, v: Any) -> SortOrder:
        """Accept any case; unknown directions sort ascending."""
        return SortOrder.parse(v)


class SearchOptionsModel(BaseModel):
    """
    Pydantic model for option validation in API contexts.

    Accepts snake_case or camelCase keys (``max_results`` / ``maxResults``)
    so JSON-shaped configuration from connector code can be passed through.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore"
    )

    field_paths: Optional[List[str]] = Field(None, alias="fields", description="Fields to index")
    threshold: Optional[float] = Field(None, description="Minimum BM25 score")
    max_results: Optional[int] = Field(None, description="Maximum results to return")
    sort_by: Optional[SortByModel] = Field(None, description="Property sort")
    boost: Optional[Dict[str, float]] = Field(None, description="Per-field boosts")
    k1: Optional[float] = Field(None, description="BM25 k1")
    b: Optional[float] = Field(None, description="BM25 b")
    case_sensitive: Optional[bool] = Field(None, description="Case sensitive tokens")

    @field_validator("field_paths")
    @classmethod
    def validate_field_paths(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        """Drop blank paths and surrounding whitespace."""
        if v is None:
            return v
        return [path.strip() for path in v if path and path.strip()]

    def to_options(self) -> SearchOptions:
        """Convert to SearchOptions dataclass."""
        sort_by = None
        if self.sort_by is not None:
            sort_by = SortBy(property=self.sort_by.property, order=self.sort_by.order)

        return SearchOptions(
            fields=self.field_paths,
            threshold=self.threshold,
            max_results=self.max_results,
            sort_by=sort_by,
            boost=self.boost,
            k1=self.k1,
            b=self.b,
            case_sensitive=self.case_sensitive
        )
