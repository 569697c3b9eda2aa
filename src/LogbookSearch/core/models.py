from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from datetime import datetime, timedelta, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Sequence

from LogbookSearch.core.query import BoolQuery

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MILLI = timedelta(milliseconds=1)


def to_epoch_millis(instant: datetime) -> int:
    """Convert an aware datetime to integer epoch milliseconds."""
    return (instant - EPOCH) // _ONE_MILLI


class MatchMode(Enum):
    """How free-text terms of description/title/level are matched.

    Selected once per request and applied uniformly to all three fields.
    """

    WILDCARD = "wildcard"
    FUZZY = "fuzzy"


@dataclass(frozen=True, slots=True)
class PropertyPattern:
    """A ``name.attribute.value`` property search pattern.

    Attributes:
        name: Property name pattern, or None for no constraint.
        attribute: Attribute name pattern, or None for no constraint.
        value: Attribute value pattern; only meaningful with ``attribute``.
    """

    name: Optional[str] = None
    attribute: Optional[str] = None
    value: Optional[str] = None


@dataclass(frozen=True, slots=True)
class TemporalRange:
    """Resolved (start, end) window for a temporal filter."""

    start: datetime
    end: datetime

    @property
    def is_ordered(self) -> bool:
        """True when start is strictly before end."""
        return self.start < self.end

    @property
    def start_millis(self) -> int:
        return to_epoch_millis(self.start)

    @property
    def end_millis(self) -> int:
        return to_epoch_millis(self.end)


@dataclass(frozen=True, slots=True)
class SortField:
    field: str
    order: str = "desc"

    def to_dict(self) -> dict[str, Any]:
        return {self.field: {"order": self.order}}


@dataclass(frozen=True, slots=True)
class CompiledSearchRequest:
    """Search request ready to be executed by a search backend.

    Attributes:
        index: Target index pattern (base index name plus ``*``).
        query: Top-level conjunction of all compiled clauses.
        sort: Sort specification, applied in order.
        offset: Pagination offset.
        size: Page size, already clamped to the configured maximum.
        timeout_seconds: Server-side execution timeout.
    """

    index: str
    query: BoolQuery
    sort: Sequence[SortField]
    offset: int
    size: int
    timeout_seconds: int

    def to_body(self) -> dict[str, Any]:
        """Render the JSON request body for the ``_search`` endpoint."""
        return {
            "query": self.query.to_dict(),
            "sort": [sort_field.to_dict() for sort_field in self.sort],
            "from": self.offset,
            "size": self.size,
            "timeout": f"{self.timeout_seconds}s",
        }


@dataclass(frozen=True, slots=True)
class LogHit:
    """One ranked log entry returned by the backend.

    Attributes:
        id: Document identifier.
        score: Relevance score, None when the backend sorts without scoring.
        source: Raw stored document.
    """

    id: str
    score: Optional[float]
    source: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "source", MappingProxyType(dict(self.source)))


@dataclass(frozen=True, slots=True)
class SearchResult:
    total: int
    hits: tuple[LogHit, ...] = ()
