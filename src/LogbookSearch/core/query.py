"""Query tree primitives for the log search backend.

Each node is an immutable value rendering itself to the backend's JSON query
DSL via ``to_dict()``. The compiler only ever builds trees out of these
primitives:

- `BoolQuery`        -> ``bool.must``   (every clause required)
- `DisMaxQuery`      -> ``dis_max``     (any clause, best score wins)
- `WildcardQuery`    -> ``wildcard``    (``*``/``?`` glob match, not escaped)
- `FuzzyQuery`       -> ``fuzzy``       (edit-distance tolerant match)
- `MatchPhraseQuery` -> ``match_phrase`` (exact phrase)
- `RangeQuery`       -> ``range``       (inclusive bounds, epoch millis)
- `NestedQuery`      -> ``nested``      (scoped to one sub-document)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, Sequence


class Query(Protocol):
    """Protocol shared by every query tree node."""

    def to_dict(self) -> dict[str, Any]:
        """Render the node to the backend JSON DSL."""
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class BoolQuery:
    """Conjunction: all ``must`` clauses are required."""

    must: Sequence[Query] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"bool": {"must": [clause.to_dict() for clause in self.must]}}


@dataclass(frozen=True, slots=True)
class DisMaxQuery:
    """Any-of: satisfied if one sub-query matches."""

    queries: Sequence[Query] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"dis_max": {"queries": [query.to_dict() for query in self.queries]}}


@dataclass(frozen=True, slots=True)
class WildcardQuery:
    field: str
    value: str

    def to_dict(self) -> dict[str, Any]:
        return {"wildcard": {self.field: {"value": self.value}}}


@dataclass(frozen=True, slots=True)
class FuzzyQuery:
    field: str
    value: str

    def to_dict(self) -> dict[str, Any]:
        return {"fuzzy": {self.field: {"value": self.value}}}


@dataclass(frozen=True, slots=True)
class MatchPhraseQuery:
    field: str
    phrase: str

    def to_dict(self) -> dict[str, Any]:
        return {"match_phrase": {self.field: {"query": self.phrase}}}


@dataclass(frozen=True, slots=True)
class RangeQuery:
    """Inclusive range on a date field, bounds in epoch milliseconds."""

    field: str
    gte: int
    lte: int

    def to_dict(self) -> dict[str, Any]:
        return {"range": {self.field: {"gte": self.gte, "lte": self.lte}}}


@dataclass(frozen=True, slots=True)
class NestedQuery:
    """Constraint evaluated against one element of a nested array field.

    ``score_mode`` defaults to ``none`` so structural filters (tags, logbooks,
    properties, events) never contribute to relevance ranking.
    """

    path: str
    query: Query
    score_mode: str = "none"

    def to_dict(self) -> dict[str, Any]:
        return {
            "nested": {
                "path": self.path,
                "query": self.query.to_dict(),
                "score_mode": self.score_mode,
            }
        }
