"""Search service: compile parameters and execute them on a backend."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Protocol

from LogbookSearch.compiler import SearchQueryCompiler
from LogbookSearch.core.models import CompiledSearchRequest, LogHit, SearchResult
from LogbookSearch.core.params import RawParameters
from LogbookSearch.utils.log import log


class SearchBackend(Protocol):
    """Protocol for a backend executing compiled search requests."""

    name: str

    def execute(self, request: CompiledSearchRequest) -> Mapping[str, Any]:
        """Execute the request and return the raw response body."""
        raise NotImplementedError

    def close(self) -> None:
        """Close resources held by the backend."""
        raise NotImplementedError


@dataclass(slots=True)
class LogSearchService:
    """Application service searching log entries.

    Backend errors are not caught here; they reach the caller unchanged.
    """

    compiler: SearchQueryCompiler
    backend: SearchBackend

    def search(self, params: RawParameters, *, now: datetime | None = None) -> SearchResult:
        """Search log entries matching the given parameters.

        Args:
            params: Raw multi-value search parameters.
            now: Optional evaluation time for the default range end.

        Returns:
            Total hit count and hits in backend order.

        Raises:
            MalformedInputError: If a temporal parameter is malformed.
        """
        request = self.compiler.compile(params, now=now)
        response = self.backend.execute(request)
        result = parse_search_response(response)
        log.info("Search completed: index=%s total=%d returned=%d", request.index, result.total, len(result.hits))
        return result

    def close(self) -> None:
        close_func = getattr(self.backend, "close", None)
        if callable(close_func):
            close_func()


def parse_search_response(response: Mapping[str, Any]) -> SearchResult:
    """Map a raw ``_search`` response body to a `SearchResult`."""
    hits_section = response.get("hits") or {}
    raw_hits = hits_section.get("hits") or []
    hits = tuple(
        LogHit(
            id=str(raw.get("_id", "")),
            score=raw.get("_score"),
            source=raw.get("_source") or {},
        )
        for raw in raw_hits
    )
    return SearchResult(total=_total_hits(hits_section.get("total"), len(hits)), hits=hits)


def _total_hits(total: Any, fallback: int) -> int:
    """Read the total count; newer backends wrap it as ``{"value": n}``."""
    if isinstance(total, Mapping):
        total = total.get("value")
    if isinstance(total, bool) or not isinstance(total, int):
        return fallback
    return total
