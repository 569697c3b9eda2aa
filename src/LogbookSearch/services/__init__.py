"""Search service layer for LogbookSearch.

Provides the backend abstraction and a factory wiring the compiler and
backend client from application configuration.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from LogbookSearch.services.search import LogSearchService, SearchBackend, parse_search_response

if TYPE_CHECKING:
    from LogbookSearch.config import AppConfig


def create_search_service(config: AppConfig) -> LogSearchService:
    """Create a search service backed by the configured cluster.

    Args:
        config: Application configuration.

    Returns:
        Service with a compiler and an HTTP backend client.
    """
    from LogbookSearch.backends import ElasticSearchClient
    from LogbookSearch.compiler import SearchQueryCompiler

    return LogSearchService(
        compiler=SearchQueryCompiler.from_config(config.search),
        backend=ElasticSearchClient(config.elasticsearch.url, timeout=config.elasticsearch.timeout),
    )


__all__ = [
    "LogSearchService",
    "SearchBackend",
    "create_search_service",
    "parse_search_response",
]
