"""Search backend clients."""

from __future__ import annotations

from LogbookSearch.backends.elastic import ElasticSearchClient

__all__ = ["ElasticSearchClient"]
