"""Search query compiler for log entries."""

from __future__ import annotations

from LogbookSearch.compiler.compiler import SearchQueryCompiler
from LogbookSearch.compiler.handlers import SearchCriteria, supported_parameter_names

__all__ = [
    "SearchCriteria",
    "SearchQueryCompiler",
    "supported_parameter_names",
]
