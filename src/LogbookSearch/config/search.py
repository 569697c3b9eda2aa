"""Search compiler configuration: target index and page-size policy."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from LogbookSearch.config.common import check_non_empty, check_positive, get_section, read_option

DEFAULT_INDEX = "olog_logs"
DEFAULT_PAGE_SIZE = 100
MAX_PAGE_SIZE = 1000


@dataclass(frozen=True, slots=True)
class SearchConfig:
    """Settings injected into the query compiler at startup.

    Attributes:
        index: Base log index name; searches span ``<index>*``.
        default_size: Page size when the request has no valid ``limit``.
        max_size: Upper bound for every page size.
    """

    index: str = DEFAULT_INDEX
    default_size: int = DEFAULT_PAGE_SIZE
    max_size: int = MAX_PAGE_SIZE


def load_search(raw: Mapping[str, Any]) -> SearchConfig:
    """Load the ``search`` section, with defaults for missing keys.

    Raises:
        TypeError: If config types are invalid.
    """
    section = get_section(raw, "search")
    return SearchConfig(
        index=read_option(section, "search.index", DEFAULT_INDEX, str).strip(),
        default_size=read_option(section, "search.default_size", DEFAULT_PAGE_SIZE, int),
        max_size=read_option(section, "search.max_size", MAX_PAGE_SIZE, int),
    )


def check_search(config: SearchConfig) -> None:
    """Validate search constraints.

    Raises:
        ValueError: If the index is empty or a page size is not positive.
    """
    check_non_empty(config.index, "search.index")
    check_positive(config.default_size, "search.default_size")
    check_positive(config.max_size, "search.max_size")
