"""Search backend connection configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping

from LogbookSearch.config.common import check_non_empty, check_positive, get_section, read_option

DEFAULT_URL = "http://localhost:9200"
DEFAULT_URL_ENV = "LOGBOOK_ES_URL"


@dataclass(frozen=True, slots=True)
class ElasticsearchConfig:
    """Store validated backend connection settings.

    Attributes:
        url: Base URL of the search cluster.
        url_env: Environment variable overriding ``url`` when set.
        timeout: HTTP client timeout in seconds.
    """

    url: str = DEFAULT_URL
    url_env: str = DEFAULT_URL_ENV
    timeout: float = 30.0


def load_elasticsearch(raw: Mapping[str, Any]) -> ElasticsearchConfig:
    """Load the ``elasticsearch`` section, resolving the URL override from env."""
    section = get_section(raw, "elasticsearch")
    url_env = read_option(section, "elasticsearch.url_env", DEFAULT_URL_ENV, str)
    url = read_option(section, "elasticsearch.url", DEFAULT_URL, str)
    return ElasticsearchConfig(
        url=_url_from_env(url_env) or url,
        url_env=url_env,
        timeout=read_option(section, "elasticsearch.timeout", 30.0, float),
    )


def check_elasticsearch(config: ElasticsearchConfig) -> None:
    """Validate backend constraints.

    Raises:
        ValueError: If the URL is empty or not http(s), or timeout is not positive.
    """
    check_non_empty(config.url, "elasticsearch.url")
    if not config.url.startswith(("http://", "https://")):
        raise ValueError("elasticsearch.url must start with http:// or https://")
    check_positive(config.timeout, "elasticsearch.timeout")


def _url_from_env(url_env: str) -> str:
    if not url_env.strip():
        return ""
    return os.getenv(url_env, "").strip()
