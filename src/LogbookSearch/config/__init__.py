from __future__ import annotations

"""Public configuration API for LogbookSearch."""

from LogbookSearch.config.app import (
    DEFAULT_CONFIG_PATH,
    AppConfig,
    load_config,
    load_config_with_defaults,
    merge_config_dicts,
    parse_config_dict,
)
from LogbookSearch.config.elastic import ElasticsearchConfig
from LogbookSearch.config.runtime import RuntimeConfig
from LogbookSearch.config.search import SearchConfig

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "AppConfig",
    "ElasticsearchConfig",
    "RuntimeConfig",
    "SearchConfig",
    "load_config",
    "load_config_with_defaults",
    "merge_config_dicts",
    "parse_config_dict",
]
