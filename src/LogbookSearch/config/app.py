from __future__ import annotations

"""Application config assembly and YAML loading entrypoints."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

from LogbookSearch.config.elastic import ElasticsearchConfig, check_elasticsearch, load_elasticsearch
from LogbookSearch.config.runtime import RuntimeConfig, check_runtime, load_runtime
from LogbookSearch.config.search import SearchConfig, check_search, load_search

DEFAULT_CONFIG_PATH = Path("config/default.yml")


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application root configuration."""

    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    elasticsearch: ElasticsearchConfig = field(default_factory=ElasticsearchConfig)


def parse_config_dict(raw: Mapping[str, Any]) -> AppConfig:
    """Parse a normalized mapping into AppConfig."""
    runtime = load_runtime(raw)
    search = load_search(raw)
    elasticsearch = load_elasticsearch(raw)

    check_runtime(runtime)
    check_search(search)
    check_elasticsearch(elasticsearch)

    return AppConfig(runtime=runtime, search=search, elasticsearch=elasticsearch)


def load_config(path: Path) -> AppConfig:
    """Load one YAML config file without default merge."""
    return parse_config_dict(parse_yaml(path.read_text(encoding="utf-8")))


def load_config_with_defaults(config_path: Path, default_path: Path = DEFAULT_CONFIG_PATH) -> AppConfig:
    """Load config by merging the defaults file with an optional override.

    A missing defaults file falls back to built-in defaults.
    """
    base = parse_yaml(default_path.read_text(encoding="utf-8")) if default_path.is_file() else {}
    if config_path == default_path:
        return parse_config_dict(base)
    override = parse_yaml(config_path.read_text(encoding="utf-8"))
    return parse_config_dict(merge_config_dicts(base, override))


def parse_yaml(text: str) -> dict[str, Any]:
    """Parse raw YAML text into a mapping."""
    data = yaml.safe_load(text) or {}
    if not isinstance(data, Mapping):
        raise ValueError("Config root must be a mapping/object")
    return dict(data)


def merge_config_dicts(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-merge two config mappings, override winning on leaf keys."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], Mapping) and isinstance(value, Mapping):
            merged[key] = merge_config_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged
