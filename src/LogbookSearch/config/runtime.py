"""Runtime configuration: logging behavior."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from LogbookSearch.config.common import check_non_empty, get_section, read_option

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    level: str = "INFO"
    to_file: bool = False
    dir: str = "log"


def load_runtime(raw: Mapping[str, Any]) -> RuntimeConfig:
    """Load the ``log`` section; every key is optional."""
    section = get_section(raw, "log")
    return RuntimeConfig(
        level=read_option(section, "log.level", "INFO", str).strip().upper(),
        to_file=read_option(section, "log.to_file", False, bool),
        dir=read_option(section, "log.dir", "log", str),
    )


def check_runtime(config: RuntimeConfig) -> None:
    """Validate runtime constraints.

    Raises:
        ValueError: If the level is unknown or the log dir is empty.
    """
    if config.level not in _LOG_LEVELS:
        raise ValueError(f"log.level must be one of {list(_LOG_LEVELS)}")
    check_non_empty(config.dir, "log.dir")
