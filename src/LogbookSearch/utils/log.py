"""LogbookSearch logging utilities.

One package logger, ``LogbookSearch``, shared by the compiler, the backend
client and the CLI. Records are prefixed with a timestamp and a four-letter
level tag.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Final, Optional, TextIO


_LEVEL_TAGS: Final[dict[int, str]] = {
    logging.DEBUG: "DEBG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERRO",
    logging.CRITICAL: "CRIT",
}


class _LevelTagFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 - stdlib name
        record.leveltag = _LEVEL_TAGS.get(record.levelno, record.levelname[:4])
        return super().format(record)


log = logging.getLogger("LogbookSearch")


def configure_logging(
    *,
    level: str = "INFO",
    action: Optional[str] = None,
    log_to_file: bool = False,
    log_dir: str = "log",
    stream: Optional[TextIO] = None,
) -> None:
    """Configure the LogbookSearch logger.

    Format: ``mm-dd HH:MM:SS [<TAG>] <message>``.

    Args:
        level: Console logging level name (e.g. INFO, DEBUG).
        action: CLI action name; names the log file when logging to file.
        log_to_file: Whether to mirror DEBUG-level logs to a file.
        log_dir: Base directory for log files.
        stream: Console stream, stderr by default.
    """
    resolved_level = getattr(logging, (level or "INFO").upper(), logging.INFO)
    formatter = _LevelTagFormatter(
        fmt="%(asctime)s [%(leveltag)s] %(message)s",
        datefmt="%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(stream)
    console.setLevel(resolved_level)
    console.setFormatter(formatter)
    handlers: list[logging.Handler] = [console]

    if log_to_file and action:
        log_path = Path(log_dir or "log") / f"{action}_{datetime.now():%m%d%H%M%S}.log"
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    log.handlers.clear()
    for handler in handlers:
        log.addHandler(handler)
    log.setLevel(logging.DEBUG if len(handlers) > 1 else resolved_level)
    log.propagate = False
