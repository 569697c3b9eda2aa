"""Command runner for coordinating CLI execution.

Configures logging, gathers search parameters from CLI options, and turns
any failure into ``click.Abort`` after logging it.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Optional, Sequence

import click

from LogbookSearch.compiler import SearchQueryCompiler
from LogbookSearch.config import AppConfig
from LogbookSearch.core.params import parse_query_string, parse_timestamp
from LogbookSearch.services import create_search_service
from LogbookSearch.utils.log import configure_logging, log


def collect_parameters(pairs: Sequence[str], query_string: Optional[str] = None) -> dict[str, list[str]]:
    """Merge ``key=value`` options and a query string into one parameter map.

    A pair without ``=`` is a bare flag with an empty value.
    """
    params = parse_query_string(query_string) if query_string else {}
    for pair in pairs:
        key, _, value = pair.partition("=")
        params.setdefault(key, []).append(value)
    return params


class CommandRunner:
    """Run CLI commands against one application configuration."""

    def __init__(self, config: AppConfig) -> None:
        self.config = config

    def run_compile(self, action: str, params: dict[str, list[str]], now: Optional[str] = None) -> None:
        """Compile parameters and print the request as JSON.

        Raises:
            click.Abort: When compilation fails.
        """
        self._configure_logging(action)
        try:
            compiler = SearchQueryCompiler.from_config(self.config.search)
            request = compiler.compile(params, now=_parse_now(now))
            click.echo(json.dumps({"index": request.index, "body": request.to_body()}, indent=2))
        except Exception as e:  # noqa: BLE001 - cli boundary
            log.error("Compile failed: %s", e)
            raise click.Abort from e

    def run_search(self, action: str, params: dict[str, list[str]], now: Optional[str] = None) -> None:
        """Execute a search and print one JSON line per hit.

        Raises:
            click.Abort: When compilation or the backend request fails.
        """
        self._configure_logging(action)
        service = create_search_service(self.config)
        try:
            result = service.search(params, now=_parse_now(now))
            for hit in result.hits:
                click.echo(json.dumps({"id": hit.id, "score": hit.score, **hit.source}, default=str))
            log.info("Returned %d of %d log entries", len(result.hits), result.total)
        except Exception as e:  # noqa: BLE001 - cli boundary
            log.error("Search failed: %s", e)
            raise click.Abort from e
        finally:
            service.close()

    def _configure_logging(self, action: str) -> None:
        configure_logging(
            level=self.config.runtime.level,
            action=action,
            log_to_file=self.config.runtime.to_file,
            log_dir=self.config.runtime.dir,
        )


def _parse_now(value: Optional[str]) -> Optional[datetime]:
    return parse_timestamp("now", value) if value else None
