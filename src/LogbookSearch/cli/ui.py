"""Click CLI interface definitions."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click
from dotenv import load_dotenv

from LogbookSearch.cli.runner import CommandRunner, collect_parameters
from LogbookSearch.config import DEFAULT_CONFIG_PATH, load_config_with_defaults


def _search_options(func):
    func = click.option(
        "--now",
        default=None,
        help="Evaluation time (yyyy-MM-dd HH:mm:ss.SSS) used as the default range end.",
    )(func)
    func = click.option(
        "-q",
        "--query",
        "query_string",
        default=None,
        help="URL query string, e.g. 'desc=beam&tags=ops|rf&fuzzy'.",
    )(func)
    func = click.option(
        "-p",
        "--param",
        "pairs",
        multiple=True,
        metavar="KEY=VALUE",
        help="Search parameter; repeat for multiple values.",
    )(func)
    return func


@click.group(help="LogbookSearch: compile and run log entry searches.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    help="Path to YAML config file, merged over the defaults.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path) -> None:
    """CLI entry group.

    Loads environment variables from a .env file before reading config, so
    the backend URL override can live there.
    """
    load_dotenv()
    ctx.obj = load_config_with_defaults(config_path)


@cli.command("compile")
@_search_options
@click.pass_context
def compile_cmd(ctx: click.Context, pairs: tuple[str, ...], query_string: Optional[str], now: Optional[str]) -> None:
    """Print the compiled search request without executing it."""
    CommandRunner(ctx.obj).run_compile(ctx.command.name, collect_parameters(pairs, query_string), now)


@cli.command("search")
@_search_options
@click.pass_context
def search_cmd(ctx: click.Context, pairs: tuple[str, ...], query_string: Optional[str], now: Optional[str]) -> None:
    """Run the search against the configured backend."""
    CommandRunner(ctx.obj).run_search(ctx.command.name, collect_parameters(pairs, query_string), now)
