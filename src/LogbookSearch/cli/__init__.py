"""CLI package for LogbookSearch."""

from __future__ import annotations

__all__ = ["CommandRunner", "main"]

from LogbookSearch.cli.runner import CommandRunner
from LogbookSearch.cli.ui import cli


def main() -> None:
    """Run the LogbookSearch CLI (console script entry point)."""
    cli()
