"""
Console output and logging helpers for the Vault CLI.
"""

import json
import logging
from enum import Enum
from typing import Any, List, Optional, Sequence

import click


class OutputFormat(str, Enum):
    """Output formats for listing commands."""

    TABLE = "table"
    JSON = "json"


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure root logging for CLI use."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    logging.basicConfig(format="%(levelname)s: %(message)s")
    logging.getLogger().setLevel(level)
    # urllib3 is noisy at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def print_success(message: str) -> None:
    click.echo(click.style("✓ ", fg="green") + message)


def print_error(message: str, hint: Optional[str] = None) -> None:
    click.echo(click.style("✗ ", fg="red") + message, err=True)
    if hint:
        click.echo(f"  {hint}", err=True)


def print_info(message: str) -> None:
    click.echo(click.style("ℹ ", fg="blue") + message)


def print_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def print_table(headers: List[str], rows: Sequence[Sequence[Any]]) -> None:
    """Print rows as a plain aligned table."""
    cells = [
        [str(value) if value is not None else "-" for value in row[:len(headers)]]
        for row in rows
    ]
    widths = [len(h) for h in headers]
    for row in cells:
        for i, value in enumerate(row):
            widths[i] = max(widths[i], len(value))

    click.echo("  ".join(click.style(h.ljust(widths[i]), bold=True) for i, h in enumerate(headers)))
    click.echo("  ".join("-" * w for w in widths))
    for row in cells:
        click.echo("  ".join(value.ljust(widths[i]) for i, value in enumerate(row)))
