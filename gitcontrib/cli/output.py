"""Console output helpers for CLI status messages.

Chart output is written by the chart engine straight to stdout. These helpers
are for the lines around it:
- ``error`` for failures, on stderr so a partial chart stays clean
- ``success`` for a finished side effect such as a gnuplot export
- ``plain`` for report text such as per-author details
Use structured logging (logger.info, logger.error, etc.) for debugging.
"""

from __future__ import annotations

import typer


def success(message: str, *, prefix: bool = True) -> None:
    """Display a success message in green with a check mark.

    Example:
        success("Plotted 12 authors")
        # Output: ✔ Plotted 12 authors
    """
    formatted = f"✔ {message}" if prefix else message
    typer.secho(formatted, fg=typer.colors.GREEN)


def error(message: str, *, prefix: bool = True, err: bool = True) -> None:
    """Display an error message in red, on stderr by default.

    Args:
        message: The error message to display
        prefix: Whether to include the cross prefix (default: True)
        err: Whether to write to stderr instead of stdout (default: True)
    """
    formatted = f"✘ {message}" if prefix else message
    typer.secho(formatted, fg=typer.colors.RED, err=err)


def plain(message: str) -> None:
    """Display a plain message on stdout."""
    typer.echo(message)
