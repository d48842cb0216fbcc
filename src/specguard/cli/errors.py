# src/specguard/cli/errors.py
"""Map exceptions raised under a CLI command to messages and exit codes."""

from __future__ import annotations

import os
import traceback

import typer

from specguard.cli.constants import EXIT_CONFIG_ERROR, EXIT_RUNTIME_ERROR
from specguard.errors import ComparisonError, ConfigError, ParseError, format_error_for_cli
from specguard.logging import get_logger, log_exception

_logger = get_logger(__name__)


def enable_verbose(verbose: bool) -> None:
    if verbose:
        os.environ["SPECGUARD_VERBOSE"] = "1"


def exit_for(exc: Exception, verbose: bool) -> typer.Exit:
    """Print a one-line error (plus traceback with --verbose) and return the Exit to raise."""
    msg = format_error_for_cli(exc)
    log_exception(_logger, "Command failed", exc)
    if isinstance(exc, (ParseError, ComparisonError, ConfigError, FileNotFoundError)):
        code = EXIT_CONFIG_ERROR
        typer.secho(f"Error: {msg}", fg=typer.colors.RED, err=True)
    else:
        code = EXIT_RUNTIME_ERROR
        if verbose:
            typer.secho(f"[RUNTIME_ERROR] {msg}", fg=typer.colors.RED, err=True)
        else:
            typer.secho(
                "An unexpected error occurred. Use --verbose for details.",
                fg=typer.colors.RED,
                err=True,
            )
    if verbose:
        typer.secho(f"\n{traceback.format_exc()}", fg=typer.colors.YELLOW, err=True)
    return typer.Exit(code=code)
