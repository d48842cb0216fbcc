"""Compare command for specguard CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from specguard.cli.constants import (
    EXIT_SUCCESS,
    EXIT_VALIDATION_FAILED,
    OutputFormat,
    SurfaceChoice,
)
from specguard.cli.errors import enable_verbose, exit_for


def register(app: typer.Typer) -> None:
    """Register the compare command with the app."""

    @app.command("compare")
    def compare(
        baseline: Path = typer.Argument(..., help="Baseline contract (usually the authored contract)."),
        candidate: Path = typer.Argument(
            ..., help="Candidate contract (e.g. a model extracted from the implementation)."
        ),
        output_format: Optional[OutputFormat] = typer.Option(
            None, "--output-format", "-o", help="Output format (default: from config or 'rich')."
        ),
        surface: Optional[SurfaceChoice] = typer.Option(
            None, "--surface", help="Surface notation of both files (default: auto-detect)."
        ),
        env: Optional[str] = typer.Option(
            None,
            "--env",
            "-e",
            help="Environment profile from .specguard/config.yml.",
            envvar="SPECGUARD_ENV",
        ),
        verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose errors."),
    ) -> None:
        """
        Detect drift between two versions of a contract.

        Exit code 0 when no FAIL-level drift exists, 1 otherwise.

        Examples:
            specguard compare contract.md extracted.md
            specguard compare v1.md v2.md -o llm
        """
        enable_verbose(verbose)
        try:
            _run_compare(baseline, candidate, output_format, surface, env)
        except typer.Exit:
            raise
        except Exception as e:
            raise exit_for(e, verbose)


def _run_compare(
    baseline: Path,
    candidate: Path,
    output_format: Optional[OutputFormat],
    surface: Optional[SurfaceChoice],
    env: Optional[str],
) -> None:
    from specguard.config.settings import resolve_effective_config
    from specguard.contract.loader import ContractLoader
    from specguard.drift.comparator import compare_models
    from specguard.errors import ComparisonError, ParseError
    from specguard.reporters.json_reporter import render_json
    from specguard.reporters.rich_reporter import print_comparison

    config = resolve_effective_config(
        env_name=env,
        cli_overrides={"output_format": output_format.value if output_format else None},
    )
    surface_kind = surface.value if surface else None
    sides = {}
    for side, path in (("baseline", baseline), ("candidate", candidate)):
        try:
            sides[side] = ContractLoader.from_path(path, surface_kind, strict=config.strict_fields)
        except ParseError as e:
            raise ComparisonError(side, str(e)) from e

    result = compare_models(sides["baseline"], sides["candidate"])

    if config.output_format == "json":
        typer.echo(render_json(result))
    elif config.output_format == "llm":
        typer.echo(result.to_llm())
    else:
        print_comparison(result)

    raise typer.Exit(code=EXIT_VALIDATION_FAILED if result.has_drift else EXIT_SUCCESS)
