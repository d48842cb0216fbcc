# src/specguard/cli/main.py
from __future__ import annotations

"""
specguard CLI — behavioral contract validation and drift detection.

Thin layer: parse args → call engine → print via reporters.
"""

from pathlib import Path
from typing import List, Optional

import typer

from specguard.cli.commands import compare as compare_cmd
from specguard.cli.constants import (
    EXIT_CONFIG_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_FAILED,
    OutputFormat,
    SurfaceChoice,
)
from specguard.cli.errors import enable_verbose, exit_for
from specguard.version import VERSION

app = typer.Typer(help="specguard CLI — behavioral contract validation and drift detection")


def _print_version(value: Optional[bool]) -> None:
    if value:
        typer.echo(f"specguard {VERSION}")
        raise typer.Exit(code=0)


@app.callback()
def _main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        help="Show the specguard version and exit.",
        callback=_print_version,
        is_eager=True,
    )
) -> None:
    pass


def _exit_code(reports, fail_on_warnings: bool) -> int:
    for report in reports:
        if not report.passed:
            return EXIT_VALIDATION_FAILED
        if fail_on_warnings and report.warnings:
            return EXIT_VALIDATION_FAILED
    return EXIT_SUCCESS


@app.command("validate")
def validate(
    paths: List[Path] = typer.Argument(..., help="Contract file(s) to validate."),
    output_format: Optional[OutputFormat] = typer.Option(
        None, "--output-format", "-o", help="Output format (default: from config or 'rich')."
    ),
    surface: Optional[SurfaceChoice] = typer.Option(
        None, "--surface", help="Surface notation (default: auto-detect)."
    ),
    strict: Optional[bool] = typer.Option(
        None, "--strict/--no-strict", help="Treat unknown field names as parse errors."
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
    Validate one or more behavioral contracts.

    Exit codes:
      0  VALID or VALID_WITH_WARNINGS
      1  at least one contract is INVALID
      2  config error, missing file, or unreadable contract
      3  unexpected error

    Examples:
        specguard validate contracts/apply_coupon.md
        specguard validate contracts/*.md -o json
    """
    enable_verbose(verbose)
    try:
        from specguard.config.settings import resolve_effective_config
        from specguard.engine.batch import validate_many
        from specguard.engine.engine import ValidationEngine
        from specguard.reporters.json_reporter import render_json
        from specguard.reporters.rich_reporter import print_batch, print_report

        config = resolve_effective_config(
            env_name=env,
            cli_overrides={
                "output_format": output_format.value if output_format else None,
                "strict_fields": strict,
            },
        )
        engine = ValidationEngine(config)
        fmt = config.output_format
        surface_kind = surface.value if surface else None

        if len(paths) == 1:
            report = engine.validate(paths[0], surface=surface_kind)
            if fmt == "json":
                typer.echo(render_json(report))
            elif fmt == "llm":
                typer.echo(report.to_llm())
            else:
                print_report(report)
            raise typer.Exit(code=_exit_code([report], config.fail_on_warnings))

        for p in paths:
            if not p.is_file():
                raise FileNotFoundError(2, "Contract file not found", str(p))
        items = validate_many(paths, engine=engine)
        if fmt == "json":
            typer.echo(render_json(items))
        elif fmt == "llm":
            typer.echo("\n\n".join(
                i.report.to_llm() if i.report is not None else f"PARSE_ERROR: {i.source}: {i.error}"
                for i in items
            ))
        else:
            print_batch(items)
        if any(i.error is not None for i in items):
            raise typer.Exit(code=EXIT_CONFIG_ERROR)
        raise typer.Exit(code=_exit_code([i.report for i in items], config.fail_on_warnings))

    except typer.Exit:
        raise

    except Exception as e:
        raise exit_for(e, verbose)


compare_cmd.register(app)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
