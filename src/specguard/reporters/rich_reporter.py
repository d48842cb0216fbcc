# src/specguard/reporters/rich_reporter.py
from __future__ import annotations

from typing import List, Optional

from rich.console import Console
from rich.table import Table

from specguard.api.compare import ComparisonResult, DriftStatus
from specguard.api.results import BatchItem, ValidationReport
from specguard.report.types import OverallStatus, Severity

console = Console()

_SEVERITY_STYLE = {
    Severity.FAIL: "bold red",
    Severity.WARN: "yellow",
    Severity.INFO: "cyan",
}
_STATUS_STYLE = {
    DriftStatus.MATCH: "green",
    DriftStatus.DRIFT: "bold red",
    DriftStatus.MISSING: "red",
    DriftStatus.UNDOCUMENTED: "yellow",
}


def report_success(msg: str, out: Optional[Console] = None):
    (out or console).print(f"[bold green]✅ {msg}[/bold green]")


def report_warning(msg: str, out: Optional[Console] = None):
    (out or console).print(f"[bold yellow]⚠️  {msg}[/bold yellow]")


def report_failure(msg: str, out: Optional[Console] = None):
    (out or console).print(f"[bold red]❌ {msg}[/bold red]")


def _findings_table(findings) -> Table:
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Severity")
    table.add_column("Code")
    table.add_column("Location")
    table.add_column("Message", overflow="fold")
    for f in findings:
        style = _SEVERITY_STYLE[f.severity]
        table.add_row(
            f"[{style}]{f.severity.value.upper()}[/{style}]",
            f.code,
            str(f.location),
            f.message,
        )
    return table


def print_report(report: ValidationReport, out: Optional[Console] = None) -> None:
    out = out or console
    label = report.contract_id or report.source or "contract"
    if report.findings:
        out.print(_findings_table(report.findings))
    if report.comparison is not None:
        print_comparison(report.comparison, out, findings=False)

    counts = f"{len(report.failures)} fail, {len(report.warnings)} warn, {len(report.infos)} info"
    if report.overall_status is OverallStatus.VALID:
        report_success(f"{label}: VALID", out)
    elif report.overall_status is OverallStatus.VALID_WITH_WARNINGS:
        report_warning(f"{label}: VALID WITH WARNINGS ({counts})", out)
    else:
        report_failure(f"{label}: INVALID ({counts})", out)


def print_comparison(
    result: ComparisonResult,
    out: Optional[Console] = None,
    findings: bool = True,
) -> None:
    out = out or console
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Status")
    table.add_column("Baseline")
    table.add_column("Candidate")
    table.add_column("Rule", overflow="fold")
    for rc in result.rules + result.undocumented:
        style = _STATUS_STYLE[rc.status]
        status = rc.status.value.upper() + (" ↕" if rc.reordered else "")
        rule = rc.baseline or rc.candidate
        table.add_row(
            f"[{style}]{status}[/{style}]",
            "-" if rc.baseline_position is None else str(rc.baseline_position),
            "-" if rc.candidate_position is None else str(rc.candidate_position),
            rule.render(),
        )
    out.print(table)

    if not findings:
        return
    if result.findings:
        out.print(_findings_table(result.findings))
    if result.has_drift:
        report_failure(f"{result.baseline_id} vs {result.candidate_id}: DRIFT", out)
    else:
        report_success(f"{result.baseline_id} vs {result.candidate_id}: no blocking drift", out)


def print_batch(items: List[BatchItem], out: Optional[Console] = None) -> None:
    out = out or console
    for item in items:
        if item.error is not None:
            report_failure(f"{item.source}: parse error: {item.error}", out)
        else:
            print_report(item.report, out)
