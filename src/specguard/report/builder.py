# src/specguard/report/builder.py
"""
Report aggregation: ordering and roll-up status.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from specguard.api.compare import ComparisonResult
from specguard.api.results import ValidationReport
from specguard.contract.types import SurfaceKind
from specguard.report.types import Finding, OverallStatus, Severity


def order_findings(findings: Iterable[Finding]) -> List[Finding]:
    """Sort by (severity rank, field rank); emission order breaks ties (stable sort)."""
    return sorted(findings, key=lambda f: (f.severity.rank, f.location.field.rank))


def overall_status(findings: Iterable[Finding]) -> OverallStatus:
    severities = {f.severity for f in findings}
    if Severity.FAIL in severities:
        return OverallStatus.INVALID
    if Severity.WARN in severities:
        return OverallStatus.VALID_WITH_WARNINGS
    return OverallStatus.VALID


def build_report(
    findings: Iterable[Finding],
    *,
    contract_id: Optional[str] = None,
    surface: Optional[SurfaceKind] = None,
    source: Optional[str] = None,
    comparison: Optional[ComparisonResult] = None,
) -> ValidationReport:
    """
    Concatenate validator findings with the comparison's findings (if any),
    order them and compute the roll-up status.
    """
    collected = list(findings)
    if comparison is not None:
        collected.extend(comparison.findings)
    ordered = order_findings(collected)
    return ValidationReport(
        findings=ordered,
        overall_status=overall_status(ordered),
        contract_id=contract_id,
        surface=surface,
        source=source,
        comparison=comparison,
    )
