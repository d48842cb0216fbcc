# src/specguard/api/results.py
"""
Public API result types for specguard.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from specguard.api.compare import ComparisonResult
from specguard.contract.types import SurfaceKind
from specguard.errors import ParseError
from specguard.report.types import Finding, OverallStatus, Severity


@dataclass
class ValidationReport:
    """
    Result of validating one contract.

    Properties:
        findings: Ordered findings (FAIL, then WARN, then INFO)
        overall_status: VALID | VALID_WITH_WARNINGS | INVALID
        contract_id: Declared identifier (function name, else metadata name)
        surface: Notation the contract was written in, if parsed from text
        source: Caller-supplied label (usually a path)
        comparison: Drift comparison, when validation ran in comparison mode
        passed: True unless overall_status is INVALID
        failures / warnings / infos: findings by severity
    """

    findings: List[Finding]
    overall_status: OverallStatus
    contract_id: Optional[str] = None
    surface: Optional[SurfaceKind] = None
    source: Optional[str] = None
    comparison: Optional[ComparisonResult] = None

    def __repr__(self) -> str:
        label = self.contract_id or self.source or "contract"
        parts = [f"ValidationReport({label}) {self.overall_status.value.upper()}"]
        parts.append(
            f"  Failures: {len(self.failures)} | Warnings: {len(self.warnings)} | Info: {len(self.infos)}"
        )
        codes = [f.code for f in self.failures[:3]]
        if codes:
            parts.append(f"  Failing: {', '.join(codes)}")
            if len(self.failures) > 3:
                parts.append(f"    ... and {len(self.failures) - 3} more")
        return "\n".join(parts)

    @property
    def passed(self) -> bool:
        return self.overall_status is not OverallStatus.INVALID

    def _by_severity(self, severity: Severity) -> List[Finding]:
        return [f for f in self.findings if f.severity is severity]

    @property
    def failures(self) -> List[Finding]:
        return self._by_severity(Severity.FAIL)

    @property
    def warnings(self) -> List[Finding]:
        return self._by_severity(Severity.WARN)

    @property
    def infos(self) -> List[Finding]:
        return self._by_severity(Severity.INFO)

    @property
    def codes(self) -> List[str]:
        return [f.code for f in self.findings]

    def has(self, code: str, index: Optional[int] = None) -> bool:
        """True when a finding with `code` (and, if given, location index) exists."""
        return any(
            f.code == code and (index is None or f.location.index == index)
            for f in self.findings
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        d: Dict[str, Any] = {
            "contract_id": self.contract_id,
            "overall_status": self.overall_status.value,
            "surface": self.surface.value if self.surface is not None else None,
            "source": self.source,
            "counts": {
                "fail": len(self.failures),
                "warn": len(self.warnings),
                "info": len(self.infos),
            },
            "findings": [f.to_dict() for f in self.findings],
        }
        if self.comparison is not None:
            d["comparison"] = self.comparison.to_dict()
        return d

    def to_json(self, indent: Optional[int] = None) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, default=str)

    def to_llm(self) -> str:
        """
        Token-optimized format for LLM context.

        Example output:
            VALIDATION: apply_coupon INVALID (fail=2 warn=1 info=0)
            FAIL C5 TESTS: Only 2 tests (minimum 3)
            FAIL X1 BEHAVIOR[1]: Rule 1 is not exercised by any test: ...
            WARN X2 EDGE_CASES[0]: Edge case 0 is not exercised by any test: ...
        """
        label = self.contract_id or self.source or "contract"
        lines = [
            f"VALIDATION: {label} {self.overall_status.value.upper()} "
            f"(fail={len(self.failures)} warn={len(self.warnings)} info={len(self.infos)})"
        ]
        lines.extend(f.to_llm() for f in self.findings)
        if self.comparison is not None:
            c = self.comparison.counts
            lines.append(
                f"DRIFT: match={c['match']} drift={c['drift']} missing={c['missing']} "
                f"undocumented={c['undocumented']}"
            )
        return "\n".join(lines)


@dataclass
class BatchItem:
    """
    Outcome of one contract in a batch.

    Exactly one of `report` and `error` is set.
    """

    source: str
    report: Optional[ValidationReport] = None
    error: Optional[ParseError] = None

    def __repr__(self) -> str:
        if self.error is not None:
            return f"BatchItem({self.source}: ParseError {self.error})"
        return f"BatchItem({self.source}: {self.report.overall_status.value})"

    @property
    def contract_id(self) -> Optional[str]:
        return self.report.contract_id if self.report is not None else None

    @property
    def passed(self) -> bool:
        return self.report is not None and self.report.passed

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"source": self.source}
        if self.report is not None:
            d["report"] = self.report.to_dict()
        if self.error is not None:
            d["error"] = self.error.to_dict()
        return d
