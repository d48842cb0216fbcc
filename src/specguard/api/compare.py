# src/specguard/api/compare.py
"""
Result types for drift comparison.

These are the structured result types returned by compare() and attached to
a ValidationReport when validation runs in comparison mode.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from specguard.contract.types import BehaviorRule
from specguard.report.types import Finding, Severity


class DriftStatus(str, Enum):
    MATCH = "match"
    DRIFT = "drift"
    MISSING = "missing"
    UNDOCUMENTED = "undocumented"

    def __str__(self) -> str:
        return self.value


@dataclass
class RuleComparison:
    """
    Alignment outcome for one rule.

    Attributes:
        status: MATCH | DRIFT | MISSING | UNDOCUMENTED
        baseline: Baseline rule (None for UNDOCUMENTED)
        candidate: Paired candidate rule (None for MISSING)
        score: Similarity score of the pair (0.0 when unpaired)
        differing: Halves that differ after normalization ("condition", "action")
        before: Literal baseline text of the differing half (DRIFT only)
        after: Literal candidate text of the differing half (DRIFT only)
        reordered: Pair's relative order differs from another matched pair
    """

    status: DriftStatus
    baseline: Optional[BehaviorRule] = None
    candidate: Optional[BehaviorRule] = None
    score: float = 0.0
    differing: List[str] = field(default_factory=list)
    before: Optional[str] = None
    after: Optional[str] = None
    reordered: bool = False

    @property
    def baseline_position(self) -> Optional[int]:
        return self.baseline.position if self.baseline is not None else None

    @property
    def candidate_position(self) -> Optional[int]:
        return self.candidate.position if self.candidate is not None else None

    def __repr__(self) -> str:
        return (
            f"RuleComparison({self.status.value.upper()} "
            f"{self.baseline_position} -> {self.candidate_position}, score={self.score:.1f})"
        )

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "status": self.status.value,
            "baseline_position": self.baseline_position,
            "candidate_position": self.candidate_position,
            "score": round(self.score, 4),
        }
        if self.baseline is not None:
            d["baseline"] = self.baseline.render()
        if self.candidate is not None:
            d["candidate"] = self.candidate.render()
        if self.differing:
            d["differing"] = list(self.differing)
            d["before"] = self.before
            d["after"] = self.after
        if self.reordered:
            d["reordered"] = True
        return d


@dataclass
class ComparisonResult:
    """
    Result of comparing a baseline contract model with a candidate model.

    Answers: "Does the candidate still say what the baseline says?"

    Does NOT answer: whether a reordering or rewording is behavior-preserving.

    Attributes:
        baseline_id: Identifier of the baseline contract
        candidate_id: Identifier of the candidate contract
        rules: One entry per baseline rule, in baseline order
        undocumented: Candidate rules with no baseline counterpart, in candidate order
        signature_findings: D5 findings
        test_findings: D6 findings
        findings: All drift findings (D1–D6) in emission order
    """

    baseline_id: Optional[str]
    candidate_id: Optional[str]
    rules: List[RuleComparison] = field(default_factory=list)
    undocumented: List[RuleComparison] = field(default_factory=list)
    signature_findings: List[Finding] = field(default_factory=list)
    test_findings: List[Finding] = field(default_factory=list)
    findings: List[Finding] = field(default_factory=list)

    def __repr__(self) -> str:
        counts = self.counts
        return (
            f"ComparisonResult({self.baseline_id} vs {self.candidate_id}: "
            f"match={counts['match']}, drift={counts['drift']}, "
            f"missing={counts['missing']}, undocumented={counts['undocumented']})"
        )

    @property
    def counts(self) -> Dict[str, int]:
        out = {s.value: 0 for s in DriftStatus}
        for rc in self.rules + self.undocumented:
            out[rc.status.value] += 1
        return out

    @property
    def has_drift(self) -> bool:
        """True when any FAIL-level drift finding exists."""
        return any(f.severity is Severity.FAIL for f in self.findings)

    def status_of(self, baseline_position: int) -> DriftStatus:
        return self.rules[baseline_position].status

    def to_dict(self) -> Dict[str, Any]:
        return {
            "baseline_id": self.baseline_id,
            "candidate_id": self.candidate_id,
            "has_drift": self.has_drift,
            "counts": self.counts,
            "rules": [rc.to_dict() for rc in self.rules],
            "undocumented": [rc.to_dict() for rc in self.undocumented],
            "findings": [f.to_dict() for f in self.findings],
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, default=str)

    def to_llm(self) -> str:
        """
        Token-optimized format for LLM context.

        Example output:
            DRIFT: validate_age vs validate_age DRIFT
            RULES: match=2 drift=1 missing=0 undocumented=1
            FAIL D1 BEHAVIOR[0]: Rule 0 drifted (action): 'raise ValueError' -> 'raise TypeError'
        """
        status = "DRIFT" if self.has_drift else "OK"
        c = self.counts
        lines = [
            f"DRIFT: {self.baseline_id} vs {self.candidate_id} {status}",
            f"RULES: match={c['match']} drift={c['drift']} missing={c['missing']} "
            f"undocumented={c['undocumented']}",
        ]
        lines.extend(f.to_llm() for f in self.findings)
        return "\n".join(lines)
