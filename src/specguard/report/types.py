# src/specguard/report/types.py
"""
Finding and status types shared by every checker and the report builder.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class Severity(str, Enum):
    """
    Finding severity.

    - FAIL: contract is invalid (nonzero exit)
    - WARN: contract is usable but suspicious
    - INFO: informational note only
    """

    FAIL = "fail"
    WARN = "warn"
    INFO = "info"

    def __str__(self) -> str:
        return self.value

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {Severity.FAIL: 0, Severity.WARN: 1, Severity.INFO: 2}


class FieldName(str, Enum):
    """Contract field a finding is attached to."""

    SIGNATURE = "SIGNATURE"
    INTENT = "INTENT"
    BEHAVIOR = "BEHAVIOR"
    TESTS = "TESTS"
    CONSTRAINTS = "CONSTRAINTS"
    EDGE_CASES = "EDGE_CASES"
    DEPENDENCIES = "DEPENDENCIES"
    EXAMPLES = "EXAMPLES"
    COMPLEXITY = "COMPLEXITY"
    METADATA = "METADATA"
    DOCUMENT = "DOCUMENT"

    def __str__(self) -> str:
        return self.value

    @property
    def rank(self) -> int:
        return _FIELD_RANK.get(self, len(_FIELD_RANK))


# Report ordering; fields outside the first six sort after them in this order.
_FIELD_RANK = {
    name: i
    for i, name in enumerate(
        [
            FieldName.SIGNATURE,
            FieldName.INTENT,
            FieldName.BEHAVIOR,
            FieldName.TESTS,
            FieldName.CONSTRAINTS,
            FieldName.EDGE_CASES,
            FieldName.DEPENDENCIES,
            FieldName.EXAMPLES,
            FieldName.COMPLEXITY,
            FieldName.METADATA,
            FieldName.DOCUMENT,
        ]
    )
}


class OverallStatus(str, Enum):
    VALID = "valid"
    VALID_WITH_WARNINGS = "valid_with_warnings"
    INVALID = "invalid"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class FindingLocation:
    """Which field (and optionally which rule/test/entry index) a finding concerns."""

    field: FieldName
    index: Optional[int] = None

    def __str__(self) -> str:
        if self.index is None:
            return self.field.value
        return f"{self.field.value}[{self.index}]"

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"field": self.field.value}
        if self.index is not None:
            d["index"] = self.index
        return d


@dataclass(frozen=True)
class Finding:
    """One reported issue. Created by exactly one checker and never mutated."""

    severity: Severity
    code: str
    message: str
    location: FindingLocation
    details: Dict[str, Any] = field(default_factory=dict, compare=True, hash=False)

    def __repr__(self) -> str:
        return f"Finding({self.code} {self.severity.value.upper()} @ {self.location}: {self.message})"

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "severity": self.severity.value,
            "code": self.code,
            "message": self.message,
            "location": self.location.to_dict(),
        }
        if self.details:
            d["details"] = self.details
        return d

    def to_llm(self) -> str:
        return f"{self.severity.value.upper()} {self.code} {self.location}: {self.message}"
