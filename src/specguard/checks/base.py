# src/specguard/checks/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar, List, Optional, Tuple

from specguard.contract.types import ParsedContract
from specguard.report.types import FieldName, Finding, FindingLocation, Severity


class Stage:
    STRUCTURAL = "structural"
    CONTENT = "content"
    CONSISTENCY = "consistency"

    ORDER = (STRUCTURAL, CONTENT, CONSISTENCY)


@dataclass(frozen=True)
class CheckOptions:
    """Per-run knobs handed to every check (from SpecguardConfig)."""

    intent_denylist: Tuple[str, ...] = field(default_factory=tuple)


class BaseCheck(ABC):
    """
    Abstract base class for all contract checks.

    Class attributes (set by subclasses / the registry):
        code: Stable finding code (e.g. "X1")
        stage: One of Stage.ORDER
        field: Contract field the findings attach to
        severity: Default severity of emitted findings
        requires: Fields that must be present for the check to run. A missing
            required field short-circuits only the checks that need it.
    """

    code: ClassVar[str] = ""
    stage: ClassVar[str] = Stage.CONTENT
    field: ClassVar[FieldName] = FieldName.DOCUMENT
    severity: ClassVar[Severity] = Severity.FAIL
    requires: ClassVar[Tuple[str, ...]] = ()

    def __init__(self, options: Optional[CheckOptions] = None):
        self.options = options or CheckOptions()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code})"

    def applies_to(self, parsed: ParsedContract) -> bool:
        return all(parsed.trace.has_field(f) for f in self.requires)

    @abstractmethod
    def run(self, parsed: ParsedContract) -> List[Finding]:
        """Inspect the parsed contract and return zero or more findings."""
        ...

    def finding(
        self,
        message: str,
        index: Optional[int] = None,
        *,
        severity: Optional[Severity] = None,
        field: Optional[FieldName] = None,
        **details: Any,
    ) -> Finding:
        """Build a finding stamped with this check's code."""
        return Finding(
            severity=severity or self.severity,
            code=self.code,
            message=message,
            location=FindingLocation(field or self.field, index),
            details={k: v for k, v in details.items() if v is not None},
        )
