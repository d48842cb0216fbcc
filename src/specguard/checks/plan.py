# src/specguard/checks/plan.py
from __future__ import annotations

from typing import List, Optional, Sequence, Type

from specguard.checks.base import BaseCheck, CheckOptions, Stage
from specguard.checks.registry import all_checks
from specguard.contract.types import ParsedContract
from specguard.logging import get_logger
from specguard.report.types import Finding

_logger = get_logger(__name__)


class CheckPlan:
    """
    Runs checks stage by stage over one parsed contract.

    Design goals
    ------------
    - Deterministic: same contract → same findings in the same order
    - Independent: a finding never stops later checks
    - Field-scoped short-circuit: a missing required field skips only the
      checks that read that field
    """

    def __init__(
        self,
        checks: Optional[Sequence[Type[BaseCheck]]] = None,
        options: Optional[CheckOptions] = None,
    ):
        classes = list(checks) if checks is not None else all_checks()
        self.checks: List[BaseCheck] = [cls(options) for cls in classes]

    def __repr__(self) -> str:
        return f"CheckPlan(checks={self.checks})"

    def run(self, parsed: ParsedContract) -> List[Finding]:
        findings: List[Finding] = []
        for stage in Stage.ORDER:
            for check in self.checks:
                if check.stage != stage:
                    continue
                if not check.applies_to(parsed):
                    _logger.debug("Skipping %s: required field missing", check)
                    continue
                findings.extend(check.run(parsed))
        return findings
