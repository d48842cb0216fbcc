# src/specguard/engine/engine.py
"""
Validation Engine: deterministic, pure, notation-agnostic.

Flow
----
  1) Parse (or accept an already-parsed contract / a model built in code)
  2) Run the check plan: structural → content → consistency
  3) (Optional) Compare against a second model
  4) Build the report: order findings, roll up status

Principles
----------
- Deterministic: identical inputs → byte-identical reports
- Findings, not exceptions: only unreadable input raises
- Clear separation: engine orchestrates; reporters format/print
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from specguard.api.compare import ComparisonResult
from specguard.api.results import ValidationReport
from specguard.checks.base import CheckOptions
from specguard.checks.plan import CheckPlan
from specguard.config.settings import SpecguardConfig
from specguard.contract.loader import ContractLoader
from specguard.contract.parsers import parse_contract
from specguard.contract.types import ContractModel, ParsedContract, SurfaceKind, SurfaceTrace
from specguard.drift.comparator import ModelLike, compare_models
from specguard.logging import get_logger
from specguard.report.builder import build_report

_logger = get_logger(__name__)

ContractInput = Union[str, Path, ParsedContract, ContractModel]


class ValidationEngine:
    """
    Orchestrates:
      - Parsing (files, raw text, parsed contracts or in-code models)
      - Check planning and execution
      - Drift comparison (optional)
      - Report building
    """

    def __init__(
        self,
        config: Optional[SpecguardConfig] = None,
        *,
        strict: Optional[bool] = None,
    ):
        self.config = config or SpecguardConfig()
        self.strict = self.config.strict_fields if strict is None else strict
        self.plan = CheckPlan(options=CheckOptions(intent_denylist=tuple(self.config.intent_denylist)))

    def __repr__(self) -> str:
        return f"ValidationEngine(strict={self.strict}, checks={len(self.plan.checks)})"

    # --------------------------------------------------------------------- #

    def parse(
        self,
        contract: ContractInput,
        surface: Optional[Union[SurfaceKind, str]] = None,
        source: Optional[str] = None,
    ) -> ParsedContract:
        """
        Normalize any accepted input into a ParsedContract.

        Paths (Path objects, or strings naming an existing file) are read from
        disk; other strings are parsed as contract text.

        Raises:
            ParseError: text is structurally unreadable
            FileNotFoundError: a Path object names a missing file
        """
        if isinstance(contract, ParsedContract):
            return contract
        if isinstance(contract, ContractModel):
            return ParsedContract(
                model=contract,
                surface=SurfaceKind.BLOCK,
                trace=SurfaceTrace.from_model(contract),
                source=source,
            )
        if ContractLoader.looks_like_path(contract):
            return ContractLoader.from_path(contract, surface, strict=self.strict)
        return parse_contract(str(contract), surface, strict=self.strict, source=source)

    def validate(
        self,
        contract: ContractInput,
        *,
        surface: Optional[Union[SurfaceKind, str]] = None,
        compare_to: Optional[ModelLike] = None,
        source: Optional[str] = None,
    ) -> ValidationReport:
        """
        Validate one contract, optionally comparing it against a second model.

        Raises:
            ParseError: the contract itself is unreadable
            ComparisonError: `compare_to` is unreadable
        """
        parsed = self.parse(contract, surface, source)
        findings = self.plan.run(parsed)

        comparison: Optional[ComparisonResult] = None
        if compare_to is not None:
            comparison = compare_models(parsed.model, compare_to)

        report = build_report(
            findings,
            contract_id=parsed.identifier,
            surface=parsed.surface,
            source=parsed.source or source,
            comparison=comparison,
        )
        _logger.debug(
            "Validated %s: %s (%d findings)",
            report.contract_id,
            report.overall_status.value,
            len(report.findings),
        )
        return report

    def compare(self, baseline: ModelLike, candidate: ModelLike) -> ComparisonResult:
        """
        Raises:
            ComparisonError: a side is missing or fails to parse
        """
        return compare_models(baseline, candidate)
