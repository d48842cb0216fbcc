# src/specguard/__init__.py
"""
specguard - Behavioral contract validation and drift detection

Usage:
    # CLI
    $ specguard validate contracts/apply_coupon.md
    $ specguard compare contracts/apply_coupon.md extracted/apply_coupon.md

    # Python API - Validate a contract
    import specguard
    report = specguard.validate("contracts/apply_coupon.md")
    if report.passed:
        print("Contract is consistent!")

    # Python API - Validate raw text, comparing against a second model
    report = specguard.validate(text, compare_to=extracted_text)
    print(report.to_llm())

    # Python API - Drift only
    result = specguard.compare(baseline_text, candidate_text)
    for rc in result.rules:
        print(rc.status, rc.before, rc.after)
"""

from specguard.version import VERSION as __version__

from typing import Any, Dict, List, Optional, Union

# Core engine (for advanced usage)
from specguard.engine.engine import ContractInput, ValidationEngine
from specguard.engine.batch import BatchSources

# Logging
from specguard.logging import get_logger, log_exception

# API types
from specguard.api.compare import ComparisonResult, DriftStatus, RuleComparison
from specguard.api.results import BatchItem, ValidationReport

# Contract model
from specguard.contract import (
    BehaviorRule,
    ContractModel,
    ErrorDescriptor,
    ExpectationKind,
    ParsedContract,
    SurfaceKind,
    TestCase,
    render,
)
from specguard.drift.comparator import ModelLike
from specguard.report.types import Finding, FindingLocation, OverallStatus, Severity

# Errors
from specguard.errors import ComparisonError, ConfigError, ParseError, SpecguardError

# Configuration
from specguard.config.settings import SpecguardConfig, resolve_effective_config

_logger = get_logger(__name__)


# =============================================================================
# Core Functions
# =============================================================================


def parse(
    contract: ContractInput,
    surface: Optional[Union[SurfaceKind, str]] = None,
    *,
    strict: bool = False,
) -> ParsedContract:
    """
    Parse a contract (path or text) into a ParsedContract.

    Raises:
        ParseError: text is structurally unreadable
    """
    return ValidationEngine(strict=strict).parse(contract, surface)


def validate(
    contract: ContractInput,
    *,
    compare_to: Optional[ModelLike] = None,
    surface: Optional[Union[SurfaceKind, str]] = None,
    strict: Optional[bool] = None,
    env: Optional[str] = None,
    source: Optional[str] = None,
) -> ValidationReport:
    """
    Validate a contract.

    Args:
        contract: Path, raw text, ParsedContract or ContractModel
        compare_to: Optional second model; its drift findings join the report
        surface: "block" | "inline" | None (auto-detect)
        strict: Unknown field names raise ParseError (default: from config)
        env: Environment profile from .specguard/config.yml
        source: Label carried on the report (e.g. a path)

    Returns:
        ValidationReport. A FAIL-containing report is a normal return value.

    Raises:
        ParseError: the contract is unreadable
        ComparisonError: `compare_to` is missing or unreadable
        ConfigError: the config file is invalid
    """
    engine = ValidationEngine(resolve_effective_config(env_name=env), strict=strict)
    return engine.validate(contract, surface=surface, compare_to=compare_to, source=source)


def compare(baseline: ModelLike, candidate: ModelLike) -> ComparisonResult:
    """
    Compare two contract models and classify every rule.

    Each side may be contract text, a path to a contract file, or an
    already parsed model.

    Raises:
        ComparisonError: a side is None, missing on disk, or fails to parse
    """
    return ValidationEngine().compare(baseline, candidate)


def validate_many(
    sources: BatchSources,
    *,
    max_workers: Optional[int] = None,
    env: Optional[str] = None,
) -> List[BatchItem]:
    """
    Validate independent contracts concurrently.

    Args:
        sources: Iterable of paths, or a mapping {label: contract text}
        max_workers: Thread pool size (default: from config, else executor default)

    Returns:
        BatchItems sorted by contract identifier, then source label.
    """
    from specguard.engine.batch import validate_many as _validate_many

    engine = ValidationEngine(resolve_effective_config(env_name=env))
    return _validate_many(sources, engine=engine, max_workers=max_workers)


def config(env: Optional[str] = None) -> SpecguardConfig:
    """
    Get effective configuration.

    Example:
        cfg = specguard.config()
        cfg = specguard.config(env="ci")
        print(cfg.output_format)  # "rich"
    """
    return resolve_effective_config(env_name=env)


def list_checks() -> List[Dict[str, Any]]:
    """Registered checks with their stage, field and default severity."""
    from specguard.checks.registry import all_checks

    return [
        {
            "code": c.code,
            "stage": c.stage,
            "field": c.field.value,
            "severity": c.severity.value,
            "description": (c.__doc__ or "").strip() or None,
        }
        for c in all_checks()
    ]


__all__ = [
    # Version
    "__version__",
    # Core functions
    "parse",
    "validate",
    "compare",
    "validate_many",
    "render",
    # Configuration functions
    "config",
    "list_checks",
    # Result types
    "ValidationReport",
    "BatchItem",
    "ComparisonResult",
    "RuleComparison",
    "DriftStatus",
    "Finding",
    "FindingLocation",
    "OverallStatus",
    "Severity",
    # Contract model
    "BehaviorRule",
    "ContractModel",
    "ErrorDescriptor",
    "ExpectationKind",
    "ParsedContract",
    "SurfaceKind",
    "TestCase",
    # Advanced
    "ValidationEngine",
    "SpecguardConfig",
    "get_logger",
    "log_exception",
    # Errors
    "SpecguardError",
    "ParseError",
    "ComparisonError",
    "ConfigError",
]
