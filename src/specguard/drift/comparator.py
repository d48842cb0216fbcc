# src/specguard/drift/comparator.py
"""
Drift comparison between two contract models.

Rules, signature parameters and tests are each aligned with the greedy
similarity alignment in `specguard.drift.align`; each side yields its own
finding family:

    D1 DRIFT         FAIL  matched rule whose action or condition differs
    D2 MISSING       FAIL  baseline rule with no counterpart
    D3 UNDOCUMENTED  WARN  candidate rule with no counterpart
    D4 reordered     INFO  matched rule whose relative order changed
    D5 signature           parameters / return annotation / name
    D6 tests               missing, changed or extra tests
"""

from __future__ import annotations

import difflib
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple, Union

from specguard.api.compare import ComparisonResult, DriftStatus, RuleComparison
from specguard.contract.grammar import normalize_text, normalize_whitespace
from specguard.contract.loader import ContractLoader
from specguard.contract.parsers import parse_contract
from specguard.contract.signature import Parameter, parse_signature
from specguard.contract.types import BehaviorRule, ContractModel, ParsedContract, TestCase
from specguard.drift.align import (
    ACTION_WEIGHT,
    CONDITION_WEIGHT,
    align,
    similarity,
)
from specguard.errors import ComparisonError, ParseError
from specguard.logging import get_logger
from specguard.report.types import FieldName, Finding, FindingLocation, Severity

_logger = get_logger(__name__)

ModelLike = Union[ContractModel, ParsedContract, str, Path]


def _finding(
    code: str,
    severity: Severity,
    message: str,
    field: FieldName,
    index: Optional[int] = None,
    **details: Any,
) -> Finding:
    return Finding(
        severity=severity,
        code=code,
        message=message,
        location=FindingLocation(field, index),
        details={k: v for k, v in details.items() if v is not None},
    )


def word_diff(before: str, after: str) -> str:
    """Inline word diff: unchanged words kept, removals as [-x-], additions as {+y+}."""
    a, b = before.split(), after.split()
    out: List[str] = []
    for op, i1, i2, j1, j2 in difflib.SequenceMatcher(a=a, b=b, autojunk=False).get_opcodes():
        if op == "equal":
            out.extend(a[i1:i2])
            continue
        if op in ("delete", "replace"):
            out.append("[-" + " ".join(a[i1:i2]) + "-]")
        if op in ("insert", "replace"):
            out.append("{+" + " ".join(b[j1:j2]) + "+}")
    return " ".join(out)


def as_model(value: Optional[ModelLike], side: str) -> ContractModel:
    """
    Coerce a comparison input to a ContractModel, failing fast with ComparisonError.

    Strings naming an existing file and Path objects are read from disk; any
    other string is contract text.
    """
    if value is None:
        raise ComparisonError(side, "model is missing")
    if isinstance(value, ContractModel):
        return value
    if isinstance(value, ParsedContract):
        return value.model
    if isinstance(value, (str, Path)):
        try:
            if ContractLoader.looks_like_path(value):
                return ContractLoader.from_path(value).model
            return parse_contract(value).model
        except (ParseError, FileNotFoundError) as e:
            raise ComparisonError(side, str(e)) from e
    raise ComparisonError(side, f"unsupported input type {type(value).__name__}")


# --------------------------------------------------------------------------- #
# Rules
# --------------------------------------------------------------------------- #

def rule_score(a: BehaviorRule, b: BehaviorRule) -> float:
    return similarity(
        [
            (CONDITION_WEIGHT, a.condition, b.condition),
            (ACTION_WEIGHT, a.action, b.action),
        ]
    )


def compare_rules(
    baseline: Sequence[BehaviorRule],
    candidate: Sequence[BehaviorRule],
) -> Tuple[List[RuleComparison], List[RuleComparison], List[Finding]]:
    """Returns (per-baseline comparisons, undocumented comparisons, findings)."""
    alignment = align(baseline, candidate, rule_score)
    paired = alignment.by_baseline

    rules: List[RuleComparison] = []
    findings: List[Finding] = []
    for i, b_rule in enumerate(baseline):
        pair = paired.get(i)
        if pair is None:
            rules.append(RuleComparison(status=DriftStatus.MISSING, baseline=b_rule))
            findings.append(
                _finding(
                    "D2",
                    Severity.FAIL,
                    f"Rule {b_rule.position} is missing from the candidate: {b_rule.render()}",
                    FieldName.BEHAVIOR,
                    b_rule.position,
                    baseline=b_rule.render(),
                )
            )
            continue

        c_rule = candidate[pair.candidate]
        reordered = i in alignment.reordered
        if pair.exact:
            rc = RuleComparison(
                status=DriftStatus.MATCH,
                baseline=b_rule,
                candidate=c_rule,
                score=pair.score,
                reordered=reordered,
            )
        else:
            differing = [
                half
                for half, a, b in (
                    ("condition", b_rule.condition, c_rule.condition),
                    ("action", b_rule.action, c_rule.action),
                )
                if normalize_text(a) != normalize_text(b)
            ]
            before = " / ".join(getattr(b_rule, h) for h in differing)
            after = " / ".join(getattr(c_rule, h) for h in differing)
            rc = RuleComparison(
                status=DriftStatus.DRIFT,
                baseline=b_rule,
                candidate=c_rule,
                score=pair.score,
                differing=differing,
                before=before,
                after=after,
                reordered=reordered,
            )
            findings.append(
                _finding(
                    "D1",
                    Severity.FAIL,
                    f"Rule {b_rule.position} drifted ({', '.join(differing)}): {before!r} -> {after!r}",
                    FieldName.BEHAVIOR,
                    b_rule.position,
                    differing=differing,
                    before=before,
                    after=after,
                    diff=word_diff(before, after),
                    candidate_position=c_rule.position,
                    score=round(pair.score, 4),
                )
            )
        if reordered:
            findings.append(
                _finding(
                    "D4",
                    Severity.INFO,
                    f"Rule {b_rule.position} appears at position {c_rule.position} in the candidate",
                    FieldName.BEHAVIOR,
                    b_rule.position,
                    candidate_position=c_rule.position,
                )
            )
        rules.append(rc)

    undocumented: List[RuleComparison] = []
    for j in alignment.unmatched_candidate:
        c_rule = candidate[j]
        undocumented.append(RuleComparison(status=DriftStatus.UNDOCUMENTED, candidate=c_rule))
        findings.append(
            _finding(
                "D3",
                Severity.WARN,
                f"Candidate rule {c_rule.position} is undocumented: {c_rule.render()}",
                FieldName.BEHAVIOR,
                candidate_position=c_rule.position,
                candidate=c_rule.render(),
            )
        )
    return rules, undocumented, findings


# --------------------------------------------------------------------------- #
# Signature
# --------------------------------------------------------------------------- #

def parameter_score(a: Parameter, b: Parameter) -> float:
    return similarity(
        [
            (CONDITION_WEIGHT, a.name, b.name),
            (ACTION_WEIGHT, a.annotation or "", b.annotation or ""),
        ]
    )


def compare_signatures(baseline_text: str, candidate_text: str) -> List[Finding]:
    field = FieldName.SIGNATURE
    b_sig = parse_signature(baseline_text)
    c_sig = parse_signature(candidate_text)
    if b_sig is None or c_sig is None:
        if normalize_whitespace(baseline_text) == normalize_whitespace(candidate_text):
            return []
        return [
            _finding(
                "D5",
                Severity.FAIL,
                "Signature text changed",
                field,
                before=baseline_text,
                after=candidate_text,
                diff=word_diff(baseline_text, candidate_text),
            )
        ]

    findings: List[Finding] = []
    b_name = b_sig.name.rsplit(".", 1)[-1]
    c_name = c_sig.name.rsplit(".", 1)[-1]
    if b_name != c_name:
        findings.append(
            _finding("D5", Severity.WARN, f"Function renamed: {b_name} -> {c_name}", field,
                     before=b_name, after=c_name)
        )

    alignment = align(b_sig.parameters, c_sig.parameters, parameter_score)
    paired = alignment.by_baseline
    for i, p in enumerate(b_sig.parameters):
        pair = paired.get(i)
        if pair is None:
            findings.append(
                _finding("D5", Severity.FAIL, f"Parameter '{p.name}' was removed", field, i,
                         parameter=p.name)
            )
            continue
        q = c_sig.parameters[pair.candidate]
        if not pair.exact:
            findings.append(
                _finding(
                    "D5",
                    Severity.FAIL,
                    f"Parameter '{p.name}' annotation changed: {p.annotation} -> {q.annotation}",
                    field,
                    i,
                    parameter=p.name,
                    before=p.annotation,
                    after=q.annotation,
                )
            )
        if i in alignment.reordered:
            findings.append(
                _finding(
                    "D5",
                    Severity.FAIL,
                    f"Parameter '{p.name}' moved from position {i} to {pair.candidate}",
                    field,
                    i,
                    parameter=p.name,
                    candidate_position=pair.candidate,
                )
            )
        if (p.default or "") != (q.default or ""):
            findings.append(
                _finding(
                    "D5",
                    Severity.WARN,
                    f"Parameter '{p.name}' default changed: {p.default} -> {q.default}",
                    field,
                    i,
                    parameter=p.name,
                    before=p.default,
                    after=q.default,
                )
            )
    for j in alignment.unmatched_candidate:
        q = c_sig.parameters[j]
        optional = q.default is not None
        findings.append(
            _finding(
                "D5",
                Severity.WARN if optional else Severity.FAIL,
                f"Parameter '{q.name}' was added" + (" with a default" if optional else ""),
                field,
                parameter=q.name,
                candidate_position=j,
            )
        )

    if normalize_text(b_sig.returns or "") != normalize_text(c_sig.returns or ""):
        findings.append(
            _finding(
                "D5",
                Severity.FAIL,
                f"Return annotation changed: {b_sig.returns} -> {c_sig.returns}",
                field,
                before=b_sig.returns,
                after=c_sig.returns,
            )
        )
    return findings


# --------------------------------------------------------------------------- #
# Tests
# --------------------------------------------------------------------------- #

def case_score(a: TestCase, b: TestCase) -> float:
    return similarity(
        [
            (CONDITION_WEIGHT, a.invocation, b.invocation),
            (ACTION_WEIGHT, a.expectation_text, b.expectation_text),
        ]
    )


def compare_tests(baseline: Sequence[TestCase], candidate: Sequence[TestCase]) -> List[Finding]:
    field = FieldName.TESTS
    alignment = align(baseline, candidate, case_score)
    paired = alignment.by_baseline
    findings: List[Finding] = []
    for i, t in enumerate(baseline):
        pair = paired.get(i)
        if pair is None:
            findings.append(
                _finding("D6", Severity.WARN, f"Test {t.position} is missing from the candidate: {t.render()}",
                         field, t.position, baseline=t.render())
            )
            continue
        c = candidate[pair.candidate]
        if not pair.exact:
            findings.append(
                _finding(
                    "D6",
                    Severity.WARN,
                    f"Test {t.position} expectation changed: {t.expectation_text!r} -> {c.expectation_text!r}",
                    field,
                    t.position,
                    before=t.expectation_text,
                    after=c.expectation_text,
                    candidate_position=c.position,
                )
            )
    for j in alignment.unmatched_candidate:
        c = candidate[j]
        findings.append(
            _finding("D6", Severity.INFO, f"Candidate test {c.position} is not in the baseline: {c.render()}",
                     field, candidate_position=c.position, candidate=c.render())
        )
    return findings


# --------------------------------------------------------------------------- #
# Entry point
# --------------------------------------------------------------------------- #

def compare_models(baseline: Optional[ModelLike], candidate: Optional[ModelLike]) -> ComparisonResult:
    """
    Compare two contract models.

    Raises:
        ComparisonError: a side is missing or fails to parse
    """
    b = as_model(baseline, "baseline")
    c = as_model(candidate, "candidate")

    rules, undocumented, rule_findings = compare_rules(b.behavior_rules, c.behavior_rules)
    signature_findings = compare_signatures(b.signature_text, c.signature_text)
    test_findings = compare_tests(b.tests, c.tests)

    result = ComparisonResult(
        baseline_id=b.identifier,
        candidate_id=c.identifier,
        rules=rules,
        undocumented=undocumented,
        signature_findings=signature_findings,
        test_findings=test_findings,
        findings=rule_findings + signature_findings + test_findings,
    )
    _logger.debug("Compared %s vs %s: %s", b.identifier, c.identifier, result.counts)
    return result
