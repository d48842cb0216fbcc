# src/specguard/checks/builtin/content.py
"""
Content checks (C1–C9): well-formedness of individual fields.
"""

from __future__ import annotations

from typing import Dict, List

from specguard.checks.base import BaseCheck, Stage
from specguard.checks.heuristics import (
    count_sentences,
    declared_bounds,
    implementation_tokens,
    is_boundary_argument,
    is_bound,
)
from specguard.checks.registry import register_check
from specguard.contract.signature import parse_signature
from specguard.contract.types import ExpectationKind, ParsedContract
from specguard.report.types import FieldName, Finding, Severity

MAX_INTENT_SENTENCES = 3
MIN_TESTS = 3


class ContentCheck(BaseCheck):
    stage = Stage.CONTENT


@register_check("C1")
class SignatureParseableCheck(ContentCheck):
    """SIGNATURE parses as a function declaration."""

    field = FieldName.SIGNATURE
    requires = ("SIGNATURE",)

    def run(self, parsed: ParsedContract) -> List[Finding]:
        text = parsed.model.signature_text
        if parse_signature(text) is not None:
            return []
        return [
            self.finding(
                "SIGNATURE is not a function declaration in any supported syntax",
                signature=text,
            )
        ]


@register_check("C2")
class IntentLengthCheck(ContentCheck):
    """INTENT stays within the sentence limit."""

    field = FieldName.INTENT
    severity = Severity.WARN
    requires = ("INTENT",)

    def run(self, parsed: ParsedContract) -> List[Finding]:
        n = count_sentences(parsed.model.intent_text)
        if n <= MAX_INTENT_SENTENCES:
            return []
        return [
            self.finding(
                f"INTENT has {n} sentences (max {MAX_INTENT_SENTENCES})",
                sentences=n,
            )
        ]


@register_check("C3")
class IntentImplementationDetailCheck(ContentCheck):
    """INTENT avoids implementation vocabulary."""

    field = FieldName.INTENT
    severity = Severity.WARN
    requires = ("INTENT",)

    def run(self, parsed: ParsedContract) -> List[Finding]:
        tokens = implementation_tokens(parsed.model.intent_text, self.options.intent_denylist)
        if not tokens:
            return []
        return [
            self.finding(
                f"INTENT mentions implementation details: {', '.join(tokens)}",
                tokens=tokens,
            )
        ]


@register_check("C4")
class DefaultRuleCheck(ContentCheck):
    """OTHERWISE may only appear as the last rule."""

    field = FieldName.BEHAVIOR
    requires = ("BEHAVIOR",)

    def run(self, parsed: ParsedContract) -> List[Finding]:
        rules = parsed.model.behavior_rules
        defaults = [r for r in rules if r.is_default]
        out = []
        for rule in defaults:
            if rule.position == len(rules) - 1:
                continue
            out.append(
                self.finding(
                    f"Ambiguous default rule: OTHERWISE at position {rule.position} is not the last rule",
                    rule.position,
                    default_rules=len(defaults),
                )
            )
        return out


@register_check("C5")
class TestCountCheck(ContentCheck):
    """TESTS holds at least the minimum number of cases."""

    field = FieldName.TESTS
    requires = ("TESTS",)

    def run(self, parsed: ParsedContract) -> List[Finding]:
        n = len(parsed.model.tests)
        if n >= MIN_TESTS:
            return []
        return [self.finding(f"Only {n} tests (minimum {MIN_TESTS})", tests=n)]


@register_check("C6")
class ErrorPathTestCheck(ContentCheck):
    """Error rules are backed by at least one error-path test."""

    field = FieldName.TESTS
    severity = Severity.WARN
    requires = ("BEHAVIOR", "TESTS")

    def run(self, parsed: ParsedContract) -> List[Finding]:
        model = parsed.model
        error_rules = model.error_rules
        if not error_rules:
            return []
        if any(t.expectation is ExpectationKind.ERROR for t in model.tests):
            return []
        return [
            self.finding(
                "No error-path test although BEHAVIOR has error rules",
                error_rules=[r.position for r in error_rules],
            )
        ]


@register_check("C7")
class BoundaryTestCheck(ContentCheck):
    """A declared bound is exercised by a boundary-value test."""

    field = FieldName.TESTS
    severity = Severity.WARN
    requires = ("CONSTRAINTS", "TESTS")

    def run(self, parsed: ParsedContract) -> List[Finding]:
        model = parsed.model
        bounded = [c for c in model.constraints if is_bound(c.text)]
        if not bounded:
            return []
        bounds = declared_bounds(c.text for c in bounded)
        if any(is_boundary_argument(t.arguments, bounds) for t in model.tests):
            return []
        return [
            self.finding(
                "No boundary-value test although CONSTRAINTS declares a bound",
                constraints=[c.position for c in bounded],
                bounds=sorted(bounds),
            )
        ]


@register_check("C8")
class DuplicateConditionCheck(ContentCheck):
    """No two rules share a condition."""

    field = FieldName.BEHAVIOR
    requires = ("BEHAVIOR",)

    def run(self, parsed: ParsedContract) -> List[Finding]:
        first: Dict[str, int] = {}
        out = []
        for rule in parsed.model.behavior_rules:
            if rule.is_default:
                continue
            if rule.condition in first:
                out.append(
                    self.finding(
                        f"Rule {rule.position} repeats the condition of rule {first[rule.condition]}: {rule.condition!r}",
                        rule.position,
                        first_position=first[rule.condition],
                    )
                )
            else:
                first[rule.condition] = rule.position
        return out


@register_check("C9")
class EmptyBehaviorCheck(ContentCheck):
    """BEHAVIOR holds at least one rule."""

    field = FieldName.BEHAVIOR
    requires = ("BEHAVIOR",)

    def run(self, parsed: ParsedContract) -> List[Finding]:
        if parsed.model.behavior_rules:
            return []
        return [self.finding("BEHAVIOR contains no rules")]
