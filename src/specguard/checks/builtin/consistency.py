# src/specguard/checks/builtin/consistency.py
"""
Consistency checks (X1–X5): cross-references between rules, tests,
constraints and edge cases.

These checks report what they cannot resolve (ambiguous coverage, edge cases
without a recognizable trigger) instead of guessing.
"""

from __future__ import annotations

from typing import List

from specguard.checks.base import BaseCheck, Stage
from specguard.checks.coverage import build_coverage_graph
from specguard.checks.heuristics import is_bound, mentions, trigger_values
from specguard.checks.registry import register_check
from specguard.contract.types import ExpectationKind, ParsedContract
from specguard.report.types import FieldName, Finding, Severity


class ConsistencyCheck(BaseCheck):
    stage = Stage.CONSISTENCY


@register_check("X1")
class RuleCoverageCheck(ConsistencyCheck):
    """Every conditional rule is exercised by a test."""

    field = FieldName.BEHAVIOR
    requires = ("BEHAVIOR", "TESTS")

    def run(self, parsed: ParsedContract) -> List[Finding]:
        graph = build_coverage_graph(parsed.model)
        return [
            self.finding(
                f"Rule {rule.position} is not exercised by any test: {rule.render()}",
                rule.position,
                action=rule.action,
            )
            for rule in parsed.model.behavior_rules
            if not rule.is_default and not graph.is_covered(rule.position)
        ]


@register_check("X2")
class EdgeCaseCoverageCheck(ConsistencyCheck):
    """Every edge case has a trigger value that some test uses."""

    field = FieldName.EDGE_CASES
    severity = Severity.WARN
    requires = ("EDGE_CASES", "TESTS")

    def run(self, parsed: ParsedContract) -> List[Finding]:
        arguments = [t.arguments for t in parsed.model.tests]
        out = []
        for edge in parsed.model.edge_cases:
            triggers = trigger_values(edge.text)
            if not triggers:
                out.append(
                    self.finding(
                        f"Edge case {edge.position} has no recognizable trigger value: {edge.text}",
                        edge.position,
                    )
                )
                continue
            if any(t.found_in(args) for t in triggers for args in arguments):
                continue
            out.append(
                self.finding(
                    f"Edge case {edge.position} is not exercised by any test: {edge.text}",
                    edge.position,
                    triggers=[t.value if t.value is not None else t.kind for t in triggers],
                )
            )
        return out


@register_check("X3")
class ConstraintRuleCheck(ConsistencyCheck):
    """A bounded constraint subject is checked by some rule."""

    field = FieldName.CONSTRAINTS
    severity = Severity.WARN
    requires = ("CONSTRAINTS", "BEHAVIOR")

    def run(self, parsed: ParsedContract) -> List[Finding]:
        conditions = [r.condition for r in parsed.model.behavior_rules if not r.is_default]
        out = []
        for c in parsed.model.constraints:
            if c.subject is None or not is_bound(c.text):
                continue
            if any(mentions(c.subject, cond) for cond in conditions):
                continue
            out.append(
                self.finding(
                    f"Constraint on '{c.subject}' implies a bound but no rule checks '{c.subject}'",
                    c.position,
                    subject=c.subject,
                )
            )
        return out


@register_check("X4")
class ErrorMessageCheck(ConsistencyCheck):
    """Rule error messages appear verbatim in a matching error test."""

    field = FieldName.BEHAVIOR
    requires = ("BEHAVIOR", "TESTS")

    def run(self, parsed: ParsedContract) -> List[Finding]:
        error_tests = [
            t for t in parsed.model.tests
            if t.expectation is ExpectationKind.ERROR and t.error is not None
        ]
        out = []
        for rule in parsed.model.error_rules:
            error = rule.error
            if error.message is None:
                continue
            messages = [
                t.error.message for t in error_tests
                if t.error.message is not None and error.accepts_kind(t.error)
            ]
            if error.message in messages:
                continue
            out.append(
                self.finding(
                    f"Error message of rule {rule.position} does not match any test: {error.message!r}",
                    rule.position,
                    expected=error.message,
                    test_messages=messages,
                )
            )
        return out


@register_check("X5")
class AmbiguousCoverageCheck(ConsistencyCheck):
    """A test exercises at most one conditional rule."""

    field = FieldName.TESTS
    severity = Severity.WARN
    requires = ("BEHAVIOR", "TESTS")

    def run(self, parsed: ParsedContract) -> List[Finding]:
        graph = build_coverage_graph(parsed.model)
        defaults = {r.position for r in parsed.model.default_rules}
        out = []
        for test in parsed.model.tests:
            rules = [p for p in graph.rules_for(test.position) if p not in defaults]
            if len(rules) < 2:
                continue
            out.append(
                self.finding(
                    f"Ambiguous coverage: test {test.position} matches rules {', '.join(map(str, rules))}",
                    test.position,
                    rules=rules,
                )
            )
        return out
