# src/specguard/checks/coverage.py
"""
Rule → test coverage graph.

A test covers a rule when its expectation textually implies the rule's action:

- VALUE rule: the normalized action value is contained in the normalized
  expected value of a VALUE test.
- ERROR rule: an ERROR test whose kind the rule accepts (a generic or kindless
  rule accepts any kind); if both sides carry a message, the messages are equal.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

from specguard.contract.grammar import normalize_value
from specguard.contract.types import BehaviorRule, ContractModel, ExpectationKind, TestCase


def covers(rule: BehaviorRule, test: TestCase) -> bool:
    error = rule.error
    if error is not None:
        if test.expectation is not ExpectationKind.ERROR or test.error is None:
            return False
        if not error.accepts_kind(test.error):
            return False
        if error.message is not None and test.error.message is not None:
            return error.message == test.error.message
        return True

    if test.expectation is not ExpectationKind.VALUE or test.expected_value is None:
        return False
    needle = normalize_value(rule.value)
    return bool(needle) and needle in normalize_value(test.expected_value)


@dataclass(frozen=True)
class CoverageGraph:
    """Bipartite edges between rule positions and test positions."""

    rule_tests: Dict[int, Tuple[int, ...]]
    test_rules: Dict[int, Tuple[int, ...]]

    def tests_for(self, rule_position: int) -> Tuple[int, ...]:
        return self.rule_tests.get(rule_position, ())

    def rules_for(self, test_position: int) -> Tuple[int, ...]:
        return self.test_rules.get(test_position, ())

    def is_covered(self, rule_position: int) -> bool:
        return bool(self.tests_for(rule_position))


def build_coverage_graph(model: ContractModel) -> CoverageGraph:
    rule_tests: Dict[int, List[int]] = {r.position: [] for r in model.behavior_rules}
    test_rules: Dict[int, List[int]] = {t.position: [] for t in model.tests}
    for rule in model.behavior_rules:
        for test in model.tests:
            if covers(rule, test):
                rule_tests[rule.position].append(test.position)
                test_rules[test.position].append(rule.position)
    return CoverageGraph(
        rule_tests={k: tuple(v) for k, v in rule_tests.items()},
        test_rules={k: tuple(v) for k, v in test_rules.items()},
    )
