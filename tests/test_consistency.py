# tests/test_consistency.py
"""Consistency checks X1–X5 and the coverage graph behind them."""

from specguard.checks.coverage import build_coverage_graph, covers
from specguard.contract import parse_contract
from specguard.report.types import FieldName, OverallStatus, Severity

from utils import COUPON_BLOCK, make_contract


def findings(report, code):
    return [f for f in report.findings if f.code == code]


class TestRuleCoverage:
    def test_matching_value_covers_rule(self, engine):
        report = engine.validate(COUPON_BLOCK)
        assert not report.has("X1", 0)

    def test_mismatched_value_leaves_rule_uncovered(self, engine):
        text = COUPON_BLOCK.replace(
            'validate_coupon("", 50) == (False, "Coupon code cannot be empty")',
            'validate_coupon("", 50) == (False, "Empty code")',
        )
        report = engine.validate(text)
        x1 = findings(report, "X1")
        assert [f.location.index for f in x1] == [0]
        assert x1[0].severity is Severity.FAIL
        assert report.overall_status is OverallStatus.INVALID

    def test_default_rule_never_reported(self, engine):
        rules = ["WHEN x < 0 THEN return 0", "OTHERWISE return 42"]
        report = engine.validate(make_contract(rules, ["f(-1) == 0", "f(-2) == 0", "f(-3) == 0"]))
        assert not report.has("X1")

    def test_generic_error_rule_accepts_any_kind(self):
        model = parse_contract(
            make_contract(
                ["WHEN x < 0 THEN raise error", "OTHERWISE return x"],
                ["f(-1) raises ValueError", "f(2) == 2", "f(3) == 3"],
            )
        ).model
        assert covers(model.behavior_rules[0], model.tests[0])

    def test_error_kind_mismatch(self):
        model = parse_contract(
            make_contract(
                ["WHEN x < 0 THEN raise ValueError", "OTHERWISE return x"],
                ["f(-1) raises TypeError", "f(2) == 2", "f(3) == 3"],
            )
        ).model
        assert not covers(model.behavior_rules[0], model.tests[0])

    def test_graph_edges(self):
        graph = build_coverage_graph(parse_contract(COUPON_BLOCK).model)
        assert graph.tests_for(0) == (0,)
        assert graph.tests_for(2) == (2,)
        assert graph.rules_for(3) == (3,)
        assert graph.is_covered(1)


class TestEdgeCases:
    def test_edge_case_exercised(self, engine):
        assert not engine.validate(COUPON_BLOCK).has("X2")

    def test_edge_case_not_exercised(self, engine):
        text = COUPON_BLOCK.replace('code: "" returns', 'code: "SPECIAL" returns')
        x2 = findings(engine.validate(text), "X2")
        assert len(x2) == 1
        assert x2[0].severity is Severity.WARN
        assert x2[0].location.field is FieldName.EDGE_CASES
        assert x2[0].details["triggers"] == ['"SPECIAL"']

    def test_edge_case_without_trigger(self, engine):
        text = COUPON_BLOCK.replace('code: "" returns the empty-code error', "code: odd unicode returns an error")
        x2 = findings(engine.validate(text), "X2")
        assert len(x2) == 1
        assert "no recognizable trigger value" in x2[0].message

    def test_negative_edge_case(self, engine):
        text = make_contract(
            ["WHEN x < 0 THEN return 0", "OTHERWISE return x"],
            ["f(-5) == 0", "f(2) == 2", "f(3) == 3"],
            extra="EDGE_CASES:\n  - x: negative input returns 0",
        )
        assert not engine.validate(text).has("X2")


class TestConstraints:
    def test_bound_without_rule(self, engine):
        text = COUPON_BLOCK.replace(
            "  - cart_total: must be at least 10\n",
            "  - cart_total: must be at least 10\n  - discount: at most 50\n",
        )
        x3 = findings(engine.validate(text), "X3")
        assert len(x3) == 1
        assert x3[0].location.index == 1
        assert x3[0].details["subject"] == "discount"

    def test_constraint_checked_by_rule(self, engine):
        assert not engine.validate(COUPON_BLOCK).has("X3")


class TestErrorMessages:
    def test_message_mismatch(self, engine):
        text = COUPON_BLOCK.replace(
            'validate_coupon("NOPE", 50) raises ValueError("Unknown coupon")',
            'validate_coupon("NOPE", 50) raises ValueError("Bad coupon")',
        )
        report = engine.validate(text)
        x4 = findings(report, "X4")
        assert len(x4) == 1
        assert x4[0].location.index == 2
        assert x4[0].details["test_messages"] == ["Bad coupon"]
        assert report.has("X1", 2)

    def test_test_without_message_fails_message_check(self, engine):
        text = COUPON_BLOCK.replace(
            'validate_coupon("NOPE", 50) raises ValueError("Unknown coupon")',
            'validate_coupon("NOPE", 50) raises ValueError',
        )
        report = engine.validate(text)
        x4 = findings(report, "X4")
        assert [f.location.index for f in x4] == [2]
        assert x4[0].details["test_messages"] == []
        assert not report.has("X1")

    def test_rule_message_untested_when_only_kind_is_asserted(self, engine):
        rules = ['WHEN x < 0 THEN raise ValueError("x must be non-negative")', "OTHERWISE return x"]
        report = engine.validate(make_contract(rules, ["f(-1) raises ValueError", "f(2) == 2", "f(3) == 3"]))
        assert report.has("X4", 0)
        assert report.overall_status is OverallStatus.INVALID


class TestAmbiguousCoverage:
    def test_test_matching_two_rules(self, engine):
        rules = ["WHEN x < 0 THEN return 0", "WHEN x > 100 THEN return 0", "OTHERWISE return x"]
        report = engine.validate(make_contract(rules, ["f(-1) == 0", "f(101) == 0", "f(5) == 5"]))
        x5 = findings(report, "X5")
        assert [f.location.index for f in x5] == [0, 1]
        assert x5[0].details["rules"] == [0, 1]
        assert x5[0].severity is Severity.WARN

    def test_default_rule_does_not_count(self, engine):
        rules = ["WHEN x < 0 THEN return 0", "OTHERWISE return 0"]
        report = engine.validate(make_contract(rules, ["f(-1) == 0", "f(2) == 0", "f(3) == 0"]))
        assert not report.has("X5")
