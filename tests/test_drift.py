# tests/test_drift.py
"""Drift comparison: rule alignment, signature and test drift."""

import pytest

import specguard
from specguard.api.compare import DriftStatus
from specguard.drift.align import align
from specguard.drift.comparator import compare_models, compare_signatures, word_diff
from specguard.errors import ComparisonError
from specguard.report.types import Severity

from utils import AGE_BASELINE


def codes(findings, code):
    return [f for f in findings if f.code == code]


class TestRuleDrift:
    def test_identical_models_match(self, age_baseline):
        result = compare_models(age_baseline, age_baseline)
        assert [rc.status for rc in result.rules] == [DriftStatus.MATCH] * 3
        assert result.undocumented == []
        assert result.findings == []
        assert not result.has_drift

    def test_changed_error_kind_is_drift(self, age_baseline):
        candidate = age_baseline.replace("THEN raise ValueError", "THEN raise TypeError")
        result = compare_models(age_baseline, candidate)
        rc = result.rules[0]
        assert rc.status is DriftStatus.DRIFT
        assert rc.differing == ["action"]
        assert rc.before == "raise ValueError"
        assert rc.after == "raise TypeError"
        d1 = codes(result.findings, "D1")
        assert len(d1) == 1
        assert d1[0].severity is Severity.FAIL
        assert d1[0].details["diff"] == "raise [-ValueError-] {+TypeError+}"
        assert result.has_drift

    def test_extra_candidate_rule_is_undocumented(self, age_baseline):
        candidate = age_baseline.replace(
            '  - OTHERWISE return "adult"',
            '  - WHEN age > 150 THEN raise ValueError\n  - OTHERWISE return "adult"',
        )
        result = compare_models(age_baseline, candidate)
        assert len(result.undocumented) == 1
        assert result.undocumented[0].status is DriftStatus.UNDOCUMENTED
        assert result.undocumented[0].candidate_position == 2
        d3 = codes(result.findings, "D3")
        assert len(d3) == 1
        assert d3[0].severity is Severity.WARN
        assert d3[0].location.index is None
        assert [rc.status for rc in result.rules] == [DriftStatus.MATCH] * 3

    def test_removed_rule_is_missing(self, age_baseline):
        candidate = age_baseline.replace('  - WHEN age < 18 THEN return "minor"\n', "")
        result = compare_models(age_baseline, candidate)
        assert result.status_of(1) is DriftStatus.MISSING
        d2 = codes(result.findings, "D2")
        assert [f.location.index for f in d2] == [1]
        assert result.has_drift

    def test_flipped_comparison_is_not_a_match(self, age_baseline):
        candidate = age_baseline.replace("WHEN age < 0 THEN", "WHEN age > 0 THEN")
        result = compare_models(age_baseline, candidate)
        assert result.status_of(0) is DriftStatus.MISSING
        assert len(result.undocumented) == 1
        assert result.undocumented[0].candidate_position == 0
        assert codes(result.findings, "D2")[0].location.index == 0
        assert result.has_drift

    def test_reorder_is_match_with_note(self, age_baseline):
        candidate = age_baseline.replace(
            '  - WHEN age < 0 THEN raise ValueError\n  - WHEN age < 18 THEN return "minor"\n',
            '  - WHEN age < 18 THEN return "minor"\n  - WHEN age < 0 THEN raise ValueError\n',
        )
        result = compare_models(age_baseline, candidate)
        assert [rc.status for rc in result.rules] == [DriftStatus.MATCH] * 3
        assert [rc.reordered for rc in result.rules] == [True, True, False]
        d4 = codes(result.findings, "D4")
        assert len(d4) == 2
        assert all(f.severity is Severity.INFO for f in d4)
        assert not result.has_drift

    def test_normalization_ignores_case_and_punctuation(self, age_baseline):
        candidate = age_baseline.replace('THEN return "minor"', "THEN RETURN minor")
        result = compare_models(age_baseline, candidate)
        assert result.status_of(1) is DriftStatus.MATCH

    def test_counts_and_llm(self, age_baseline):
        candidate = age_baseline.replace("THEN raise ValueError", "THEN raise TypeError")
        result = compare_models(age_baseline, candidate)
        assert result.counts == {"match": 2, "drift": 1, "missing": 0, "undocumented": 0}
        lines = result.to_llm().splitlines()
        assert lines[0] == "DRIFT: check_age vs check_age DRIFT"
        assert lines[1] == "RULES: match=2 drift=1 missing=0 undocumented=0"


class TestComparisonErrors:
    def test_missing_baseline(self, age_baseline):
        with pytest.raises(ComparisonError) as exc:
            compare_models(None, age_baseline)
        assert exc.value.side == "baseline"

    def test_unparseable_candidate(self, age_baseline):
        with pytest.raises(ComparisonError) as exc:
            compare_models(age_baseline, "no contract here")
        assert exc.value.side == "candidate"
        assert "no recognizable contract header" in exc.value.cause

    def test_unsupported_type(self, age_baseline):
        with pytest.raises(ComparisonError):
            specguard.compare(age_baseline, 42)


class TestSignatureDrift:
    def test_unchanged(self):
        assert compare_signatures("def f(a: int) -> int", "def f(a: int) -> int") == []

    def test_rename(self):
        out = compare_signatures("def f(a: int) -> int", "def g(a: int) -> int")
        assert [(f.severity, f.message) for f in out] == [(Severity.WARN, "Function renamed: f -> g")]

    def test_removed_parameter(self):
        out = compare_signatures("def f(a: int, b: int) -> int", "def f(a: int) -> int")
        assert len(out) == 1
        assert out[0].severity is Severity.FAIL
        assert out[0].location.index == 1
        assert out[0].details["parameter"] == "b"

    def test_annotation_changed(self):
        out = compare_signatures("def f(a: int) -> int", "def f(a: str) -> int")
        assert len(out) == 1
        assert out[0].severity is Severity.FAIL
        assert out[0].details == {"parameter": "a", "before": "int", "after": "str"}

    def test_parameters_swapped(self):
        out = compare_signatures("def f(a: int, b: int) -> int", "def f(b: int, a: int) -> int")
        assert [f.details["parameter"] for f in out] == ["a", "b"]
        assert all("moved" in f.message and f.severity is Severity.FAIL for f in out)

    def test_default_changed(self):
        out = compare_signatures("def f(a: int = 1) -> int", "def f(a: int = 2) -> int")
        assert len(out) == 1
        assert out[0].severity is Severity.WARN

    def test_added_optional_parameter(self):
        out = compare_signatures("def f(a: int) -> int", "def f(a: int, b: int = 0) -> int")
        assert [(f.severity, f.details["parameter"]) for f in out] == [(Severity.WARN, "b")]

    def test_added_required_parameter(self):
        out = compare_signatures("def f(a: int) -> int", "def f(a: int, b: int) -> int")
        assert [f.severity for f in out] == [Severity.FAIL]

    def test_return_changed(self):
        out = compare_signatures("def f(a: int) -> int", "def f(a: int) -> str")
        assert len(out) == 1
        assert out[0].details == {"before": "int", "after": "str"}

    def test_unparseable_text_changed(self):
        out = compare_signatures("takes a number", "takes two numbers")
        assert len(out) == 1
        assert out[0].message == "Signature text changed"
        assert out[0].details["diff"] == "takes [-a number-] {+two numbers+}"

    def test_cross_syntax_same_shape(self):
        out = compare_signatures("def f(a: int) -> int", "f(a: int) -> int")
        assert out == []


class TestTestDrift:
    def test_expectation_changed(self, age_baseline):
        candidate = age_baseline.replace('check_age(10) == "minor"', 'check_age(10) == "child"')
        result = compare_models(age_baseline, candidate)
        assert len(result.test_findings) == 1
        d6 = result.test_findings[0]
        assert d6.severity is Severity.WARN
        assert d6.location.index == 1
        assert d6.details["after"] == '"child"'

    def test_missing_and_extra(self, age_baseline):
        candidate = age_baseline.replace('  - check_age(30) == "adult"\n', '  - check_age(99) == "adult"\n')
        result = compare_models(age_baseline, candidate)
        severities = sorted(f.severity.value for f in result.test_findings)
        assert severities == ["info", "warn"]


class TestAlign:
    @staticmethod
    def exact(a, b):
        return 1.0 if a == b else 0.0

    def test_prefers_nearest_position(self):
        result = align(["a", "a"], ["a"], self.exact)
        assert [(p.baseline, p.candidate) for p in result.pairs] == [(0, 0)]
        assert result.unmatched_baseline == (1,)

    def test_tie_on_distance_prefers_lower_baseline(self):
        result = align(["a", "x", "a"], ["y", "a", "z"], self.exact)
        assert [(p.baseline, p.candidate) for p in result.pairs] == [(0, 1)]

    def test_below_threshold_unpaired(self):
        result = align(["a"], ["b"], lambda a, b: 0.4)
        assert result.pairs == ()
        assert result.unmatched_candidate == (0,)

    def test_reordered_pairs(self):
        result = align(["a", "b", "c"], ["b", "a", "c"], self.exact)
        assert result.reordered == frozenset({0, 1})


def test_word_diff_unchanged():
    assert word_diff("return 1", "return 1") == "return 1"


def test_validate_with_compare_to_merges_findings(engine):
    candidate = AGE_BASELINE.replace("THEN raise ValueError", "THEN raise TypeError")
    report = engine.validate(AGE_BASELINE, compare_to=candidate)
    assert report.comparison is not None
    assert report.has("D1", 0)
    assert not report.passed
