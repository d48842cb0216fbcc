# tests/test_grammar.py
"""Tests for the canonical line grammar and normalization helpers."""

import pytest

from specguard.contract.grammar import (
    LineSyntaxError,
    action_value,
    call_arguments,
    find_top_level,
    normalize_text,
    normalize_value,
    parse_error_action,
    parse_rule_line,
    parse_test_line,
    split_top_level,
    strip_code_spans,
    subject_of,
)


class TestRuleLines:
    """Tests for WHEN/THEN and OTHERWISE lines."""

    def test_when_then(self):
        assert parse_rule_line("WHEN x > 1 THEN return 2") == ("x > 1", "return 2", False)

    def test_otherwise(self):
        assert parse_rule_line("OTHERWISE return 0") == ("", "return 0", True)

    def test_code_spans_are_unwrapped(self):
        cond, action, _ = parse_rule_line("WHEN `items` is empty THEN return `[]`")
        assert cond == "items is empty"
        assert action == "return []"

    def test_keywords_are_case_sensitive(self):
        with pytest.raises(LineSyntaxError):
            parse_rule_line("when x > 1 then return 2")

    def test_missing_then(self):
        with pytest.raises(LineSyntaxError):
            parse_rule_line("WHEN x > 1 return 2")

    def test_then_inside_quotes_is_not_a_separator(self):
        assert parse_rule_line('WHEN mode == "WHEN x THEN y" THEN return 1') == (
            'mode == "WHEN x THEN y"',
            "return 1",
            False,
        )

    def test_then_inside_brackets_is_not_a_separator(self):
        cond, action, _ = parse_rule_line("WHEN f(a THEN b) is true THEN return 0")
        assert cond == "f(a THEN b) is true"
        assert action == "return 0"

    def test_apostrophe_in_condition(self):
        assert parse_rule_line("WHEN the user's age < 0 THEN raise ValueError") == (
            "the user's age < 0",
            "raise ValueError",
            False,
        )

    def test_then_only_inside_quotes(self):
        with pytest.raises(LineSyntaxError):
            parse_rule_line('WHEN x == "a THEN b"')


class TestTestLines:
    """Tests for `==` and `raises` test lines."""

    def test_value_expectation(self):
        assert parse_test_line("add(1, 2) == 3") == ("add(1, 2)", "value", "3", None, None)

    def test_equality_inside_string_argument_is_ignored(self):
        invocation, kind, value, _, _ = parse_test_line('f("a == b") == True')
        assert invocation == 'f("a == b")'
        assert kind == "value"
        assert value == "True"

    def test_raises_with_message(self):
        assert parse_test_line('f(-1) raises ValueError "bad"') == (
            "f(-1)", "error", None, "ValueError", "bad"
        )

    def test_raises_with_call_style_message(self):
        _, kind, _, err_kind, message = parse_test_line("f(-1) raises ValueError('bad input')")
        assert kind == "error"
        assert err_kind == "ValueError"
        assert message == "bad input"

    def test_raises_without_message(self):
        assert parse_test_line("f(-1) raises TypeError")[3:] == ("TypeError", None)

    def test_no_operator(self):
        with pytest.raises(LineSyntaxError):
            parse_test_line("f(1)")

    def test_empty_side(self):
        with pytest.raises(LineSyntaxError):
            parse_test_line("f(1) ==")


class TestErrorActions:
    def test_raise_with_message(self):
        assert parse_error_action('raise ValueError("bad input")') == ("ValueError", "bad input")

    def test_throw_new(self):
        assert parse_error_action("throw new TypeError('x')") == ("TypeError", "x")

    def test_value_action(self):
        assert parse_error_action("return 1") is None

    def test_kind_only(self):
        assert parse_error_action("raises KeyError") == ("KeyError", None)


class TestNormalization:
    def test_normalize_value_whitespace_and_quotes(self):
        assert normalize_value("( False ,  'x  y' )") == '(False,"x y")'

    def test_normalize_value_strips_backticks(self):
        assert normalize_value("`[1, 2]`") == "[1,2]"

    def test_normalize_text(self):
        assert normalize_text("Age  < 0!") == "age lt 0"

    def test_normalize_text_keeps_comparison_direction(self):
        assert normalize_text("age > 0") == "age gt 0"
        assert normalize_text("x>=10") == "x ge 10"
        assert normalize_text("x ≤ 10") == "x le 10"
        assert normalize_text("a != b") == normalize_text("a  !=  b.")
        assert normalize_text("-> x") == "x"

    def test_action_value(self):
        assert action_value("return (1, 2)") == "(1, 2)"
        assert action_value("returns x") == "x"
        assert action_value("(1, 2)") == "(1, 2)"


class TestScanning:
    def test_find_top_level_skips_brackets_and_quotes(self):
        text = 'f(a, "x,y"), b'
        assert find_top_level(text, ",") == len('f(a, "x,y")')

    def test_split_top_level(self):
        assert split_top_level("a: int, b: Dict[str, int], c") == ["a: int", "b: Dict[str, int]", "c"]

    def test_call_arguments(self):
        assert call_arguments("f(1, (2, 3))") == "1, (2, 3)"
        assert call_arguments("CONSTANT") == ""

    def test_strip_double_backtick_span(self):
        assert strip_code_spans("`` a ` b ``") == "a ` b"


class TestSubject:
    def test_single_token(self):
        assert subject_of("age: must be >= 0") == "age"

    def test_no_colon(self):
        assert subject_of("must be positive") is None

    def test_several_tokens(self):
        assert subject_of("two words: x") is None
