# tests/test_parser.py
"""Tests for surface detection and both surface parsers."""

import pytest

from specguard.contract import ErrorDescriptor, ExpectationKind, SurfaceKind, detect_surface, parse_contract
from specguard.errors import ParseError

from utils import make_contract


class TestSurfaceDetection:
    def test_block(self, coupon_block):
        assert detect_surface(coupon_block) is SurfaceKind.BLOCK

    def test_inline(self, coupon_inline):
        assert detect_surface(coupon_inline) is SurfaceKind.INLINE

    def test_no_header(self):
        with pytest.raises(ParseError) as exc:
            detect_surface("Just some prose.\nNothing structured here.\n")
        assert exc.value.cause == "no recognizable contract header"
        assert exc.value.line == 1

    def test_explicit_surface_overrides_detection(self, coupon_block):
        parsed = parse_contract(coupon_block, "block")
        assert parsed.surface is SurfaceKind.BLOCK

    def test_unknown_surface_kind(self, coupon_block):
        with pytest.raises(ValueError):
            parse_contract(coupon_block, "yaml")


class TestBlockNotation:
    def test_fields(self, coupon_block):
        model = parse_contract(coupon_block).model
        assert model.signature_text.startswith("def validate_coupon(")
        assert model.intent_text == "Decide whether a coupon code can be applied to a cart."
        assert len(model.behavior_rules) == 4
        assert len(model.tests) == 4
        assert model.identifier == "validate_coupon"

    def test_rule_positions_and_default(self, coupon_block):
        rules = parse_contract(coupon_block).model.behavior_rules
        assert [r.position for r in rules] == [0, 1, 2, 3]
        assert [r.is_default for r in rules] == [False, False, False, True]
        assert rules[0].condition == "code is empty"
        assert rules[0].action == 'return (False, "Coupon code cannot be empty")'

    def test_error_rule_and_test(self, coupon_block):
        model = parse_contract(coupon_block).model
        assert model.behavior_rules[2].error == ErrorDescriptor("ValueError", "Unknown coupon")
        t = model.tests[2]
        assert t.expectation is ExpectationKind.ERROR
        assert t.error == ErrorDescriptor("ValueError", "Unknown coupon")
        assert t.arguments == '"NOPE", 50'

    def test_metadata(self, coupon_block):
        meta = parse_contract(coupon_block).model.metadata
        assert meta.name == "validate_coupon"
        assert meta.language == "python"
        assert meta.version == "1.0"

    def test_constraints_and_edge_cases(self, coupon_block):
        model = parse_contract(coupon_block).model
        assert model.constraints[0].subject == "cart_total"
        assert model.edge_cases[0].subject == "code"

    def test_continuation_lines_join_item(self):
        text = make_contract(
            ["WHEN x is very\n    large THEN return 1", "OTHERWISE return 0"],
            ["f(1) == 1", "f(2) == 0", "f(3) == 0"],
        )
        rule = parse_contract(text).model.behavior_rules[0]
        assert rule.condition == "x is very large"

    def test_fenced_rules_split_per_line(self):
        text = (
            "SIGNATURE: def f(x: int) -> int\n"
            "INTENT: Compute f.\n"
            "BEHAVIOR:\n"
            "```\n"
            "WHEN x < 0 THEN raise ValueError\n"
            "OTHERWISE return x\n"
            "```\n"
            "TESTS:\n"
            "  - f(-1) raises ValueError\n"
            "  - f(1) == 1\n"
            "  - f(0) == 0\n"
        )
        rules = parse_contract(text).model.behavior_rules
        assert [r.render() for r in rules] == ["WHEN x < 0 THEN raise ValueError", "OTHERWISE return x"]
        assert [r.line for r in rules] == [5, 6]

    def test_missing_required_field_is_traced(self):
        text = "SIGNATURE: def f(x: int) -> int\nINTENT: Compute f.\nBEHAVIOR:\n  - OTHERWISE return x\n"
        parsed = parse_contract(text)
        assert parsed.trace.missing_fields == ("TESTS",)

    def test_unknown_field_is_traced(self):
        text = make_contract(["OTHERWISE return x"], ["f(1) == 1"], extra="NOTES: remember this")
        parsed = parse_contract(text)
        assert [label for label, _ in parsed.trace.unknown_fields] == ["NOTES"]

    def test_unknown_field_strict(self):
        text = make_contract(["OTHERWISE return x"], ["f(1) == 1"], extra="NOTES: remember this")
        with pytest.raises(ParseError) as exc:
            parse_contract(text, strict=True)
        assert "unknown field name 'NOTES'" in str(exc.value)

    def test_deterministic(self, coupon_block):
        assert parse_contract(coupon_block) == parse_contract(coupon_block)


class TestParseErrors:
    def test_malformed_rule_line(self):
        text = make_contract(["IF x THEN y"], ["f(1) == 1"])
        with pytest.raises(ParseError) as exc:
            parse_contract(text)
        err = exc.value
        assert err.cause == "malformed rule line"
        assert err.line == 4
        assert err.column == 1
        assert err.offset == text.index("  - IF x")

    def test_offset_counts_utf8_bytes(self):
        text = make_contract(["IF x THEN y"], ["f(1) == 1"], intent="Calcule la déduction élevée.")
        with pytest.raises(ParseError) as exc:
            parse_contract(text)
        err = exc.value
        assert err.line == 4
        prefix = text[: text.index("  - IF x")]
        assert err.offset == len(prefix.encode("utf-8"))
        assert err.offset > len(prefix)

    def test_malformed_test_line(self):
        text = make_contract(["OTHERWISE return x"], ["f(1) equals 1"])
        with pytest.raises(ParseError) as exc:
            parse_contract(text)
        assert exc.value.cause == "malformed test line"
        assert exc.value.line == 6

    def test_unterminated_front_matter(self):
        with pytest.raises(ParseError) as exc:
            parse_contract("---\nname: f\nSIGNATURE: def f() -> int\n")
        assert exc.value.cause == "unterminated front-matter block"
        assert exc.value.line == 1

    def test_unterminated_code_fence(self):
        text = "SIGNATURE: def f() -> int\nINTENT: x\nBEHAVIOR:\n```\nWHEN a THEN return b\n"
        with pytest.raises(ParseError) as exc:
            parse_contract(text)
        assert exc.value.cause == "unterminated code fence"
        assert exc.value.line == 4

    def test_invalid_yaml_metadata(self):
        text = "---\nname: [unclosed\n---\n" + make_contract(["OTHERWISE return x"], ["f(1) == 1"])
        with pytest.raises(ParseError) as exc:
            parse_contract(text)
        assert exc.value.cause == "invalid YAML metadata"

    def test_to_dict(self):
        err = ParseError("malformed rule line", line=3, column=1, offset=40)
        assert err.to_dict() == {
            "error": "parse_error",
            "cause": "malformed rule line",
            "line": 3,
            "column": 1,
            "offset": 40,
        }


class TestInlineNotation:
    def test_same_model_as_block(self, coupon_block, coupon_inline):
        block = parse_contract(coupon_block).model
        inline = parse_contract(coupon_inline).model
        assert inline.behavior_rules == block.behavior_rules
        assert inline.tests == block.tests
        assert inline.signature_text == block.signature_text
        assert inline.metadata == block.metadata

    def test_clean_surface_facts(self, coupon_inline):
        trace = parse_contract(coupon_inline).trace
        assert trace.unbolded_labels == ()
        assert trace.unticked_code == ()

    def test_unbolded_label_and_unticked_test(self):
        text = (
            "**SIGNATURE:** `def f(x: int) -> int`\n"
            "INTENT: Compute f.\n"
            "**BEHAVIOR:**\n"
            "- WHEN x < 0 THEN return 0\n"
            "- OTHERWISE return x\n"
            "**TESTS:**\n"
            "- `f(-1) == 0`\n"
            "- f(2) == 2\n"
            "- `f(0) == 0`\n"
        )
        parsed = parse_contract(text)
        assert parsed.surface is SurfaceKind.INLINE
        assert parsed.trace.unbolded_labels == (("INTENT", 2),)
        assert parsed.trace.unticked_code == (("TESTS", 1, 8),)

    def test_yaml_fence_metadata(self):
        text = (
            "```yaml\n"
            "name: f\n"
            "language: python\n"
            "```\n"
            "**SIGNATURE:** `def f(x: int) -> int`\n"
            "**INTENT:** Compute f.\n"
            "**BEHAVIOR:**\n"
            "- OTHERWISE return x\n"
            "**TESTS:**\n"
            "- `f(1) == 1`\n"
        )
        meta = parse_contract(text).model.metadata
        assert meta.name == "f"
        assert meta.language == "python"
