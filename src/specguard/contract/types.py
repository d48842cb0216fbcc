# src/specguard/contract/types.py
"""
Normalized contract model.

Every surface notation is translated into these types; nothing here knows
which notation a contract was written in. Surface-only facts (label styling,
unknown labels, line numbers) live on SurfaceTrace next to the model.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from specguard.config.models import ContractMetadata
from specguard.contract.grammar import (
    FIELD_NAMES,
    GENERIC_ERROR_KINDS,
    REQUIRED_FIELDS,
    action_value,
    call_arguments,
    parse_error_action,
    quote_message,
    subject_of,
)
from specguard.contract.signature import Signature, parse_signature


class SurfaceKind(str, Enum):
    """Surface notation a contract was written in."""

    BLOCK = "block"  # FIELD: value, list items below
    INLINE = "inline"  # **FIELD:** value, `code spans`

    def __str__(self) -> str:
        return self.value


class ExpectationKind(str, Enum):
    VALUE = "value"
    ERROR = "error"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ErrorDescriptor:
    """Error kind plus optional literal message."""

    kind: Optional[str]
    message: Optional[str] = None

    @property
    def is_generic(self) -> bool:
        return self.kind is None or self.kind.lower() in GENERIC_ERROR_KINDS

    def accepts_kind(self, other: "ErrorDescriptor") -> bool:
        """A generic rule kind accepts any concrete kind; otherwise kinds must be equal."""
        if self.is_generic:
            return True
        return self.kind == other.kind

    def render(self) -> str:
        kind = self.kind or "Error"
        if self.message is None:
            return kind
        return f"{kind} {quote_message(self.message)}"


@dataclass(frozen=True)
class BehaviorRule:
    condition: str
    action: str
    is_default: bool
    position: int
    line: Optional[int] = field(default=None, compare=False)

    @property
    def error(self) -> Optional[ErrorDescriptor]:
        parsed = parse_error_action(self.action)
        if parsed is None:
            return None
        return ErrorDescriptor(kind=parsed[0], message=parsed[1])

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def value(self) -> str:
        """Value expression of a VALUE action."""
        return action_value(self.action)

    def render(self) -> str:
        if self.is_default:
            return f"OTHERWISE {self.action}"
        return f"WHEN {self.condition} THEN {self.action}"


@dataclass(frozen=True)
class TestCase:
    invocation: str
    expectation: ExpectationKind
    expected_value: Optional[str] = None
    error: Optional[ErrorDescriptor] = None
    position: int = 0
    line: Optional[int] = field(default=None, compare=False)

    # not a pytest test class
    __test__ = False

    @property
    def arguments(self) -> str:
        return call_arguments(self.invocation)

    @property
    def expectation_text(self) -> str:
        if self.expectation is ExpectationKind.ERROR and self.error is not None:
            return f"raises {self.error.render()}"
        return self.expected_value or ""

    def render(self) -> str:
        if self.expectation is ExpectationKind.ERROR:
            return f"{self.invocation} {self.expectation_text}"
        return f"{self.invocation} == {self.expected_value}"


@dataclass(frozen=True)
class ConstraintText:
    text: str
    subject: Optional[str]
    position: int
    line: Optional[int] = field(default=None, compare=False)

    @classmethod
    def from_text(cls, text: str, position: int, line: Optional[int] = None) -> "ConstraintText":
        return cls(text=text, subject=subject_of(text), position=position, line=line)


@dataclass(frozen=True)
class EdgeCaseText:
    text: str
    subject: Optional[str]
    position: int
    line: Optional[int] = field(default=None, compare=False)

    @classmethod
    def from_text(cls, text: str, position: int, line: Optional[int] = None) -> "EdgeCaseText":
        return cls(text=text, subject=subject_of(text), position=position, line=line)


@dataclass(frozen=True)
class ContractModel:
    """
    The normalized contract.

    Invariants (non-empty rules, at least three tests, a single trailing
    OTHERWISE) are reported by the validators rather than enforced here, so a
    broken contract still produces a complete report.
    """

    signature_text: str
    intent_text: str
    behavior_rules: Tuple[BehaviorRule, ...] = ()
    tests: Tuple[TestCase, ...] = ()
    constraints: Tuple[ConstraintText, ...] = ()
    edge_cases: Tuple[EdgeCaseText, ...] = ()
    metadata: Optional[ContractMetadata] = None
    dependencies: Tuple[str, ...] = ()
    examples: Tuple[str, ...] = ()
    complexity: Optional[str] = None

    @property
    def signature(self) -> Optional[Signature]:
        return parse_signature(self.signature_text)

    @property
    def identifier(self) -> Optional[str]:
        """Declared contract identifier: the function name, else the metadata name."""
        sig = self.signature
        if sig is not None:
            return sig.name.rsplit(".", 1)[-1]
        if self.metadata is not None and self.metadata.name:
            return self.metadata.name
        return None

    @property
    def default_rules(self) -> List[BehaviorRule]:
        return [r for r in self.behavior_rules if r.is_default]

    @property
    def error_rules(self) -> List[BehaviorRule]:
        return [r for r in self.behavior_rules if r.is_error]

    def __repr__(self) -> str:
        return (
            f"ContractModel({self.identifier or '?'}: "
            f"{len(self.behavior_rules)} rules, {len(self.tests)} tests)"
        )


@dataclass(frozen=True)
class SurfaceTrace:
    """
    Surface facts recorded while parsing, consumed by the structural checks.

    Attributes:
        present_fields: field labels seen, in document order (duplicates kept)
        missing_fields: required fields absent from the document
        unknown_fields: (label, line) for labels outside the known field set
        unbolded_labels: (label, line) for inline labels without bold marks
        unticked_code: (field, index, line) for code entries without a code span
        has_metadata: a metadata block was present
        field_lines: first line of each field label
    """

    present_fields: Tuple[str, ...] = ()
    missing_fields: Tuple[str, ...] = ()
    unknown_fields: Tuple[Tuple[str, int], ...] = ()
    unbolded_labels: Tuple[Tuple[str, int], ...] = ()
    unticked_code: Tuple[Tuple[str, Optional[int], int], ...] = ()
    has_metadata: bool = False
    field_lines: Dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_model(cls, model: ContractModel) -> "SurfaceTrace":
        """Trace for a model built in code: a field is present when it has content."""
        content = {
            "SIGNATURE": model.signature_text,
            "INTENT": model.intent_text,
            "BEHAVIOR": model.behavior_rules,
            "TESTS": model.tests,
            "CONSTRAINTS": model.constraints,
            "EDGE_CASES": model.edge_cases,
            "DEPENDENCIES": model.dependencies,
            "EXAMPLES": model.examples,
            "COMPLEXITY": model.complexity,
        }
        present = tuple(name for name in FIELD_NAMES if content[name])
        return cls(
            present_fields=present,
            missing_fields=tuple(f for f in REQUIRED_FIELDS if f not in present),
            has_metadata=model.metadata is not None,
        )

    def has_field(self, name: str) -> bool:
        return name in self.present_fields

    @property
    def duplicate_fields(self) -> List[str]:
        seen: Dict[str, int] = {}
        for name in self.present_fields:
            seen[name] = seen.get(name, 0) + 1
        return [name for name, count in seen.items() if count > 1]


@dataclass(frozen=True)
class ParsedContract:
    """Parser output: the model plus where it came from."""

    model: ContractModel
    surface: SurfaceKind
    trace: SurfaceTrace = field(default_factory=SurfaceTrace)
    source: Optional[str] = None

    @property
    def identifier(self) -> Optional[str]:
        return self.model.identifier
