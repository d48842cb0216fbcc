# src/specguard/contract/parsers/base.py
"""
Shared machinery for surface parsers.

A surface parser only has to split its notation into RawSections (label,
inline value, items, line numbers, styling facts). Everything after that,
from canonical line parsing to model construction, happens here so both
notations land on the same ContractModel.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

import yaml
from pydantic import ValidationError

from specguard.config.models import ContractMetadata
from specguard.contract.grammar import (
    FIELD_NAMES,
    LIST_FIELDS,
    REQUIRED_FIELDS,
    LineSyntaxError,
    normalize_whitespace,
    parse_rule_line,
    parse_test_line,
    strip_code_spans,
)
from specguard.contract.types import (
    BehaviorRule,
    ConstraintText,
    ContractModel,
    EdgeCaseText,
    ErrorDescriptor,
    ExpectationKind,
    ParsedContract,
    SurfaceKind,
    SurfaceTrace,
    TestCase,
)
from specguard.errors import ParseError
from specguard.logging import get_logger

_logger = get_logger(__name__)

_FENCE_RE = re.compile(r"^\s*(```|~~~)(?P<info>[\w-]*)\s*$")
_ITEM_RE = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s+(?P<text>.*)$")
# fields whose fenced blocks hold one entry per line
_LINE_FIELDS = ("BEHAVIOR", "TESTS", "CONSTRAINTS", "EDGE_CASES")


@dataclass
class RawItem:
    text: str
    line: int
    ticked: bool = False
    fenced: bool = False

    def split_fenced(self) -> List["RawItem"]:
        """One item per non-blank, non-comment line of a fenced block."""
        out = []
        for offset, raw in enumerate(self.text.splitlines()):
            stripped = raw.strip()
            if not stripped or stripped.startswith(("#", "//")):
                continue
            out.append(RawItem(stripped, self.line + offset, ticked=True))
        return out


@dataclass
class RawSection:
    label: str
    line: int
    bold: bool = True
    inline: Optional[RawItem] = None
    items: List[RawItem] = field(default_factory=list)

    @property
    def known(self) -> bool:
        return self.label in FIELD_NAMES


@dataclass
class SourceLines:
    """Contract text split into lines with running UTF-8 byte offsets."""

    text: str
    lines: List[str] = field(init=False)
    offsets: List[int] = field(init=False)

    def __post_init__(self) -> None:
        self.lines = self.text.splitlines()
        self.offsets = []
        pos = 0
        for raw in self.text.splitlines(keepends=True):
            self.offsets.append(pos)
            pos += len(raw.encode("utf-8"))

    def error(self, cause: str, line_no: int, column: int = 1) -> ParseError:
        idx = max(0, min(line_no - 1, len(self.lines) - 1)) if self.lines else 0
        text = self.lines[idx] if self.lines else None
        offset = 0
        if self.offsets:
            offset = self.offsets[idx] + len(text[: max(column - 1, 0)].encode("utf-8"))
        return ParseError(cause, line=line_no, column=column, offset=offset, text=text)


# --------------------------------------------------------------------------- #
# Pre-scan helpers shared by both notations
# --------------------------------------------------------------------------- #

def split_front_matter(src: SourceLines) -> Tuple[Optional[Dict[str, Any]], int]:
    """
    Parse an optional leading `---` YAML block.

    Returns:
        (mapping or None, index of the first line after the block)
    """
    i = 0
    while i < len(src.lines) and not src.lines[i].strip():
        i += 1
    if i >= len(src.lines) or src.lines[i].strip() != "---":
        return None, 0

    start = i
    for j in range(start + 1, len(src.lines)):
        if src.lines[j].strip() in ("---", "..."):
            body = "\n".join(src.lines[start + 1:j])
            return load_metadata_yaml(body, src, start + 2), j + 1
    raise src.error("unterminated front-matter block", start + 1)


def load_metadata_yaml(body: str, src: SourceLines, first_line: int) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(body) if body.strip() else {}
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        line = first_line + (mark.line if mark is not None else 0)
        raise src.error("invalid YAML metadata", line) from e
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise src.error("metadata block must be a mapping", first_line)
    return data


def iter_lines(src: SourceLines, start: int) -> Iterator[Tuple[int, str, str, str]]:
    """
    Yield (index, line, state, fence_info) from `start`, tracking code fences.

    state is "text", "open", "fenced" or "close".

    Raises:
        ParseError: a fence is opened and never closed
    """
    fence: Optional[str] = None
    fence_info = ""
    fence_line = 0
    for i in range(start, len(src.lines)):
        line = src.lines[i]
        if fence is None:
            m = _FENCE_RE.match(line)
            if m:
                fence, fence_info, fence_line = m.group(1), m.group("info"), i + 1
                yield i, line, "open", fence_info
            else:
                yield i, line, "text", ""
        elif line.strip() == fence:
            yield i, line, "close", fence_info
            fence = None
        else:
            yield i, line, "fenced", fence_info
    if fence is not None:
        raise src.error("unterminated code fence", fence_line)


def add_body_line(section: RawSection, line: str, line_no: int) -> None:
    """Attach one non-label line to a section, as a new item or a continuation."""
    if not line.strip():
        return
    ticked = "`" in line
    m = _ITEM_RE.match(line)
    if m:
        section.items.append(RawItem(m.group("text").strip(), line_no, ticked))
        return
    target = section.items[-1] if section.items else section.inline
    if line[:1].isspace() and target is not None:
        target.text = f"{target.text} {line.strip()}"
        target.ticked = target.ticked or ticked
    else:
        section.items.append(RawItem(line.strip(), line_no, ticked))


# (label, bold, rest of line) or None
LabelMatcher = Callable[[str], Optional[Tuple[str, bool, str]]]


@dataclass
class ScanResult:
    sections: List[RawSection]
    # fenced blocks before the first label: (info string, body, first body line)
    preamble_fences: List[Tuple[str, str, int]] = field(default_factory=list)
    preamble_text: List[Tuple[str, int]] = field(default_factory=list)


def scan_sections(src: SourceLines, start: int, match_label: LabelMatcher) -> ScanResult:
    """
    Split lines into labeled sections.

    A fenced block inside a section becomes a single item holding the fenced
    text verbatim; fences before the first label are returned separately.
    """
    result = ScanResult(sections=[])
    current: Optional[RawSection] = None
    fence_lines: List[str] = []
    fence_start = 0

    for i, line, state, info in iter_lines(src, start):
        line_no = i + 1
        if state == "open":
            fence_lines, fence_start = [], line_no + 1
            continue
        if state == "fenced":
            fence_lines.append(line)
            continue
        if state == "close":
            body = "\n".join(fence_lines)
            if current is None:
                result.preamble_fences.append((info, body, fence_start))
            elif body.strip():
                current.items.append(RawItem(body, fence_start, ticked=True, fenced=True))
            continue

        hit = match_label(line)
        if hit is not None:
            label, bold, rest = hit
            current = RawSection(label=label, line=line_no, bold=bold)
            if rest.strip():
                current.inline = RawItem(rest.strip(), line_no, "`" in rest)
            result.sections.append(current)
        elif current is None:
            if line.strip():
                result.preamble_text.append((line.strip(), line_no))
        else:
            add_body_line(current, line, line_no)
    return result


# --------------------------------------------------------------------------- #
# Parser interface
# --------------------------------------------------------------------------- #

class SurfaceParser(ABC):
    """
    Front-end for one surface notation.

    Subclasses implement `split_sections`; `parse` turns those sections into
    a ParsedContract through the canonical grammar.
    """

    kind: SurfaceKind

    def __init__(self, strict: bool = False):
        self.strict = strict

    @abstractmethod
    def split_sections(
        self, src: SourceLines
    ) -> Tuple[List[RawSection], Optional[Dict[str, Any]], Dict[str, Any]]:
        """Return (sections, metadata mapping or None, surface facts)."""
        ...

    @classmethod
    def probe(cls, line: str) -> bool:
        """True when `line` is a header token of this notation."""
        return False

    def parse(self, text: str, source: Optional[str] = None) -> ParsedContract:
        src = SourceLines(text)
        sections, meta, facts = self.split_sections(src)

        if self.strict:
            for s in sections:
                if not s.known:
                    raise src.error(f"unknown field name '{s.label}'", s.line)

        model = build_model(sections, meta, src)
        present = tuple(s.label for s in sections if s.known)
        trace = SurfaceTrace(
            present_fields=present,
            missing_fields=tuple(f for f in REQUIRED_FIELDS if f not in present),
            unknown_fields=tuple((s.label, s.line) for s in sections if not s.known),
            unbolded_labels=tuple(facts.get("unbolded_labels", ())),
            unticked_code=tuple(facts.get("unticked_code", ())),
            has_metadata=meta is not None,
            field_lines=_first_lines(sections),
        )
        _logger.debug(
            "Parsed %s contract %s: %d rules, %d tests, missing=%s",
            self.kind.value,
            model.identifier,
            len(model.behavior_rules),
            len(model.tests),
            list(trace.missing_fields),
        )
        return ParsedContract(model=model, surface=self.kind, trace=trace, source=source)


def _first_lines(sections: List[RawSection]) -> Dict[str, int]:
    out: Dict[str, int] = {}
    for s in sections:
        out.setdefault(s.label, s.line)
    return out


# --------------------------------------------------------------------------- #
# Model construction
# --------------------------------------------------------------------------- #

def _section_entries(section: RawSection) -> List[RawItem]:
    entries = []
    if section.inline is not None and section.inline.text.strip():
        entries.append(section.inline)
    entries.extend(section.items)
    return entries


def _section_text(section: RawSection) -> str:
    return normalize_whitespace(" ".join(strip_code_spans(e.text) for e in _section_entries(section)))


def build_model(
    sections: List[RawSection],
    meta: Optional[Dict[str, Any]],
    src: SourceLines,
) -> ContractModel:
    """
    Build the ContractModel from raw sections.

    A field declared twice contributes the entries of both blocks in document
    order; the duplication itself is reported by the structural checks.
    """
    grouped: Dict[str, List[RawSection]] = {}
    for s in sections:
        if s.known:
            grouped.setdefault(s.label, []).append(s)

    def entries(name: str) -> List[RawItem]:
        out: List[RawItem] = []
        for s in grouped.get(name, []):
            if name in _LINE_FIELDS:
                for e in _section_entries(s):
                    out.extend(e.split_fenced() if e.fenced else [e])
            elif name in LIST_FIELDS:
                out.extend(_section_entries(s))
            else:
                out.append(RawItem(_section_text(s), s.line))
        return out

    rules: List[BehaviorRule] = []
    for item in entries("BEHAVIOR"):
        try:
            condition, action, is_default = parse_rule_line(item.text)
        except LineSyntaxError as e:
            raise src.error(str(e), item.line) from e
        rules.append(BehaviorRule(condition, action, is_default, position=len(rules), line=item.line))

    tests: List[TestCase] = []
    for item in entries("TESTS"):
        try:
            invocation, kind, value, err_kind, err_msg = parse_test_line(item.text)
        except LineSyntaxError as e:
            raise src.error(str(e), item.line) from e
        if kind == "error":
            tests.append(
                TestCase(
                    invocation=invocation,
                    expectation=ExpectationKind.ERROR,
                    error=ErrorDescriptor(err_kind, err_msg),
                    position=len(tests),
                    line=item.line,
                )
            )
        else:
            tests.append(
                TestCase(
                    invocation=invocation,
                    expectation=ExpectationKind.VALUE,
                    expected_value=value,
                    position=len(tests),
                    line=item.line,
                )
            )

    constraints = tuple(
        ConstraintText.from_text(strip_code_spans(e.text), i, e.line)
        for i, e in enumerate(entries("CONSTRAINTS"))
    )
    edge_cases = tuple(
        EdgeCaseText.from_text(strip_code_spans(e.text), i, e.line)
        for i, e in enumerate(entries("EDGE_CASES"))
    )

    metadata = None
    if meta is not None:
        try:
            metadata = ContractMetadata.from_mapping(meta)
        except ValidationError as e:
            raise src.error(f"invalid metadata: {e.errors()[0].get('msg', e)}", 1) from e

    def joined(name: str) -> str:
        return " ".join(e.text for e in entries(name)).strip()

    complexity = joined("COMPLEXITY") or None
    return ContractModel(
        signature_text=joined("SIGNATURE"),
        intent_text=joined("INTENT"),
        behavior_rules=tuple(rules),
        tests=tuple(tests),
        constraints=constraints,
        edge_cases=edge_cases,
        metadata=metadata,
        dependencies=tuple(strip_code_spans(e.text) for e in entries("DEPENDENCIES")),
        examples=tuple(strip_code_spans(e.text) for e in entries("EXAMPLES")),
        complexity=complexity,
    )
