# src/specguard/checks/heuristics.py
"""
Text heuristics shared by the content and consistency checks.

All of these are shallow pattern matches over contract prose;
none of them interprets the specified function.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Set

from specguard.contract.grammar import normalize_value, strip_code_spans

# --------------------------------------------------------------------------- #
# Intent
# --------------------------------------------------------------------------- #

_SENTENCE_END_RE = re.compile(r"(?<=[.!?])\s+")


def count_sentences(text: str) -> int:
    """Sentences end in `.`, `!` or `?`; an unterminated tail counts as one more."""
    text = text.strip()
    if not text:
        return 0
    return len([s for s in _SENTENCE_END_RE.split(text) if s.strip()])


IMPLEMENTATION_TERMS = (
    # algorithms
    "quicksort",
    "quick sort",
    "mergesort",
    "merge sort",
    "bubble sort",
    "heapsort",
    "binary search",
    "dijkstra",
    "a* search",
    "dynamic programming",
    "memoization",
    "memoize",
    "recursion",
    "recursive",
    "hash map",
    "hashmap",
    "hash table",
    "linked list",
    "regex",
    "regular expression",
    # libraries
    "numpy",
    "pandas",
    "lodash",
    "moment.js",
    "jquery",
    "serde",
    "tokio",
    "java.util",
    "std::",
)

_REGEX_LITERAL_RES = (
    re.compile(r"(?<![\w/])/(?:[^/\s\\]|\\.){2,}/[gimsuy]*(?![\w/])"),
    re.compile(r"\br([\"']).+?\1"),
    re.compile(r"\\[dDwWsSbB]"),
    re.compile(r"\[\^?[^\]]+\][+*]"),
)


def implementation_tokens(text: str, extra: Iterable[str] = ()) -> List[str]:
    """Denylisted terms and regular-expression literals found in `text`, in order of first appearance."""
    found = []
    lowered = text.lower()
    for term in list(IMPLEMENTATION_TERMS) + [t.lower() for t in extra if t.strip()]:
        pattern = r"(?<![\w])" + re.escape(term) + (r"(?![\w])" if term[-1].isalnum() else "")
        m = re.search(pattern, lowered)
        if m:
            found.append((m.start(), text[m.start():m.end()]))
    for rx in _REGEX_LITERAL_RES:
        for m in rx.finditer(text):
            found.append((m.start(), m.group(0)))
    found.sort()
    out: List[str] = []
    for _, token in found:
        if token not in out:
            out.append(token)
    return out


# --------------------------------------------------------------------------- #
# Bounds
# --------------------------------------------------------------------------- #

_COMPARISON_RE = re.compile(
    r"(<=|>=|≤|≥|<|>|!=|"
    r"\b(?:at least|at most|less than|greater than|more than|fewer than|between|"
    r"exceed|exceeds|up to|no more than|no less than|maximum|minimum|max|min|"
    r"positive|negative|non-negative|nonnegative|non-empty|nonempty|length|size)\b)",
    re.IGNORECASE,
)
_NUMBER_RE = re.compile(r"(?<![\w.])-?\d+(?:\.\d+)?(?![\w.])")


def is_bound(text: str) -> bool:
    """A constraint implies a bound when it has a comparison word/operator or a number."""
    text = strip_code_spans(text)
    return bool(_COMPARISON_RE.search(text) or _NUMBER_RE.search(text))


def numbers_in(text: str) -> List[float]:
    return [float(m.group(0)) for m in _NUMBER_RE.finditer(text)]


def declared_bounds(texts: Iterable[str]) -> Set[float]:
    out: Set[float] = set()
    for text in texts:
        out.update(numbers_in(strip_code_spans(text)))
    return out


_EMPTY_LITERALS = ('""', "[]", "{}", "()", "set()")


def is_boundary_argument(arguments: str, bounds: Set[float]) -> bool:
    """Arguments include 0, an empty literal, or one of the declared bounds."""
    values = numbers_in(arguments)
    if any(v == 0 for v in values) or any(v in bounds for v in values):
        return True
    norm = normalize_value(arguments)
    return any(lit in norm for lit in _EMPTY_LITERALS)


def mentions(subject: str, text: str) -> bool:
    return re.search(r"(?<![\w])" + re.escape(subject) + r"(?![\w])", text) is not None


# --------------------------------------------------------------------------- #
# Edge-case trigger values
# --------------------------------------------------------------------------- #

_OUTCOME_SPLIT_RE = re.compile(r"→|->|=>|\b(?:returns?|raises?|throws?|should|must|yields?)\b")
_QUOTED_RE = re.compile(r"\"(?:[^\"\\]|\\.)*\"|'(?:[^'\\]|\\.)*'")
_CONTAINER_RE = re.compile(r"\[\s*\]|\{\s*\}")
_NULL_RE = re.compile(r"\b(?:None|null|nil|undefined)\b")
_NULL_WORDS = ("null", "none", "nil", "undefined", "missing")


@dataclass(frozen=True)
class Trigger:
    """One value an edge case is about. kind: literal | number | negative | null."""

    kind: str
    value: Optional[str] = None

    def found_in(self, arguments: str) -> bool:
        if self.kind == "number":
            return float(self.value) in numbers_in(arguments)
        if self.kind == "negative":
            return any(v < 0 for v in numbers_in(arguments))
        if self.kind == "null":
            return _NULL_RE.search(arguments) is not None
        return normalize_value(self.value) in normalize_value(arguments)


def trigger_values(text: str) -> List[Trigger]:
    """
    Values an edge case is triggered by.

    Only the part before an outcome marker (`→`, `returns`, `raises`, ...) and
    after the `subject:` prefix is inspected. Recognized: quoted literals,
    numbers, `[]`/`{}`, None/null, and the words empty, zero, negative, null.
    """
    text = strip_code_spans(text)
    if ":" in text:
        head, tail = text.split(":", 1)
        if len(head.split()) == 1:
            text = tail
    text = _OUTCOME_SPLIT_RE.split(text, maxsplit=1)[0]

    out: List[Trigger] = []

    def add(t: Trigger) -> None:
        if t not in out:
            out.append(t)

    for m in _QUOTED_RE.finditer(text):
        add(Trigger("literal", m.group(0)))
    unquoted = _QUOTED_RE.sub(" ", text)
    for m in _CONTAINER_RE.finditer(unquoted):
        add(Trigger("literal", m.group(0)))
    for m in _NUMBER_RE.finditer(unquoted):
        add(Trigger("number", m.group(0)))
    if _NULL_RE.search(unquoted):
        add(Trigger("null"))

    words = set(re.findall(r"[a-z]+", unquoted.lower()))
    if "empty" in words:
        for lit in ('""', "[]", "{}"):
            add(Trigger("literal", lit))
    if "zero" in words:
        add(Trigger("number", "0"))
    if "negative" in words:
        add(Trigger("negative"))
    if words.intersection(_NULL_WORDS):
        add(Trigger("null"))
    return out
