# src/specguard/contract/grammar.py
"""
Canonical line grammar shared by every surface notation.

Both notations are translated into these line forms before any model object
is built:

    rule:  WHEN <condition> THEN <action>
           OTHERWISE <action>
    test:  <invocation> == <value>
           <invocation> raises <ErrorKind>[ "<message>"]

Keywords are case-sensitive. Bump GRAMMAR_VERSION when a line form changes.
"""

from __future__ import annotations

import re
import string
from typing import Optional, Tuple

GRAMMAR_VERSION = "1"

FIELD_NAMES: Tuple[str, ...] = (
    "SIGNATURE",
    "INTENT",
    "BEHAVIOR",
    "TESTS",
    "CONSTRAINTS",
    "EDGE_CASES",
    "DEPENDENCIES",
    "EXAMPLES",
    "COMPLEXITY",
)
REQUIRED_FIELDS: Tuple[str, ...] = ("SIGNATURE", "INTENT", "BEHAVIOR", "TESTS")
TEXT_FIELDS: Tuple[str, ...] = ("SIGNATURE", "INTENT", "COMPLEXITY")
LIST_FIELDS: Tuple[str, ...] = tuple(f for f in FIELD_NAMES if f not in TEXT_FIELDS)

_RULE_RE = re.compile(r"^WHEN\s+(?P<condition>.+?)\s+THEN\s+(?P<action>\S.*)$")
_WHEN_RE = re.compile(r"^WHEN\s+")
_DEFAULT_RE = re.compile(r"^OTHERWISE\s+(?P<action>\S.*)$")
_RAISES_TAIL_RE = re.compile(
    r"^(?P<kind>[A-Za-z_][\w.]*)\s*(?:\(\s*(?P<pmsg>(?P<pq>[\"']).*(?P=pq))\s*\)|(?P<msg>(?P<q>[\"']).*(?P=q)))?\s*$"
)
_ERROR_ACTION_RE = re.compile(
    r"^(?:raise|raises|throw|throws)\s+(?:new\s+)?(?P<kind>[A-Za-z_][\w.]*)?(?P<rest>.*)$"
)
_QUOTED_RE = re.compile(r"\"((?:[^\"\\]|\\.)*)\"|'((?:[^'\\]|\\.)*)'")
_RETURN_PREFIX_RE = re.compile(r"^(?:return|returns|=>|->)\s+", re.IGNORECASE)
_CODE_SPAN_RE = re.compile(r"(`+)(.*?)\1")
_PUNCT_TABLE = str.maketrans({c: " " for c in string.punctuation})
_OPERATOR_RE = re.compile(r"->|=>|<=|>=|==|!=|≤|≥|<|>")
_OPERATOR_WORDS = {
    "<=": " le ", ">=": " ge ", "==": " eq ", "!=": " ne ",
    "≤": " le ", "≥": " ge ", "<": " lt ", ">": " gt ",
}

GENERIC_ERROR_KINDS = frozenset({"error", "exception"})


# --------------------------------------------------------------------------- #
# Scanning helpers
# --------------------------------------------------------------------------- #

_OPENERS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = {v: k for k, v in _OPENERS.items()}


def find_top_level(text: str, needle: str, start: int = 0) -> int:
    """
    Index of the first `needle` outside quotes and brackets, or -1.

    Used so that `f("a == b") == True` splits on the second `==` only.
    """
    depth = 0
    quote: Optional[str] = None
    i = start
    n = len(text)
    while i < n:
        ch = text[i]
        if quote:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch in _OPENERS:
            depth += 1
        elif ch in _CLOSERS:
            depth = max(0, depth - 1)
        elif depth == 0 and text.startswith(needle, i):
            return i
        i += 1
    return -1


def _unbalanced_quotes(text: str) -> bool:
    return text.count('"') % 2 == 1 or text.count("'") % 2 == 1


def matching_paren(text: str, open_index: int) -> int:
    """Index of the bracket closing the one at `open_index`, or -1 if unbalanced."""
    stack = []
    quote: Optional[str] = None
    i = open_index
    while i < len(text):
        ch = text[i]
        if quote:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch in _OPENERS:
            stack.append(_OPENERS[ch])
        elif ch in _CLOSERS:
            if not stack or stack.pop() != ch:
                return -1
            if not stack:
                return i
        i += 1
    return -1


def split_top_level(text: str, sep: str = ",") -> list:
    """Split on `sep` outside quotes and brackets; empty pieces are dropped."""
    parts = []
    rest = text
    while True:
        idx = find_top_level(rest, sep)
        if idx < 0:
            break
        parts.append(rest[:idx])
        rest = rest[idx + len(sep):]
    parts.append(rest)
    return [p.strip() for p in parts if p.strip()]


def strip_code_spans(text: str) -> str:
    """Unwrap `code spans`, keeping their contents."""
    return _CODE_SPAN_RE.sub(
        lambda m: m.group(2).strip() if len(m.group(1)) > 1 else m.group(2), text
    ).strip()


# --------------------------------------------------------------------------- #
# Normalization
# --------------------------------------------------------------------------- #

def normalize_text(text: str) -> str:
    """
    Canonical form of a rule part for drift alignment.

    Lower-cased, comparison operators replaced by word tokens (`<` becomes
    `lt`, `>=` becomes `ge`), remaining punctuation stripped, whitespace
    collapsed. Arrows (`->`, `=>`) are punctuation, not comparisons.
    """
    text = _OPERATOR_RE.sub(lambda m: _OPERATOR_WORDS.get(m.group(0), " "), text.lower())
    return " ".join(text.translate(_PUNCT_TABLE).split())


def normalize_whitespace(text: str) -> str:
    return " ".join(text.split())


def normalize_value(text: str) -> str:
    """
    Canonical form of a value expression for coverage matching.

    Whitespace outside string literals is removed, whitespace inside them is
    collapsed, single-quoted literals become double-quoted, and code-span
    backticks are dropped.
    """
    text = text.replace("`", "").strip()
    out = []
    quote: Optional[str] = None
    pending_space = False
    i = 0
    while i < len(text):
        ch = text[i]
        if quote:
            if ch == "\\" and i + 1 < len(text):
                out.append(text[i:i + 2])
                i += 2
                continue
            if ch == quote:
                out.append('"')
                quote = None
                pending_space = False
            elif ch.isspace():
                pending_space = True
            else:
                if pending_space:
                    out.append(" ")
                    pending_space = False
                out.append('\\"' if ch == '"' else ch)
        elif ch in ("'", '"'):
            quote = ch
            pending_space = False
            out.append('"')
        elif not ch.isspace():
            out.append(ch)
        i += 1
    return "".join(out)


def action_value(action: str) -> str:
    """The value expression of a VALUE action (`return X` → `X`)."""
    return _RETURN_PREFIX_RE.sub("", action.strip(), count=1).strip()


def unquote(literal: str) -> str:
    literal = literal.strip()
    if len(literal) >= 2 and literal[0] == literal[-1] and literal[0] in ("'", '"'):
        q = literal[0]
        return literal[1:-1].replace("\\" + q, q)
    return literal


def quote_message(message: str) -> str:
    """Render a message literal, picking the quote char that needs no escaping."""
    if '"' in message and "'" not in message:
        return f"'{message}'"
    return '"' + message.replace('"', '\\"') + '"'


# --------------------------------------------------------------------------- #
# Line parsers
# --------------------------------------------------------------------------- #

class LineSyntaxError(ValueError):
    """Raised by the line parsers; surface parsers attach a location and re-raise as ParseError."""


def parse_rule_line(line: str) -> Tuple[str, str, bool]:
    """
    Parse one BEHAVIOR line.

    Returns:
        (condition, action, is_default); condition is "" for OTHERWISE.

    Raises:
        LineSyntaxError: line is neither WHEN…THEN… nor OTHERWISE…
    """
    text = strip_code_spans(line)
    m = _DEFAULT_RE.match(text)
    if m:
        return "", m.group("action").strip(), True
    m = _WHEN_RE.match(text)
    if m:
        i = find_top_level(text, "THEN", m.end())
        while i != -1:
            condition, action = text[m.end():i].strip(), text[i + 4:].strip()
            if text[i - 1].isspace() and text[i + 4:i + 5].isspace() and condition and action:
                return condition, action, False
            i = find_top_level(text, "THEN", i + 1)
    # An unbalanced quote in prose (`user's age`) hides every THEN from the scan.
    m = _RULE_RE.match(text) if _unbalanced_quotes(text) else None
    if m:
        return m.group("condition").strip(), m.group("action").strip(), False
    raise LineSyntaxError("malformed rule line")


def parse_test_line(line: str) -> Tuple[str, str, Optional[str], Optional[str], Optional[str]]:
    """
    Parse one TESTS line.

    Returns:
        (invocation, kind, expected_value, error_kind, error_message)
        where kind is "value" or "error".

    Raises:
        LineSyntaxError: no top-level `==` or `raises`, or an empty side
    """
    text = strip_code_spans(line)

    idx = find_top_level(text, " raises ")
    eq = find_top_level(text, "==")
    if idx >= 0 and (eq < 0 or idx < eq):
        invocation = text[:idx].strip()
        tail = text[idx + len(" raises "):].strip()
        m = _RAISES_TAIL_RE.match(tail)
        if not invocation or not m:
            raise LineSyntaxError("malformed test line")
        literal = m.group("pmsg") or m.group("msg")
        message = unquote(literal) if literal else None
        return invocation, "error", None, m.group("kind"), message

    if eq >= 0:
        invocation = text[:eq].strip()
        value = text[eq + 2:].strip()
        if invocation and value:
            return invocation, "value", value, None, None
    raise LineSyntaxError("malformed test line")


def parse_error_action(action: str) -> Optional[Tuple[Optional[str], Optional[str]]]:
    """
    Recognize an error-like action (`raise X("msg")`, `throw new X`, …).

    Returns:
        (kind, message) or None when the action returns a value.
    """
    text = strip_code_spans(action)
    m = _ERROR_ACTION_RE.match(text)
    if not m:
        return None
    kind = m.group("kind")
    rest = m.group("rest") or ""
    message = None
    q = _QUOTED_RE.search(rest)
    if q:
        message = unquote(q.group(0))
    elif kind is None:
        q = _QUOTED_RE.search(text)
        if q:
            message = unquote(q.group(0))
    return kind, message


def call_arguments(invocation: str) -> str:
    """Text between the outermost call parentheses, or "" if the invocation has none."""
    start = invocation.find("(")
    if start < 0:
        return ""
    end = matching_paren(invocation, start)
    if end < 0:
        return invocation[start + 1:]
    return invocation[start + 1:end]


def subject_of(text: str) -> Optional[str]:
    """First token before `:` (the parameter/field a constraint or edge case is about)."""
    text = strip_code_spans(text)
    if ":" not in text:
        return None
    head = text.split(":", 1)[0].strip()
    if not head:
        return None
    tokens = head.split()
    return tokens[0] if len(tokens) == 1 else None
