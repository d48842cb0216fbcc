# src/specguard/contract/signature.py
"""
Function signature recognition across target syntaxes.

A signature is accepted when it has a name, a parenthesized parameter list
and, optionally, a return annotation in one of the supported notations:

    python      def name(a: int, b: str = "x") -> bool
    rust        pub fn name(a: i32) -> Result<i32, Error>
    typescript  export function name(a: number, b?: string): boolean
    go          func name(a, b int) (int, error)
    bare        name(a: int) -> bool
    c-like      public static boolean name(int a, String b)

Free-form prose is rejected. Parsed signatures feed the C1 check, the S4
identifier check and parameter-level drift comparison.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Pattern, Tuple

from specguard.contract.grammar import matching_paren, split_top_level, strip_code_spans


@dataclass(frozen=True)
class Parameter:
    name: str
    annotation: Optional[str] = None
    default: Optional[str] = None
    position: int = 0

    def render(self) -> str:
        out = self.name
        if self.annotation:
            out += f": {self.annotation}"
        if self.default is not None:
            out += f" = {self.default}"
        return out


@dataclass(frozen=True)
class Signature:
    name: str
    parameters: Tuple[Parameter, ...]
    returns: Optional[str]
    syntax: str

    @property
    def parameter_names(self) -> List[str]:
        return [p.name for p in self.parameters]

    def render(self) -> str:
        params = ", ".join(p.render() for p in self.parameters)
        ret = f" -> {self.returns}" if self.returns else ""
        return f"{self.name}({params}){ret}"


_C_MODIFIERS = (
    "public|private|protected|internal|static|final|abstract|synchronized|"
    "virtual|override|sealed|async|inline|extern|unsafe|const"
)

# (syntax, prefix up to and including the opening paren, allowed tail after the closing paren)
_SYNTAXES: List[Tuple[str, Pattern[str], Pattern[str]]] = [
    (
        "python",
        re.compile(r"^(?:async\s+)?def\s+(?P<name>[A-Za-z_]\w*)\s*(?:\[[^\]]*\]\s*)?\("),
        re.compile(r"^\s*(?:->\s*(?P<ret>[^:]+?))?\s*:?\s*$"),
    ),
    (
        "rust",
        re.compile(
            r"^(?:pub(?:\([^)]*\))?\s+)?(?:const\s+)?(?:async\s+)?(?:unsafe\s+)?"
            r"fn\s+(?P<name>[A-Za-z_]\w*)\s*(?:<[^(]*>)?\s*\("
        ),
        re.compile(r"^\s*(?:->\s*(?P<ret>.+?))?\s*(?:where\s+.+?)?\s*[{;]?\s*$"),
    ),
    (
        "typescript",
        re.compile(
            r"^(?:export\s+)?(?:default\s+)?(?:async\s+)?function\s*\*?\s*"
            r"(?P<name>[A-Za-z_$][\w$]*)\s*(?:<[^(]*>)?\s*\("
        ),
        re.compile(r"^\s*(?::\s*(?P<ret>.+?))?\s*[{;]?\s*$"),
    ),
    (
        "go",
        re.compile(r"^func\s+(?:\([^)]*\)\s*)?(?P<name>[A-Za-z_]\w*)\s*(?:\[[^\]]*\]\s*)?\("),
        re.compile(r"^\s*(?P<ret>[\w\s.,*()\[\]]*?)\s*\{?\s*$"),
    ),
    (
        "bare",
        re.compile(r"^(?P<name>[A-Za-z_][\w.]*)\s*\("),
        re.compile(r"^\s*(?:(?:->|=>|:)\s*(?P<ret>.+?))?\s*:?\s*$"),
    ),
    (
        "c-like",
        re.compile(
            rf"^(?:(?:{_C_MODIFIERS})\s+)*"
            r"(?P<ret>[A-Za-z_][\w.:]*(?:<[^(]*>)?(?:\[\])*[?*&]?)\s+[*&]?(?P<name>[A-Za-z_]\w*)\s*\("
        ),
        re.compile(r"^\s*(?:const\s*)?(?:throws\s+[\w.,\s]+?)?\s*[{;]?\s*$"),
    ),
]

_NAMED_PARAM_RE = re.compile(
    r"^(?P<name>(?:\.\.\.|\*{1,2}|&)?(?:mut\s+)?[A-Za-z_$][\w$]*\??)"
    r"\s*(?::\s*(?P<ann>.+?))?\s*(?:=\s*(?P<default>.+))?$"
)
_IDENT_RE = re.compile(r"^[A-Za-z_][\w]*$")


def _clean(text: str) -> str:
    text = strip_code_spans(text).strip()
    return " ".join(text.split())


def parse_signature(text: str) -> Optional[Signature]:
    """Parse `text` as a function declaration, or return None if it is not one."""
    text = _clean(text)
    # a trailing period marks a sentence
    if not text or text.endswith("."):
        return None

    for syntax, prefix, tail in _SYNTAXES:
        m = prefix.match(text)
        if not m:
            continue
        open_idx = m.end() - 1
        close_idx = matching_paren(text, open_idx)
        if close_idx < 0:
            return None
        t = tail.match(text[close_idx + 1:])
        if not t:
            continue
        params_text = text[open_idx + 1:close_idx]
        ret = t.groupdict().get("ret") or m.groupdict().get("ret")
        if syntax == "c-like" and ret in ("return", "returns", "def", "function", "fn", "func"):
            continue
        params = _parse_params(params_text, syntax)
        if params is None:
            continue
        return Signature(
            name=m.group("name"),
            parameters=tuple(params),
            returns=ret.strip() if ret and ret.strip() else None,
            syntax=syntax,
        )
    return None


def _parse_params(text: str, syntax: str) -> Optional[List[Parameter]]:
    pieces = split_top_level(text, ",")
    if syntax == "go":
        return _parse_go_params(pieces)
    if syntax == "c-like":
        return _parse_c_params(pieces)

    params: List[Parameter] = []
    for piece in pieces:
        if piece in ("*", "/", "self", "&self", "&mut self", "cls"):
            continue
        m = _NAMED_PARAM_RE.match(piece)
        if not m:
            return None
        params.append(
            Parameter(
                name=m.group("name"),
                annotation=(m.group("ann") or None),
                default=m.group("default"),
                position=len(params),
            )
        )
    return params


def _parse_go_params(pieces: List[str]) -> Optional[List[Parameter]]:
    # Go groups names before a shared type: `a, b int`.
    raw: List[Tuple[str, Optional[str]]] = []
    for piece in pieces:
        parts = piece.split(None, 1)
        if len(parts) == 2:
            raw.append((parts[0], parts[1]))
        elif _IDENT_RE.match(parts[0]):
            raw.append((parts[0], None))
        else:
            return None
    resolved: List[Tuple[str, Optional[str]]] = []
    pending_type: Optional[str] = None
    for name, typ in reversed(raw):
        if typ is not None:
            pending_type = typ
        resolved.append((name, typ if typ is not None else pending_type))
    resolved.reverse()
    return [Parameter(name=n, annotation=t, position=i) for i, (n, t) in enumerate(resolved)]


def _parse_c_params(pieces: List[str]) -> Optional[List[Parameter]]:
    params: List[Parameter] = []
    for piece in pieces:
        if piece == "void":
            continue
        default = None
        if "=" in piece:
            piece, default = (s.strip() for s in piece.split("=", 1))
        m = re.match(r"^(?P<type>.+?)\s*[*&]?\s*\b(?P<name>[A-Za-z_]\w*)$", piece)
        if not m or not m.group("type").strip():
            return None
        params.append(
            Parameter(
                name=m.group("name"),
                annotation=m.group("type").strip(),
                default=default,
                position=len(params),
            )
        )
    return params
