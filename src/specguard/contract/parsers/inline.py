# src/specguard/contract/parsers/inline.py
"""
Bold-label-plus-backtick notation (Markdown).

    # validate_coupon
    **SIGNATURE:** `def validate_coupon(code: str) -> tuple[bool, str]`
    **INTENT:** Decide whether a coupon code can be applied.
    **BEHAVIOR:**
    - WHEN code is empty THEN return `(False, "Coupon code cannot be empty")`
    - OTHERWISE return `(True, "")`
    **TESTS:**
    - `validate_coupon("") == (False, "Coupon code cannot be empty")`

Metadata comes from YAML front matter or a ```yaml fence placed before the
first label. Labels without bold marks are still read, and recorded so the
structural checks can report them.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Tuple

from specguard.contract.grammar import FIELD_NAMES
from specguard.contract.parsers.base import (
    RawSection,
    SourceLines,
    SurfaceParser,
    load_metadata_yaml,
    scan_sections,
    split_front_matter,
)
from specguard.contract.parsers.registry import register_parser
from specguard.contract.types import SurfaceKind

_LABEL_RE = re.compile(
    r"^\s*(?P<open>\*\*|__)?(?P<label>[A-Z][A-Z0-9_]*[A-Z0-9])"
    r"(?P<mid>:\*\*|\*\*:|:__|__:|:)(?!:)(?P<rest>.*)$"
)
_RULE_KEYWORDS = {"WHEN", "THEN", "OTHERWISE"}
_CLOSED = {"**": (":**", "**:"), "__": (":__", "__:")}
_YAML_INFO = {"yaml", "yml"}


def _match_label(line: str) -> Optional[Tuple[str, bool, str]]:
    m = _LABEL_RE.match(line)
    if not m or m.group("label") in _RULE_KEYWORDS:
        return None
    opener = m.group("open")
    bold = opener is not None and m.group("mid") in _CLOSED[opener]
    return m.group("label"), bold, m.group("rest")


@register_parser(SurfaceKind.INLINE)
class InlineParser(SurfaceParser):
    kind = SurfaceKind.INLINE

    @classmethod
    def probe(cls, line: str) -> bool:
        hit = _match_label(line)
        return hit is not None and hit[1] and hit[0] in FIELD_NAMES

    def split_sections(
        self, src: SourceLines
    ) -> Tuple[List[RawSection], Optional[Dict[str, Any]], Dict[str, Any]]:
        meta, start = split_front_matter(src)
        scan = scan_sections(src, start, _match_label)

        if meta is None:
            for info, body, first_line in scan.preamble_fences:
                if info.lower() in _YAML_INFO:
                    meta = load_metadata_yaml(body, src, first_line)
                    break

        return scan.sections, meta, self._surface_facts(scan.sections)

    @staticmethod
    def _surface_facts(sections: List[RawSection]) -> Dict[str, Any]:
        unbolded = [(s.label, s.line) for s in sections if not s.bold]

        unticked = []
        for s in sections:
            if s.label != "SIGNATURE":
                continue
            entries = ([s.inline] if s.inline else []) + s.items
            if entries and not any(e.ticked for e in entries):
                unticked.append(("SIGNATURE", None, s.line))

        index = 0
        for s in sections:
            if s.label != "TESTS":
                continue
            entries = ([s.inline] if s.inline else []) + s.items
            for e in entries:
                for item in e.split_fenced() if e.fenced else [e]:
                    if not item.ticked:
                        unticked.append(("TESTS", index, item.line))
                    index += 1

        return {"unbolded_labels": unbolded, "unticked_code": unticked}
