# src/specguard/contract/parsers/block.py
"""
Key-labeled block notation.

    ---
    name: validate_coupon
    language: python
    ---
    SIGNATURE: def validate_coupon(code: str) -> tuple[bool, str]
    INTENT: Decide whether a coupon code can be applied.
    BEHAVIOR:
      - WHEN code is empty THEN return (False, "Coupon code cannot be empty")
      - OTHERWISE return (True, "")
    TESTS:
      - validate_coupon("") == (False, "Coupon code cannot be empty")

Labels start at column 0 and end with a colon. Text after the colon is the
first entry of the block.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Tuple

from specguard.contract.grammar import FIELD_NAMES
from specguard.contract.parsers.base import RawSection, SourceLines, SurfaceParser, scan_sections, split_front_matter
from specguard.contract.parsers.registry import register_parser
from specguard.contract.types import SurfaceKind

_LABEL_RE = re.compile(r"^(?P<label>[A-Z][A-Z0-9_]*[A-Z0-9])\s*:(?!:)(?P<rest>.*)$")
_RULE_KEYWORDS = {"WHEN", "THEN", "OTHERWISE"}


def _match_label(line: str) -> Optional[Tuple[str, bool, str]]:
    m = _LABEL_RE.match(line)
    if not m or m.group("label") in _RULE_KEYWORDS:
        return None
    return m.group("label"), True, m.group("rest")


@register_parser(SurfaceKind.BLOCK)
class BlockParser(SurfaceParser):
    kind = SurfaceKind.BLOCK

    @classmethod
    def probe(cls, line: str) -> bool:
        hit = _match_label(line)
        return hit is not None and hit[0] in FIELD_NAMES

    def split_sections(
        self, src: SourceLines
    ) -> Tuple[List[RawSection], Optional[Dict[str, Any]], Dict[str, Any]]:
        meta, start = split_front_matter(src)
        scan = scan_sections(src, start, _match_label)
        # Surface styling checks only apply to the inline notation.
        return scan.sections, meta, {}
