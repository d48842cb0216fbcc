# src/specguard/contract/parsers/registry.py
from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Optional, Type, Union

from specguard.contract.types import ParsedContract, SurfaceKind

if TYPE_CHECKING:
    from .base import SurfaceParser


# Registry: surface kind -> parser class
_PARSERS: Dict[SurfaceKind, "Type[SurfaceParser]"] = {}


def register_parser(kind: SurfaceKind):
    """Decorator to register a surface parser class for one notation."""

    def deco(cls: "Type[SurfaceParser]") -> "Type[SurfaceParser]":
        if kind in _PARSERS:
            raise ValueError(f"Parser for surface '{kind.value}' is already registered.")
        _PARSERS[kind] = cls
        return cls

    return deco


def register_default_parsers() -> None:
    """Import built-in parsers so their @register_parser decorators run."""
    from . import block  # noqa: F401
    from . import inline  # noqa: F401


def get_parser(kind: SurfaceKind, strict: bool = False) -> "SurfaceParser":
    register_default_parsers()
    try:
        return _PARSERS[kind](strict=strict)
    except KeyError:
        raise ValueError(f"No parser registered for surface '{kind}'") from None


def detect_surface(text: str) -> SurfaceKind:
    """
    Pick the notation by probing for header tokens.

    Any bold field label selects INLINE; otherwise any column-0 `FIELD:` label
    selects BLOCK.

    Raises:
        ParseError: no recognizable header token
    """
    register_default_parsers()
    from .base import SourceLines, iter_lines, split_front_matter

    src = SourceLines(text)
    _, start = split_front_matter(src)
    inline = _PARSERS[SurfaceKind.INLINE]
    block = _PARSERS[SurfaceKind.BLOCK]

    block_seen = False
    for _, line, state, _ in iter_lines(src, start):
        if state != "text":
            continue
        if inline.probe(line):
            return SurfaceKind.INLINE
        if block.probe(line):
            block_seen = True
    if block_seen:
        return SurfaceKind.BLOCK
    raise src.error("no recognizable contract header", 1)


def parse_contract(
    text: str,
    surface_kind: Optional[Union[SurfaceKind, str]] = None,
    *,
    strict: bool = False,
    source: Optional[str] = None,
) -> ParsedContract:
    """
    Parse contract text into a ParsedContract.

    Args:
        text: Raw contract text
        surface_kind: "block" | "inline" | None (auto-detect)
        strict: Raise on unknown field names instead of reporting them
        source: Optional label (e.g. file path) carried on the result

    Raises:
        ParseError: text is structurally unreadable
    """
    if surface_kind is None:
        kind = detect_surface(text)
    else:
        try:
            kind = SurfaceKind(surface_kind)
        except ValueError:
            raise ValueError(
                f"Unknown surface kind '{surface_kind}' (expected 'block' or 'inline')"
            ) from None
    return get_parser(kind, strict=strict).parse(text, source=source)


__all__ = [
    "detect_surface",
    "get_parser",
    "parse_contract",
    "register_parser",
]
