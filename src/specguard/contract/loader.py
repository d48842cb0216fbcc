# src/specguard/contract/loader.py
from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from specguard.contract.parsers import parse_contract
from specguard.contract.types import ParsedContract, SurfaceKind
from specguard.logging import get_logger

_logger = get_logger(__name__)


class ContractLoader:
    """
    Read contract files and hand their text to the parser.

    File I/O stays here so everything downstream is a pure function of text.
    """

    @staticmethod
    def read_text(path: Union[str, Path]) -> str:
        p = Path(path)
        if not p.is_file():
            raise FileNotFoundError(2, "Contract file not found", str(p))
        return p.read_text(encoding="utf-8")

    @classmethod
    def from_path(
        cls,
        path: Union[str, Path],
        surface: Optional[Union[SurfaceKind, str]] = None,
        strict: bool = False,
    ) -> ParsedContract:
        text = cls.read_text(path)
        _logger.debug("Loaded contract %s (%d bytes, suffix=%s)", path, len(text), Path(path).suffix)
        return parse_contract(text, surface, strict=strict, source=str(path))

    @staticmethod
    def looks_like_path(value: Union[str, Path]) -> bool:
        """True for Path objects and single-line strings naming an existing file."""
        if isinstance(value, Path):
            return True
        return "\n" not in value and len(value) < 4096 and Path(value).is_file()
