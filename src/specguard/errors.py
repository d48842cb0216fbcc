# src/specguard/errors.py
"""
Exception types for specguard.

Only structurally unreadable input raises. Rule violations inside a readable
contract are reported as findings, never as exceptions.
"""

from __future__ import annotations

from typing import Optional


class SpecguardError(Exception):
    """Base class for all specguard errors."""


class ParseError(SpecguardError):
    """
    Contract text could not be read.

    Attributes:
        cause: Short human-readable cause (e.g. "malformed rule line")
        line: 1-based line number, if known
        column: 1-based column, if known
        offset: 0-based UTF-8 byte offset into the source text, if known
    """

    def __init__(
        self,
        cause: str,
        *,
        line: Optional[int] = None,
        column: Optional[int] = None,
        offset: Optional[int] = None,
        text: Optional[str] = None,
    ):
        self.cause = cause
        self.line = line
        self.column = column
        self.offset = offset
        self.text = text
        super().__init__(self._format())

    def _format(self) -> str:
        where = ""
        if self.line is not None:
            where = f"line {self.line}"
            if self.column is not None:
                where += f", column {self.column}"
            where = f" ({where})"
        snippet = f": {self.text.strip()!r}" if self.text and self.text.strip() else ""
        return f"{self.cause}{where}{snippet}"

    def to_dict(self) -> dict:
        return {
            "error": "parse_error",
            "cause": self.cause,
            "line": self.line,
            "column": self.column,
            "offset": self.offset,
        }


class ComparisonError(SpecguardError):
    """A drift comparison could not start because one side is unusable."""

    def __init__(self, side: str, cause: str):
        self.side = side
        self.cause = cause
        super().__init__(f"{side} model unavailable: {cause}")


class ConfigError(SpecguardError):
    """Invalid or unreadable .specguard/config.yml."""


def format_error_for_cli(exc: BaseException) -> str:
    """One-line message suitable for terminal output."""
    if isinstance(exc, ParseError):
        return f"Parse error: {exc}"
    if isinstance(exc, ComparisonError):
        return f"Comparison error: {exc}"
    if isinstance(exc, ConfigError):
        return f"Config error: {exc}"
    if isinstance(exc, FileNotFoundError):
        target = exc.filename or str(exc)
        return f"File not found: {target}"
    return f"{type(exc).__name__}: {exc}"
