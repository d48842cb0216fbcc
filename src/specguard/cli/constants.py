# src/specguard/cli/constants.py
"""Shared CLI constants."""

from enum import Enum

# Exit codes (stable for CI/CD)
EXIT_SUCCESS = 0
EXIT_VALIDATION_FAILED = 1
EXIT_CONFIG_ERROR = 2
EXIT_RUNTIME_ERROR = 3


class OutputFormat(str, Enum):
    RICH = "rich"
    JSON = "json"
    LLM = "llm"


class SurfaceChoice(str, Enum):
    BLOCK = "block"
    INLINE = "inline"
