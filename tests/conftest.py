# tests/conftest.py
from pathlib import Path
from typing import Callable

import pytest

from specguard.config.settings import SpecguardConfig
from specguard.engine.engine import ValidationEngine

from utils import AGE_BASELINE, COUPON_BLOCK, COUPON_INLINE


@pytest.fixture
def coupon_block() -> str:
    return COUPON_BLOCK


@pytest.fixture
def coupon_inline() -> str:
    return COUPON_INLINE


@pytest.fixture
def age_baseline() -> str:
    return AGE_BASELINE


@pytest.fixture
def engine() -> ValidationEngine:
    """Engine with built-in defaults (no config file lookup)."""
    return ValidationEngine(SpecguardConfig())


@pytest.fixture
def write_contract(tmp_path) -> Callable[..., str]:
    """Write contract text to a file under tmp_path and return its path."""

    def _write(text: str, name: str = "contract.md") -> str:
        path = Path(tmp_path) / name
        path.write_text(text, encoding="utf-8")
        return str(path)

    return _write
