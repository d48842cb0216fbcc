# src/specguard/checks/registry.py
from __future__ import annotations

from typing import Dict, List, Type

from specguard.checks.base import BaseCheck, Stage

# Registry: finding code -> check class
_CHECKS: Dict[str, Type[BaseCheck]] = {}


def register_check(code: str):
    """
    Decorator to register a check class under its finding code.

    The code is stamped onto the class so findings and registry agree.
    """

    def deco(cls: Type[BaseCheck]) -> Type[BaseCheck]:
        if code in _CHECKS:
            raise ValueError(f"Check '{code}' is already registered.")
        cls.code = code
        _CHECKS[code] = cls
        return cls

    return deco


def _code_key(code: str):
    prefix = code.rstrip("0123456789")
    number = code[len(prefix):]
    return prefix, int(number) if number else 0


def all_checks() -> List[Type[BaseCheck]]:
    """Registered checks ordered by stage, then by code."""
    register_default_checks()
    return sorted(
        _CHECKS.values(),
        key=lambda c: (Stage.ORDER.index(c.stage), _code_key(c.code)),
    )


def register_default_checks() -> None:
    """Import built-in checks so their @register_check decorators run."""
    from specguard.checks.builtin import consistency  # noqa: F401
    from specguard.checks.builtin import content  # noqa: F401
    from specguard.checks.builtin import structural  # noqa: F401
