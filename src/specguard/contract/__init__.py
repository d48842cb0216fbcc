from specguard.contract.parsers import detect_surface, parse_contract
from specguard.contract.render import render
from specguard.contract.types import (
    BehaviorRule,
    ConstraintText,
    ContractModel,
    EdgeCaseText,
    ErrorDescriptor,
    ExpectationKind,
    ParsedContract,
    SurfaceKind,
    SurfaceTrace,
    TestCase,
)

__all__ = [
    "BehaviorRule",
    "ConstraintText",
    "ContractModel",
    "EdgeCaseText",
    "ErrorDescriptor",
    "ExpectationKind",
    "ParsedContract",
    "SurfaceKind",
    "SurfaceTrace",
    "TestCase",
    "detect_surface",
    "parse_contract",
    "render",
]
