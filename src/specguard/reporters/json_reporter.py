# src/specguard/reporters/json_reporter.py
from __future__ import annotations

import json
from typing import Any, Dict, List, Union

from specguard.api.compare import ComparisonResult
from specguard.api.results import BatchItem, ValidationReport
from specguard.contract.grammar import GRAMMAR_VERSION
from specguard.version import VERSION

SCHEMA_VERSION = "1"


def _envelope(kind: str, body: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "schema_version": SCHEMA_VERSION,
        "grammar_version": GRAMMAR_VERSION,
        "specguard_version": VERSION,
        "kind": kind,
        **body,
    }


def render_json(
    result: Union[ValidationReport, ComparisonResult, List[BatchItem]],
    indent: int = 2,
) -> str:
    """
    Deterministic JSON for CI: sorted keys, no timestamps.
    """
    if isinstance(result, ValidationReport):
        payload = _envelope("validation", result.to_dict())
    elif isinstance(result, ComparisonResult):
        payload = _envelope("comparison", result.to_dict())
    else:
        payload = _envelope("batch", {"items": [item.to_dict() for item in result]})
    return json.dumps(payload, indent=indent, sort_keys=True, default=str)
