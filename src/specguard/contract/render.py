# src/specguard/contract/render.py
"""
Serialize a ContractModel back into either surface notation.

Re-parsing the output yields the same rules, tests and ordering; free-text
fields may re-wrap.
"""

from __future__ import annotations

from typing import Any, Dict, List, Union

import yaml

from specguard.contract.types import ContractModel, SurfaceKind


def _metadata_block(model: ContractModel) -> List[str]:
    if model.metadata is None:
        return []
    data: Dict[str, Any] = model.metadata.model_dump(exclude_none=True)
    if not data.get("targets"):
        data.pop("targets", None)
    body = yaml.safe_dump(data, sort_keys=False, allow_unicode=True).rstrip("\n")
    return ["---", body, "---", ""]


def to_block(model: ContractModel) -> str:
    lines = _metadata_block(model)
    lines.append(f"SIGNATURE: {model.signature_text}")
    lines.append(f"INTENT: {model.intent_text}")

    def listing(label: str, entries: List[str]) -> None:
        if not entries:
            return
        lines.append(f"{label}:")
        lines.extend(f"  - {e}" for e in entries)

    listing("BEHAVIOR", [r.render() for r in model.behavior_rules])
    listing("TESTS", [t.render() for t in model.tests])
    listing("CONSTRAINTS", [c.text for c in model.constraints])
    listing("EDGE_CASES", [e.text for e in model.edge_cases])
    listing("DEPENDENCIES", list(model.dependencies))
    listing("EXAMPLES", [" ".join(x.split()) for x in model.examples])
    if model.complexity:
        lines.append(f"COMPLEXITY: {model.complexity}")
    return "\n".join(lines) + "\n"


def _tick(text: str) -> str:
    # A code span cannot hold a backtick run of its own length.
    return f"`` {text} ``" if "`" in text else f"`{text}`"


def to_inline(model: ContractModel) -> str:
    lines = _metadata_block(model)
    if model.identifier:
        lines.extend([f"# {model.identifier}", ""])
    lines.append(f"**SIGNATURE:** {_tick(model.signature_text)}")
    lines.append(f"**INTENT:** {model.intent_text}")

    def listing(label: str, entries: List[str]) -> None:
        if not entries:
            return
        lines.append(f"**{label}:**")
        lines.extend(f"- {e}" for e in entries)

    listing("BEHAVIOR", [r.render() for r in model.behavior_rules])
    listing("TESTS", [_tick(t.render()) for t in model.tests])
    listing("CONSTRAINTS", [c.text for c in model.constraints])
    listing("EDGE_CASES", [e.text for e in model.edge_cases])
    listing("DEPENDENCIES", list(model.dependencies))
    listing("EXAMPLES", [" ".join(x.split()) for x in model.examples])
    if model.complexity:
        lines.append(f"**COMPLEXITY:** {model.complexity}")
    return "\n".join(lines) + "\n"


def render(model: ContractModel, surface: Union[SurfaceKind, str] = SurfaceKind.BLOCK) -> str:
    """Render `model` in the requested notation."""
    kind = SurfaceKind(surface)
    if kind is SurfaceKind.INLINE:
        return to_inline(model)
    return to_block(model)
