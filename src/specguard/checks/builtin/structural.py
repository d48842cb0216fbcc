# src/specguard/checks/builtin/structural.py
"""
Structural checks (S1–S7).

These look only at which fields exist and how their labels are written, never
at field contents. Every check runs on every contract; S5/S6 are no-ops for
the block notation.
"""

from __future__ import annotations

from typing import List

from specguard.checks.base import BaseCheck, Stage
from specguard.checks.registry import register_check
from specguard.contract.types import ParsedContract, SurfaceKind
from specguard.report.types import FieldName, Finding


class StructuralCheck(BaseCheck):
    stage = Stage.STRUCTURAL


@register_check("S1")
class RequiredFieldsCheck(StructuralCheck):
    """Each required field is present."""

    field = FieldName.DOCUMENT

    def run(self, parsed: ParsedContract) -> List[Finding]:
        return [
            self.finding(
                f"Required field {name} is missing",
                field=FieldName(name),
                missing_field=name,
            )
            for name in parsed.trace.missing_fields
        ]


@register_check("S2")
class UnknownFieldCheck(StructuralCheck):
    """Field labels outside the known set."""

    field = FieldName.DOCUMENT

    def run(self, parsed: ParsedContract) -> List[Finding]:
        return [
            self.finding(f"Unknown field name '{label}'", label=label, line=line)
            for label, line in parsed.trace.unknown_fields
        ]


@register_check("S3")
class MetadataKeysCheck(StructuralCheck):
    """A metadata block declares both name and language."""

    field = FieldName.METADATA

    def run(self, parsed: ParsedContract) -> List[Finding]:
        meta = parsed.model.metadata
        if not parsed.trace.has_metadata or meta is None:
            return []
        out = []
        for key in ("name", "language"):
            if not getattr(meta, key):
                out.append(self.finding(f"Metadata is missing '{key}'", key=key))
        return out


@register_check("S4")
class MetadataNameCheck(StructuralCheck):
    """Metadata name equals the function name in SIGNATURE."""

    field = FieldName.METADATA

    def run(self, parsed: ParsedContract) -> List[Finding]:
        meta = parsed.model.metadata
        sig = parsed.model.signature
        if meta is None or not meta.name or sig is None:
            return []
        declared = sig.name.rsplit(".", 1)[-1]
        if meta.name == declared:
            return []
        return [
            self.finding(
                f"Metadata name '{meta.name}' does not match signature name '{declared}'",
                metadata_name=meta.name,
                signature_name=declared,
            )
        ]


@register_check("S5")
class BoldLabelCheck(StructuralCheck):
    """Inline notation: field labels are bold-marked."""

    field = FieldName.DOCUMENT

    def run(self, parsed: ParsedContract) -> List[Finding]:
        if parsed.surface is not SurfaceKind.INLINE or not parsed.trace.unbolded_labels:
            return []
        labels = [label for label, _ in parsed.trace.unbolded_labels]
        return [
            self.finding(
                f"Field labels not bold-marked: {', '.join(labels)}",
                labels=labels,
                lines=[line for _, line in parsed.trace.unbolded_labels],
            )
        ]


@register_check("S6")
class CodeSpanCheck(StructuralCheck):
    """Inline notation: signature, rules and tests are back-ticked."""

    field = FieldName.DOCUMENT

    def run(self, parsed: ParsedContract) -> List[Finding]:
        if parsed.surface is not SurfaceKind.INLINE or not parsed.trace.unticked_code:
            return []
        locations = [
            name if index is None else f"{name}[{index}]"
            for name, index, _ in parsed.trace.unticked_code
        ]
        return [
            self.finding(
                f"Code entries not back-ticked: {', '.join(locations)}",
                locations=locations,
                lines=[line for _, _, line in parsed.trace.unticked_code],
            )
        ]


@register_check("S7")
class DuplicateFieldCheck(StructuralCheck):
    """No field is declared twice."""

    field = FieldName.DOCUMENT

    def run(self, parsed: ParsedContract) -> List[Finding]:
        return [
            self.finding(
                f"Field {name} is declared more than once",
                field=FieldName(name),
                duplicate_field=name,
            )
            for name in parsed.trace.duplicate_fields
        ]
