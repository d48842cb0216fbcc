# src/specguard/config/models.py
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class ContractMetadata(BaseModel):
    """
    Declarative metadata attached to a contract (YAML front matter).

    `name` and `language` are expected; their absence is a structural
    finding rather than a load error, so both are optional here.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    name: Optional[str] = Field(None, description="Contract identifier; should equal the function name.")
    language: Optional[str] = Field(None, description="Primary target language (e.g. python).")
    version: Optional[str] = Field(None, description="Contract version.")
    targets: Dict[str, str] = Field(
        default_factory=dict,
        description="Additional target languages mapped to language/runtime versions.",
    )

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> "ContractMetadata":
        """Coerce scalar YAML values (e.g. version: 1.0) to strings before validation."""
        cleaned: Dict[str, Any] = {}
        for key, value in data.items():
            key = str(key)
            if key == "targets" and isinstance(value, dict):
                cleaned[key] = {str(k): "" if v is None else str(v) for k, v in value.items()}
            elif key in ("name", "language", "version") and value is not None:
                cleaned[key] = str(value)
            else:
                cleaned[key] = value
        return cls.model_validate(cleaned)
