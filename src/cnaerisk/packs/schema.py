"""
cnaerisk Rule Pack Schemas

Pydantic models for validating rule pack YAML/JSON files.

A rule pack is the authoritative rule source: one document listing every
catalogued activity code with its base tier, competence, PBA flag and,
for CONDICIONADO activities, the yes/no question and its two outcomes.

Schema versioning:
- schema_version field tracks breaking changes
- Loaders check major version compatibility
"""
from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ..canon import normalize_cnae


# =============================================================================
# Schema Version
# =============================================================================

SCHEMA_VERSION = "1.0.0"


# =============================================================================
# Enums as Literals (for YAML validation)
# =============================================================================

RuleRiskValue = Literal["BAIXO", "MÉDIO", "ALTO", "CONDICIONADO"]

AnswerRiskValue = Literal["BAIXO", "MÉDIO", "ALTO"]

CompetenceValue = Literal["MUNICÍPIO", "ESTADO"]


# =============================================================================
# Rule Schema
# =============================================================================

class CnaeRuleSchema(BaseModel):
    """Schema for one classification rule."""
    cnae: str = Field(..., description="Activity code, punctuation allowed (e.g., '4771-7/01')")
    description: str = Field(..., min_length=1, description="Official activity description")
    risk: RuleRiskValue = Field(..., description="Base risk tier")
    competence: CompetenceValue = Field("MUNICÍPIO", description="Licensing authority")
    requires_pba: bool = Field(False, description="Architectural-plan approval required")
    question: Optional[str] = Field(None, description="Yes/no question for CONDICIONADO rules")
    risk_if_yes: Optional[AnswerRiskValue] = Field(None, description="Tier when answered yes")
    risk_if_no: Optional[AnswerRiskValue] = Field(None, description="Tier when answered no")

    model_config = {
        "extra": "forbid",
    }

    @field_validator("cnae", mode="before")
    @classmethod
    def coerce_code(cls, v: Any) -> str:
        """YAML reads unquoted codes as integers."""
        return str(v) if isinstance(v, int) else v

    @field_validator("cnae")
    @classmethod
    def validate_code(cls, v: str) -> str:
        if not normalize_cnae(v):
            raise ValueError(f"activity code {v!r} has no digits")
        return v

    @model_validator(mode="after")
    def validate_condition_fields(self) -> "CnaeRuleSchema":
        """Question and outcomes only make sense on CONDICIONADO rules."""
        if self.risk != "CONDICIONADO":
            extras = [
                name for name in ("question", "risk_if_yes", "risk_if_no")
                if getattr(self, name) is not None
            ]
            if extras:
                raise ValueError(
                    f"{', '.join(extras)} only allowed when risk is CONDICIONADO"
                )
        return self


# =============================================================================
# Rule Pack Schema
# =============================================================================

class RulePackSchema(BaseModel):
    """Top-level rule pack document."""
    schema_version: str = Field(SCHEMA_VERSION, description="Pack schema version")
    id: str = Field(..., description="Pack identifier (e.g., 'sesa-1034-2020')")
    name: str = Field(..., description="Human-readable pack name")
    version: str = Field(..., description="Pack content version")
    authority: Optional[str] = Field(None, description="Regulation the table implements")
    rules: list[CnaeRuleSchema] = Field(default_factory=list)

    model_config = {
        "extra": "forbid",
    }


# =============================================================================
# Validation Helpers
# =============================================================================

def validate_rule_pack(data: dict[str, Any]) -> RulePackSchema:
    """
    Validate a rule pack dictionary against the schema.

    Raises:
        pydantic.ValidationError: If validation fails
    """
    return RulePackSchema.model_validate(data)


def check_schema_version(data: dict[str, Any]) -> bool:
    """True when the pack's major schema version matches ours."""
    pack_version = str(data.get("schema_version", SCHEMA_VERSION))
    return pack_version.split(".")[0] == SCHEMA_VERSION.split(".")[0]
