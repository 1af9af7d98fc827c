"""
cnaerisk Analysis Models

Values produced by one classifier run and by the override ledger.

Key components:
- CodeDetail: Outcome for one submitted activity code
- PendingResolution: An unanswered conditional question
- Override: Manual reassignment of the verdict, with justification
- RiskAnalysisResult: The overall verdict

Everything here is immutable. A result is a snapshot of one analyze()
call; later rule-table edits never touch it, and an override produces a
new result instead of mutating the old one.

The to_dict()/from_dict() forms use the camelCase keys of the stored
records ("riskLevel", "cnaeDetails", ...) so existing history survives.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from ..canon import content_hash, normalize_cnae
from .enums import Competence, PendingType, ResolutionSource, RiskLevel, TableState
from .rule import CnaeRule


# Normalized activity code -> tier chosen by the operator
AnswerMap = Mapping[str, RiskLevel]


# =============================================================================
# Per-code Outcome
# =============================================================================

@dataclass(frozen=True)
class CodeDetail:
    """
    Classification of one submitted activity code.

    Attributes:
        code: The code exactly as submitted (original formatting)
        risk: Tier assigned to this code
        source_rule: Matching rule, if the table has one
        resolved: True when the tier came from a prior answer
        is_fallback: True when no rule existed and analogy was applied
        description: Text shown next to the code
    """
    code: str
    risk: RiskLevel
    source_rule: Optional[CnaeRule] = None
    resolved: bool = False
    is_fallback: bool = False
    description: str = ""

    @property
    def normalized_code(self) -> str:
        return normalize_cnae(self.code)

    @property
    def source(self) -> ResolutionSource:
        if self.resolved:
            return ResolutionSource.ANSWER
        if self.is_fallback:
            return ResolutionSource.FALLBACK
        if self.source_rule is not None and self.source_rule.is_conditional:
            return ResolutionSource.PENDING
        return ResolutionSource.RULE

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "code": self.code,
            "risk": self.risk.value,
            "resolved": self.resolved,
            "isFallback": self.is_fallback,
            "description": self.description,
        }
        if self.source_rule is not None:
            result["sourceRule"] = self.source_rule.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CodeDetail:
        rule_data = data.get("sourceRule")
        return cls(
            code=str(data["code"]),
            risk=RiskLevel(data["risk"]),
            source_rule=CnaeRule.from_dict(rule_data) if rule_data else None,
            resolved=bool(data.get("resolved", False)),
            is_fallback=bool(data.get("isFallback", False)),
            description=data.get("description") or "",
        )


# =============================================================================
# Pending Question
# =============================================================================

@dataclass(frozen=True)
class PendingResolution:
    """
    A CONDICIONADO activity still waiting for the operator's yes/no.

    Only exists inside a pending RiskAnalysisResult.
    """
    cnae: str
    description: str
    question: str
    rule: CnaeRule
    type: PendingType = PendingType.CONDITION

    @property
    def normalized_code(self) -> str:
        return normalize_cnae(self.cnae)

    def to_dict(self) -> dict[str, Any]:
        return {
            "cnae": self.cnae,
            "description": self.description,
            "type": self.type.value,
            "question": self.question,
            "rule": self.rule.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PendingResolution:
        return cls(
            cnae=str(data["cnae"]),
            description=data.get("description") or "",
            question=data.get("question") or "",
            rule=CnaeRule.from_dict(data["rule"]),
            type=PendingType(data.get("type", PendingType.CONDITION.value)),
        )


# =============================================================================
# Manual Override
# =============================================================================

@dataclass(frozen=True)
class Override:
    """
    Manual reassignment of an analysis verdict.

    original_risk always names the machine-computed tier, however many
    overrides were stacked on top of it. base points at that
    machine-computed result; it is None for overrides rebuilt from storage.
    """
    original_risk: RiskLevel
    manual_risk: RiskLevel
    reason: str
    base: Optional[RiskAnalysisResult] = field(default=None, compare=False, repr=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "originalRisk": self.original_risk.value,
            "manualRisk": self.manual_risk.value,
            "reason": self.reason,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Override:
        return cls(
            original_risk=RiskLevel(data["originalRisk"]),
            manual_risk=RiskLevel(data["manualRisk"]),
            reason=data["reason"],
        )


# =============================================================================
# Overall Verdict
# =============================================================================

@dataclass(frozen=True)
class RiskAnalysisResult:
    """
    Aggregate verdict for one entity's activity codes.

    Attributes:
        risk_level: Aggregate tier, or PENDENTE while questions remain
        competence: Municipal, state, or manual analysis when pending
        requires_pba: Any contributing rule requires plan approval
        cnae_details: Per-code outcomes, in submission order
        pending_resolutions: Open questions (empty when resolved)
        observation: Free-text note about how the verdict was reached
        override: Manual correction, attached only by apply_override()
        rule_table_state: State of the rule table the analysis ran against
    """
    risk_level: RiskLevel
    competence: Competence
    requires_pba: bool = False
    cnae_details: tuple[CodeDetail, ...] = ()
    pending_resolutions: tuple[PendingResolution, ...] = ()
    observation: Optional[str] = None
    override: Optional[Override] = None
    rule_table_state: TableState = TableState.READY

    @property
    def is_pending(self) -> bool:
        return self.risk_level == RiskLevel.PENDENTE

    @property
    def is_overridden(self) -> bool:
        return self.override is not None

    @property
    def has_fallback(self) -> bool:
        return any(d.is_fallback for d in self.cnae_details)

    @property
    def computed_risk(self) -> RiskLevel:
        """The tier the engine computed, ignoring any manual override."""
        if self.override is not None:
            return self.override.original_risk
        return self.risk_level

    @property
    def rules_loaded(self) -> bool:
        """False when the analysis ran before the rule table was READY."""
        return self.rule_table_state == TableState.READY

    @classmethod
    def placeholder(
        cls,
        observation: Optional[str] = None,
    ) -> RiskAnalysisResult:
        """Pending verdict with no details, for records never analyzed."""
        return cls(
            risk_level=RiskLevel.PENDENTE,
            competence=Competence.MANUAL_ANALYSIS,
            observation=observation,
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "riskLevel": self.risk_level.value,
            "competence": self.competence.value,
            "requiresPba": self.requires_pba,
            "cnaeDetails": [d.to_dict() for d in self.cnae_details],
            "pendingResolutions": [p.to_dict() for p in self.pending_resolutions],
            "ruleTableState": self.rule_table_state.value,
        }
        if self.observation is not None:
            result["observation"] = self.observation
        if self.override is not None:
            result["override"] = self.override.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RiskAnalysisResult:
        override = data.get("override")
        return cls(
            risk_level=RiskLevel(data["riskLevel"]),
            competence=Competence(data["competence"]),
            requires_pba=bool(data.get("requiresPba", False)),
            cnae_details=tuple(
                CodeDetail.from_dict(d) for d in data.get("cnaeDetails", [])
            ),
            pending_resolutions=tuple(
                PendingResolution.from_dict(p) for p in data.get("pendingResolutions", [])
            ),
            observation=data.get("observation"),
            override=Override.from_dict(override) if override else None,
            rule_table_state=TableState(
                data.get("ruleTableState", TableState.READY.value)
            ),
        )

    def content_hash(self) -> str:
        """SHA-256 of the canonical stored form."""
        return content_hash(self.to_dict())
