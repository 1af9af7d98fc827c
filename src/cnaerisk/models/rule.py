"""
cnaerisk Rule Model

A CnaeRule is one row of the sanitary classification table: the base
risk tier of an activity code plus its regulatory side effects.

Rules are loaded from rule packs (YAML/JSON) or created through rule
table administration. They are immutable; editing a rule means upserting
a replacement.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..canon import normalize_cnae
from .enums import ASSIGNABLE_RISK_LEVELS, Competence, RiskLevel


DEFAULT_CONDITION_QUESTION = (
    "Esta atividade possui condições específicas. O risco é Alto?"
)


@dataclass(frozen=True)
class CnaeRule:
    """
    Classification rule for a single activity code.

    Attributes:
        cnae: Activity code as written in the source (punctuation allowed)
        description: Official activity description
        risk: Base tier (BAIXO, MÉDIO, ALTO or CONDICIONADO)
        competence: Licensing authority for small-scale establishments
        requires_pba: Whether architectural-plan approval (PBA) is required
        question: Yes/no question for CONDICIONADO rules
        risk_if_yes: Tier when the question is answered yes (default ALTO)
        risk_if_no: Tier when the question is answered no (default BAIXO)
    """
    cnae: str
    description: str
    risk: RiskLevel
    competence: Competence = Competence.MUNICIPAL
    requires_pba: bool = False
    question: Optional[str] = None
    risk_if_yes: Optional[RiskLevel] = None
    risk_if_no: Optional[RiskLevel] = None

    def __post_init__(self) -> None:
        # Stored labels ("MÉDIO", "ESTADO") are accepted and coerced to members
        risk = RiskLevel.parse(self.risk)
        if risk not in ASSIGNABLE_RISK_LEVELS:
            raise ValueError(f"Rule {self.cnae!r} has non-assignable risk {self.risk!r}")
        competence = Competence.parse(self.competence)
        if competence is None or competence == Competence.MANUAL_ANALYSIS:
            raise ValueError(f"Rule {self.cnae!r} has invalid competence {self.competence!r}")
        object.__setattr__(self, "risk", risk)
        object.__setattr__(self, "competence", competence)

        for name in ("risk_if_yes", "risk_if_no"):
            value = getattr(self, name)
            if value is None:
                continue
            outcome = RiskLevel.parse(value)
            if outcome not in ASSIGNABLE_RISK_LEVELS:
                raise ValueError(f"Rule {self.cnae!r} has invalid {name} {value!r}")
            object.__setattr__(self, name, outcome)

    @property
    def code(self) -> str:
        """Normalized (digits-only) activity code; the rule table key."""
        return normalize_cnae(self.cnae)

    @property
    def is_conditional(self) -> bool:
        return self.risk == RiskLevel.CONDICIONADO

    @property
    def is_state_competence(self) -> bool:
        return self.competence == Competence.STATE

    @property
    def question_text(self) -> str:
        """The rule's question, or the generic yes/no prompt."""
        return self.question or DEFAULT_CONDITION_QUESTION

    @property
    def resolved_if_yes(self) -> RiskLevel:
        return self.risk_if_yes or RiskLevel.ALTO

    @property
    def resolved_if_no(self) -> RiskLevel:
        return self.risk_if_no or RiskLevel.BAIXO

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "cnae": self.cnae,
            "description": self.description,
            "risk": self.risk.value,
            "competence": self.competence.value,
            "requiresPba": self.requires_pba,
        }
        if self.question is not None:
            result["question"] = self.question
        if self.risk_if_yes is not None:
            result["riskIfYes"] = self.risk_if_yes.value
        if self.risk_if_no is not None:
            result["riskIfNo"] = self.risk_if_no.value
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CnaeRule:
        """Rebuild a rule from its to_dict() form."""
        risk_if_yes = data.get("riskIfYes")
        risk_if_no = data.get("riskIfNo")
        return cls(
            cnae=str(data["cnae"]),
            description=data.get("description", ""),
            risk=RiskLevel(data["risk"]),
            competence=Competence(data.get("competence", Competence.MUNICIPAL.value)),
            requires_pba=bool(data.get("requiresPba", False)),
            question=data.get("question"),
            risk_if_yes=RiskLevel(risk_if_yes) if risk_if_yes else None,
            risk_if_no=RiskLevel(risk_if_no) if risk_if_no else None,
        )
