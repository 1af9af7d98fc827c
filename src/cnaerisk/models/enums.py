"""
cnaerisk Enumerations

All enumeration types used by the classification engine.

All enums inherit from (str, Enum) so values serialize directly to the
Portuguese labels stored by the persistence layer and shown to operators.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Optional


# =============================================================================
# Risk Tiers
# =============================================================================

class RiskLevel(str, Enum):
    """
    Sanitary risk tier.

    BAIXO/MEDIO/ALTO/CONDICIONADO are the tiers a rule or an answer can
    assign. PENDENTE is the sentinel aggregate used while conditional
    questions remain unanswered. INDEFINIDO marks uncatalogued activities
    in legacy records and reports.
    """
    BAIXO = "BAIXO"
    MEDIO = "MÉDIO"
    ALTO = "ALTO"
    CONDICIONADO = "CONDICIONADO"
    INDEFINIDO = "INDEFINIDO"
    PENDENTE = "PENDENTE DE ANÁLISE"

    @property
    def severity(self) -> int:
        """Ordering used for aggregation: ALTO > CONDICIONADO > MEDIO > BAIXO."""
        return _SEVERITY.get(self, -1)

    @property
    def is_sentinel(self) -> bool:
        """True for tiers that are never a final classification."""
        return self in (RiskLevel.PENDENTE, RiskLevel.INDEFINIDO)

    @classmethod
    def parse(cls, value: Any) -> Optional[RiskLevel]:
        """
        Lenient conversion from stored values.

        Accepts enum members, labels ("MÉDIO") and member names ("MEDIO").
        Returns None for anything unrecognized.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        text = value.strip()
        try:
            return cls(text)
        except ValueError:
            pass
        return cls.__members__.get(text.upper())


_SEVERITY = {
    RiskLevel.BAIXO: 0,
    RiskLevel.MEDIO: 1,
    RiskLevel.CONDICIONADO: 2,
    RiskLevel.ALTO: 3,
}

# Tiers a rule may declare and an AnswerMap may hold
ASSIGNABLE_RISK_LEVELS = frozenset(_SEVERITY)


# =============================================================================
# Competence
# =============================================================================

class Competence(str, Enum):
    """Government level holding licensing jurisdiction."""
    MUNICIPAL = "MUNICÍPIO"
    STATE = "ESTADO"
    MANUAL_ANALYSIS = "ANÁLISE MANUAL"

    @classmethod
    def parse(cls, value: Any) -> Optional[Competence]:
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        text = value.strip()
        try:
            return cls(text)
        except ValueError:
            return cls.__members__.get(text.upper())


# =============================================================================
# Resolution Metadata
# =============================================================================

class ResolutionSource(str, Enum):
    """How a single activity code got its tier."""
    RULE = "rule"            # Base tier of a catalogued rule
    ANSWER = "answer"        # Operator answer to a conditional question
    FALLBACK = "fallback"    # No rule: classified by analogy
    PENDING = "pending"      # Conditional rule still unanswered

    @property
    def audit_label(self) -> str:
        """Label printed next to each activity in audit reports."""
        return _AUDIT_LABELS[self]


_AUDIT_LABELS = {
    ResolutionSource.RULE: "SESA 1034/2020",
    ResolutionSource.ANSWER: "DECISÃO MANUAL DO AGENTE",
    ResolutionSource.FALLBACK: "ANALOGIA (REGRA 1)",
    ResolutionSource.PENDING: "AGUARDANDO RESPOSTA",
}


class PendingType(str, Enum):
    """Kind of open question attached to a pending verdict."""
    CONDITION = "CONDITION"


# =============================================================================
# Rule Table Lifecycle
# =============================================================================

class TableState(str, Enum):
    """Initialization state of a rule table."""
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"
