"""
cnaerisk Models

All domain models for the risk classification engine:

    from cnaerisk.models import (
        # Enums
        RiskLevel, Competence, ResolutionSource, PendingType, TableState,
        # Rules
        CnaeRule,
        # Analysis
        CodeDetail, PendingResolution, Override, RiskAnalysisResult, AnswerMap,
    )
"""
from __future__ import annotations

from .enums import (
    ASSIGNABLE_RISK_LEVELS,
    Competence,
    PendingType,
    ResolutionSource,
    RiskLevel,
    TableState,
)
from .rule import DEFAULT_CONDITION_QUESTION, CnaeRule
from .analysis import (
    AnswerMap,
    CodeDetail,
    Override,
    PendingResolution,
    RiskAnalysisResult,
)

__all__ = [
    "ASSIGNABLE_RISK_LEVELS",
    "Competence",
    "PendingType",
    "ResolutionSource",
    "RiskLevel",
    "TableState",
    "DEFAULT_CONDITION_QUESTION",
    "CnaeRule",
    "AnswerMap",
    "CodeDetail",
    "Override",
    "PendingResolution",
    "RiskAnalysisResult",
]
