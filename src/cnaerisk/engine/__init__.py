"""
cnaerisk Engine

Services:
- RuleTable: Rule index, initialization state and administration
- RiskClassifier: Activity codes -> risk verdict
- answer_condition / resolve_answer: Conditional question answers
- apply_override: Manual verdict reassignment with audit trail
- find_uncatalogued_codes: Codes missing from the rule table

Usage:
    from cnaerisk.engine import RuleTable, RiskClassifier, apply_override
"""
from __future__ import annotations

from .rule_table import RuleSource, RuleTable, build_index
from .classifier import (
    AUTOMATIC_OBSERVATION,
    FALLBACK_DESCRIPTION,
    FALLBACK_OBSERVATION,
    FALLBACK_RISK,
    MANUAL_DESCRIPTION,
    PENDING_OBSERVATION,
    RiskClassifier,
    analyze,
    most_severe,
    normalize_answers,
)
from .conditions import (
    ConditionState,
    answer_condition,
    condition_state,
    resolve_answer,
)
from .override import apply_override, revert_override
from .audit import UncataloguedCode, find_uncatalogued_codes

__all__ = [
    "RuleSource",
    "RuleTable",
    "build_index",
    "AUTOMATIC_OBSERVATION",
    "FALLBACK_DESCRIPTION",
    "FALLBACK_OBSERVATION",
    "FALLBACK_RISK",
    "MANUAL_DESCRIPTION",
    "PENDING_OBSERVATION",
    "RiskClassifier",
    "analyze",
    "most_severe",
    "normalize_answers",
    "ConditionState",
    "answer_condition",
    "condition_state",
    "resolve_answer",
    "apply_override",
    "revert_override",
    "UncataloguedCode",
    "find_uncatalogued_codes",
]
