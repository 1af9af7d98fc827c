"""
Conditional Resolution

A CONDICIONADO activity moves through two states:

    UNANSWERED --(operator answers yes/no)--> ANSWERED

Answering translates yes/no into the rule's risk_if_yes/risk_if_no and
stores the tier in the caller's AnswerMap under the normalized code.
Re-running analyze() with that map resolves the code from the answer.
There is no way back to UNANSWERED short of the caller removing the
entry; answering again simply overwrites the stored tier.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, Optional, Union

from ..canon import normalize_cnae
from ..models import CnaeRule, PendingResolution, RiskLevel


class ConditionState(str, Enum):
    NOT_CONDITIONAL = "not_conditional"
    UNANSWERED = "unanswered"
    ANSWERED = "answered"


def resolve_answer(rule: CnaeRule, yes: bool) -> RiskLevel:
    """Tier for a yes/no answer (defaults: yes -> ALTO, no -> BAIXO)."""
    return rule.resolved_if_yes if yes else rule.resolved_if_no


def answer_condition(
    answers: Optional[Mapping[str, Any]],
    item: Union[PendingResolution, CnaeRule],
    yes: bool,
) -> dict[str, Any]:
    """
    Record a yes/no answer.

    Returns a new AnswerMap; the caller's mapping is not modified.

    Args:
        answers: The caller's current AnswerMap
        item: The pending question (or its rule) being answered
        yes: The operator's answer
    """
    if isinstance(item, PendingResolution):
        rule, code = item.rule, item.normalized_code
    else:
        rule, code = item, item.code

    updated = dict(answers or {})
    updated[code] = resolve_answer(rule, yes)
    return updated


def condition_state(
    rule: Optional[CnaeRule],
    answers: Optional[Mapping[str, Any]],
) -> ConditionState:
    """Where a rule's code stands in the conditional state machine."""
    if rule is None or not rule.is_conditional:
        return ConditionState.NOT_CONDITIONAL
    answered = {normalize_cnae(k) for k in (answers or {})}
    if rule.code in answered:
        return ConditionState.ANSWERED
    return ConditionState.UNANSWERED
