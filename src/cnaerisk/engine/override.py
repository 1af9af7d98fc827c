"""
Override Ledger

Manual reassignment of a computed verdict.

An override never re-runs the classifier. It returns a copy of the result
with the new tier and an Override record. However many overrides are
stacked, Override.original_risk keeps naming the machine-computed tier
and Override.base keeps pointing at the machine-computed result.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Optional

from ..exceptions import OverrideValidationError
from ..models import Override, RiskAnalysisResult, RiskLevel


logger = logging.getLogger(__name__)


def _reject(message: str, **details: Any) -> OverrideValidationError:
    logger.warning("Override rejected: %s", message)
    return OverrideValidationError(message=message, details=details)


def apply_override(
    result: Optional[RiskAnalysisResult],
    new_tier: Any,
    reason: Optional[str],
) -> RiskAnalysisResult:
    """
    Replace a verdict's tier with a manually chosen one.

    Args:
        result: A computed, non-pending result
        new_tier: The chosen tier (RiskLevel or its label)
        reason: Justification; must not be blank

    Returns:
        A new result; the input is left untouched

    Raises:
        OverrideValidationError: If any requirement is not met
    """
    if result is None:
        raise _reject("No analysis to override")
    if result.is_pending:
        raise _reject(
            "Pending conditional answers must be resolved before overriding",
            pending=[p.cnae for p in result.pending_resolutions],
        )

    tier = RiskLevel.parse(new_tier)
    if tier is None or tier.is_sentinel:
        raise _reject(f"Invalid manual risk: {new_tier!r}", new_tier=str(new_tier))

    reason = (reason or "").strip()
    if not reason:
        raise _reject("A justification is required for a manual override")

    prior = result.override
    if prior is not None:
        original_risk = prior.original_risk
        base = prior.base
    else:
        original_risk = result.risk_level
        base = result

    override = Override(
        original_risk=original_risk,
        manual_risk=tier,
        reason=reason,
        base=base,
    )
    logger.info(
        "Risk overridden %s -> %s", original_risk.value, tier.value,
        extra={"original_risk": original_risk.value, "manual_risk": tier.value},
    )
    return replace(result, risk_level=tier, override=override)


def revert_override(result: RiskAnalysisResult) -> RiskAnalysisResult:
    """
    The machine-computed result behind an overridden one.

    Results rebuilt from storage lose the base link; for those the tier is
    restored from original_risk and the override record dropped.
    """
    prior = result.override
    if prior is None:
        return result
    if prior.base is not None:
        return prior.base
    return replace(result, risk_level=prior.original_risk, override=None)
