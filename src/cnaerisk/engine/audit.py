"""
Uncatalogued Activity Audit

Collects activity codes that the rule table does not cover, across many
stored analyses, so the table maintainers know which rules to add.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from ..models import RiskAnalysisResult, RiskLevel


@dataclass(frozen=True)
class UncataloguedCode:
    """An activity with no rule, and the first entity it was seen in."""
    code: str
    normalized_code: str
    description: str
    found_in: str


def find_uncatalogued_codes(
    results: Mapping[str, RiskAnalysisResult],
) -> list[UncataloguedCode]:
    """
    List distinct codes classified by analogy (or marked INDEFINIDO).

    Args:
        results: Entity identifier -> stored analysis, in the order to scan

    Returns:
        One entry per normalized code, in order of first appearance
    """
    found: dict[str, UncataloguedCode] = {}
    for entity_id, result in results.items():
        for detail in result.cnae_details:
            if not (detail.is_fallback or detail.risk == RiskLevel.INDEFINIDO):
                continue
            key = detail.normalized_code
            if key in found:
                continue
            found[key] = UncataloguedCode(
                code=detail.code,
                normalized_code=key,
                description=detail.description,
                found_in=entity_id,
            )
    return list(found.values())
