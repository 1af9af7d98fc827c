"""
cnaerisk Risk Classifier

Turns an entity's activity codes into a sanitary risk verdict.

For each submitted code, in order:
1. Normalize; skip empty, all-zero and repeated codes
2. Resolve, first match wins:
   a. Prior answer for the code -> answered tier (rule side effects kept)
   b. Rule exists -> CONDICIONADO becomes a pending question,
      anything else is the rule's base tier
   c. No rule -> MÉDIO by analogy (fallback), flagged on the detail
3. Record a CodeDetail with the code as submitted

Then aggregate:
- Any pending question -> PENDENTE DE ANÁLISE, manual analysis
- Otherwise the most severe tier (ALTO > CONDICIONADO > MÉDIO > BAIXO),
  state competence if any contributing rule says so, PBA if any
  contributing rule requires it

The classifier holds no state between calls. Answers are passed in by
the caller on every call and are never stored here.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional

from ..canon import is_placeholder_code, normalize_cnae
from ..config import get_settings
from ..models import (
    ASSIGNABLE_RISK_LEVELS,
    CodeDetail,
    Competence,
    PendingResolution,
    RiskAnalysisResult,
    RiskLevel,
    TableState,
)
from .rule_table import RuleTable


logger = logging.getLogger(__name__)


# =============================================================================
# Observation Texts
# =============================================================================

PENDING_OBSERVATION = "Necessário responder questionário de atividades condicionadas."
AUTOMATIC_OBSERVATION = "Classificação automática via Regra SESA 1034/2020."
FALLBACK_OBSERVATION = (
    "Classificação contém itens por analogia (Fallback: Médio). Verifique se necessário."
)

FALLBACK_DESCRIPTION = "Atividade não catalogada (Classificação por Analogia)"
MANUAL_DESCRIPTION = "Classificação Manual"

FALLBACK_RISK = RiskLevel.MEDIO


# =============================================================================
# Helpers
# =============================================================================

def normalize_answers(answers: Optional[Mapping[str, Any]]) -> dict[str, RiskLevel]:
    """
    Normalize an AnswerMap.

    Keys are reduced to digits; values may be RiskLevel members or their
    stored labels. Entries that are not a usable code/tier pair are
    ignored.
    """
    normalized: dict[str, RiskLevel] = {}
    for raw_code, raw_risk in (answers or {}).items():
        code = normalize_cnae(raw_code)
        risk = RiskLevel.parse(raw_risk)
        if is_placeholder_code(code) or risk not in ASSIGNABLE_RISK_LEVELS:
            logger.warning(
                "Ignoring answer %r -> %r", raw_code, raw_risk,
                extra={"cnae": code},
            )
            continue
        normalized[code] = risk
    return normalized


def most_severe(levels: Iterable[RiskLevel]) -> RiskLevel:
    """Highest-severity tier; BAIXO for no tiers at all."""
    return max(levels, key=lambda level: level.severity, default=RiskLevel.BAIXO)


@dataclass
class _Accumulator:
    """Running aggregate for one analyze() call."""
    details: list[CodeDetail] = field(default_factory=list)
    pending: list[PendingResolution] = field(default_factory=list)
    state_competence: bool = False
    requires_pba: bool = False
    fallback: bool = False

    def absorb_side_effects(self, rule) -> None:
        if rule.requires_pba:
            self.requires_pba = True
        if rule.is_state_competence:
            self.state_competence = True


# =============================================================================
# Classifier
# =============================================================================

@dataclass
class RiskClassifier:
    """
    Classifies activity codes against a rule table.

    Usage:
        classifier = RiskClassifier(table)

        result = classifier.analyze(["4771-7/01", "8610-1/01"])
        if result.is_pending:
            answers = answer_condition({}, result.pending_resolutions[0], yes=True)
            result = classifier.analyze(["4771-7/01", "8610-1/01"], answers)

    Attributes:
        table: Rule table to read from
        ready_timeout: Seconds to wait for a LOADING table before
            classifying against the current snapshot. None reads
            CNAERISK_READY_TIMEOUT.
    """
    table: RuleTable
    ready_timeout: Optional[float] = None

    def _rules_snapshot(self) -> tuple[Mapping, TableState]:
        if self.table.state == TableState.LOADING:
            timeout = self.ready_timeout
            if timeout is None:
                timeout = get_settings().ready_timeout
            if timeout > 0:
                self.table.wait_until_ready(timeout)
        return self.table.view()

    def analyze(
        self,
        codes: Iterable[Any],
        answers: Optional[Mapping[str, Any]] = None,
    ) -> RiskAnalysisResult:
        """
        Classify activity codes.

        Never raises for malformed input: codes without digits, all-zero
        placeholders and repeats are skipped silently.

        Args:
            codes: Raw activity codes (primary first, then secondaries)
            answers: Normalized code -> tier chosen for conditional rules

        Returns:
            A new RiskAnalysisResult
        """
        rules, table_state = self._rules_snapshot()
        answered = normalize_answers(answers)
        acc = _Accumulator()
        seen: set[str] = set()

        if isinstance(codes, (str, int)):
            codes = [codes]

        for raw in codes or ():
            code = normalize_cnae(raw)
            if is_placeholder_code(code) or code in seen:
                continue
            seen.add(code)
            display_code = str(raw)
            rule = rules.get(code)

            if code in answered:
                risk = answered[code]
                if rule is not None:
                    acc.absorb_side_effects(rule)
                acc.details.append(CodeDetail(
                    code=display_code,
                    risk=risk,
                    source_rule=rule,
                    resolved=True,
                    description=rule.description if rule else MANUAL_DESCRIPTION,
                ))
            elif rule is not None:
                if rule.is_conditional:
                    risk = RiskLevel.CONDICIONADO
                    acc.pending.append(PendingResolution(
                        cnae=display_code,
                        description=rule.description,
                        question=rule.question_text,
                        rule=rule,
                    ))
                else:
                    risk = rule.risk
                    acc.absorb_side_effects(rule)
                acc.details.append(CodeDetail(
                    code=display_code,
                    risk=risk,
                    source_rule=rule,
                    description=rule.description,
                ))
            else:
                acc.fallback = True
                logger.debug(
                    "No rule for %s, classified by analogy", code,
                    extra={"cnae": code},
                )
                acc.details.append(CodeDetail(
                    code=display_code,
                    risk=FALLBACK_RISK,
                    is_fallback=True,
                    description=FALLBACK_DESCRIPTION,
                ))

        return self._aggregate(acc, table_state)

    def _aggregate(self, acc: _Accumulator, table_state: TableState) -> RiskAnalysisResult:
        if acc.pending:
            logger.debug(
                "Verdict pending on %d conditional activities", len(acc.pending),
                extra={"pending_count": len(acc.pending), "code_count": len(acc.details)},
            )
            return RiskAnalysisResult(
                risk_level=RiskLevel.PENDENTE,
                competence=Competence.MANUAL_ANALYSIS,
                requires_pba=acc.requires_pba,
                cnae_details=tuple(acc.details),
                pending_resolutions=tuple(acc.pending),
                observation=PENDING_OBSERVATION,
                rule_table_state=table_state,
            )

        risk_level = most_severe(d.risk for d in acc.details)
        competence = Competence.STATE if acc.state_competence else Competence.MUNICIPAL
        logger.debug(
            "Verdict %s (%s)", risk_level.value, competence.value,
            extra={
                "risk_level": risk_level.value,
                "competence": competence.value,
                "code_count": len(acc.details),
            },
        )
        return RiskAnalysisResult(
            risk_level=risk_level,
            competence=competence,
            requires_pba=acc.requires_pba,
            cnae_details=tuple(acc.details),
            observation=FALLBACK_OBSERVATION if acc.fallback else AUTOMATIC_OBSERVATION,
            rule_table_state=table_state,
        )


def analyze(
    table: RuleTable,
    codes: Iterable[Any],
    answers: Optional[Mapping[str, Any]] = None,
) -> RiskAnalysisResult:
    """Classify codes with a one-off classifier that never waits for rules."""
    return RiskClassifier(table, ready_timeout=0).analyze(codes, answers)
