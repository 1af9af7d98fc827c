"""
cnaerisk - Sanitary Risk Classification of Economic Activities

Classifies a legal entity's declared activity codes (CNAE) into the
sanitary risk tier that decides its licensing procedure.

Core Principle: the engine classifies; the sanitary agent answers the
conditional questions and may override the verdict with a justification.

Key Features:
- Rule lookup by normalized activity code
- Fallback by analogy (MÉDIO) for uncatalogued activities
- Conditional rules resolved by operator yes/no answers
- Severity aggregation with municipal/state competence and PBA flags
- Manual overrides that always remember the computed tier
- Rule table administration with write-through to a backing store

Quick Start:
    from cnaerisk import RiskClassifier, RuleTable, answer_condition, rule_source

    table = RuleTable()
    table.load(rule_source())          # bundled SESA 1034/2020 pack

    classifier = RiskClassifier(table)
    result = classifier.analyze(["4771-7/01", "8610-1/01"])

    answers = {}
    for pending in result.pending_resolutions:
        answers = answer_condition(answers, pending, yes=False)
    result = classifier.analyze(["4771-7/01", "8610-1/01"], answers)

Version: 0.1.0
"""
from __future__ import annotations

__version__ = "0.1.0"

from .canon import format_cnae, is_placeholder_code, normalize_cnae
from .exceptions import (
    CnaeRiskError,
    OverrideValidationError,
    RuleLoadError,
    RuleStoreError,
    RuleTableNotReadyError,
    RuleValidationError,
    RuleVersionMismatch,
)
from .models import (
    AnswerMap,
    CnaeRule,
    CodeDetail,
    Competence,
    Override,
    PendingResolution,
    PendingType,
    ResolutionSource,
    RiskAnalysisResult,
    RiskLevel,
    TableState,
)
from .engine import (
    ConditionState,
    RiskClassifier,
    RuleTable,
    UncataloguedCode,
    analyze,
    answer_condition,
    apply_override,
    condition_state,
    find_uncatalogued_codes,
    resolve_answer,
    revert_override,
)
from .packs import RulePack, RulePackLoader, load_rule_pack, rule_source
from .store import InMemoryRuleStore, RuleStore

__all__ = [
    "__version__",
    # Canonical forms
    "format_cnae",
    "is_placeholder_code",
    "normalize_cnae",
    # Exceptions
    "CnaeRiskError",
    "OverrideValidationError",
    "RuleLoadError",
    "RuleStoreError",
    "RuleTableNotReadyError",
    "RuleValidationError",
    "RuleVersionMismatch",
    # Models
    "AnswerMap",
    "CnaeRule",
    "CodeDetail",
    "Competence",
    "Override",
    "PendingResolution",
    "PendingType",
    "ResolutionSource",
    "RiskAnalysisResult",
    "RiskLevel",
    "TableState",
    # Engine
    "ConditionState",
    "RiskClassifier",
    "RuleTable",
    "UncataloguedCode",
    "analyze",
    "answer_condition",
    "apply_override",
    "condition_state",
    "find_uncatalogued_codes",
    "resolve_answer",
    "revert_override",
    # Packs
    "RulePack",
    "RulePackLoader",
    "load_rule_pack",
    "rule_source",
    # Store
    "InMemoryRuleStore",
    "RuleStore",
]
