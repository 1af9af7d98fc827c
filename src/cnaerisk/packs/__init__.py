"""
cnaerisk Rule Packs

Rule packs are YAML/JSON documents holding the classification table.
"""
from __future__ import annotations

from .loader import (
    RulePack,
    RulePackLoader,
    load_rule_pack,
    load_rule_pack_from_string,
    rule_source,
)
from .schema import (
    SCHEMA_VERSION,
    CnaeRuleSchema,
    RulePackSchema,
    check_schema_version,
    validate_rule_pack,
)

__all__ = [
    "RulePack",
    "RulePackLoader",
    "load_rule_pack",
    "load_rule_pack_from_string",
    "rule_source",
    "SCHEMA_VERSION",
    "CnaeRuleSchema",
    "RulePackSchema",
    "check_schema_version",
    "validate_rule_pack",
]
