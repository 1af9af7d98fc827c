"""
cnaerisk Rule Pack Loader

Loads and validates rule packs from YAML or JSON files and converts the
Pydantic schema models into CnaeRule domain models.

The loader is the rule source collaborator of a RuleTable:

    table = RuleTable()
    table.load(rule_source("packs/sesa.yaml"))
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional, Union

import yaml
from pydantic import ValidationError

from ..config import get_settings
from ..exceptions import RuleLoadError, RuleValidationError, RuleVersionMismatch
from ..models import CnaeRule, Competence, RiskLevel
from .schema import (
    SCHEMA_VERSION,
    CnaeRuleSchema,
    RulePackSchema,
    check_schema_version,
    validate_rule_pack,
)


logger = logging.getLogger(__name__)


@dataclass
class RulePack:
    """A validated rule pack."""
    id: str
    name: str
    version: str
    authority: Optional[str] = None
    rules: list[CnaeRule] = field(default_factory=list)
    source_path: Optional[str] = None

    @property
    def rule_count(self) -> int:
        return len(self.rules)


# =============================================================================
# Schema to Model Converters
# =============================================================================

def _convert_rule(schema: CnaeRuleSchema) -> CnaeRule:
    """Convert CnaeRuleSchema to CnaeRule model."""
    return CnaeRule(
        cnae=schema.cnae,
        description=schema.description,
        risk=RiskLevel(schema.risk),
        competence=Competence(schema.competence),
        requires_pba=schema.requires_pba,
        question=schema.question,
        risk_if_yes=RiskLevel(schema.risk_if_yes) if schema.risk_if_yes else None,
        risk_if_no=RiskLevel(schema.risk_if_no) if schema.risk_if_no else None,
    )


def _convert_rule_pack(schema: RulePackSchema, source_path: Optional[str] = None) -> RulePack:
    return RulePack(
        id=schema.id,
        name=schema.name,
        version=schema.version,
        authority=schema.authority,
        rules=[_convert_rule(r) for r in schema.rules],
        source_path=source_path,
    )


# =============================================================================
# Rule Pack Loader
# =============================================================================

class RulePackLoader:
    """
    Loads rule packs from YAML or JSON files.

    Usage:
        loader = RulePackLoader()
        pack = loader.load("path/to/rules.yaml")
    """

    def __init__(self, strict_version: bool = True):
        """
        Args:
            strict_version: If True, reject packs with incompatible schema versions
        """
        self.strict_version = strict_version

    def load(self, path: Union[str, Path]) -> RulePack:
        """
        Load a rule pack from a file.

        Raises:
            RuleLoadError: If the file cannot be read or parsed
            RuleVersionMismatch: If schema version incompatible
            RuleValidationError: If validation fails
        """
        path = Path(path)

        try:
            data = self._load_file(path)
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
            raise RuleLoadError(
                message=f"Failed to load rule pack: {e}",
                details={"path": str(path), "error": str(e)},
            ) from e

        pack = self.load_dict(data, source_path=str(path))
        logger.info(
            "Loaded rule pack %s v%s (%d rules)",
            pack.id, pack.version, pack.rule_count,
            extra={"rule_count": pack.rule_count, "path": str(path)},
        )
        return pack

    def load_dict(self, data: Any, source_path: Optional[str] = None) -> RulePack:
        """Validate an already-parsed pack document."""
        if not isinstance(data, dict):
            raise RuleValidationError(
                message="Rule pack must be a mapping",
                details={"path": source_path, "type": type(data).__name__},
            )

        if self.strict_version and not check_schema_version(data):
            pack_version = data.get("schema_version", "unknown")
            raise RuleVersionMismatch(
                message=f"Schema version mismatch: pack has {pack_version}, expected {SCHEMA_VERSION}",
                details={
                    "pack_version": pack_version,
                    "expected_version": SCHEMA_VERSION,
                },
            )

        try:
            schema = validate_rule_pack(data)
        except ValidationError as e:
            raise RuleValidationError(
                message=f"Rule pack validation failed: {e.error_count()} errors",
                details={"errors": e.errors(include_url=False), "path": source_path},
            ) from e

        return _convert_rule_pack(schema, source_path)

    def _load_file(self, path: Path) -> Any:
        """Load data from YAML or JSON file."""
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                return json.load(f)
            return yaml.safe_load(f)


# =============================================================================
# Convenience Functions
# =============================================================================

def load_rule_pack(path: Union[str, Path]) -> RulePack:
    """Load a rule pack with a temporary loader."""
    return RulePackLoader().load(path)


def load_rule_pack_from_string(content: str, format: str = "yaml") -> RulePack:
    """
    Load a rule pack from a string.

    Args:
        content: YAML or JSON string
        format: "yaml" or "json"
    """
    try:
        if format.lower() == "json":
            data = json.loads(content)
        else:
            data = yaml.safe_load(content)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise RuleLoadError(
            message=f"Failed to parse rule pack: {e}",
            details={"format": format, "error": str(e)},
        ) from e
    return RulePackLoader().load_dict(data)


def rule_source(path: Optional[Union[str, Path]] = None) -> Callable[[], list[CnaeRule]]:
    """
    Build a rule source for RuleTable.load().

    Defaults to the pack named by CNAERISK_RULES_PATH (or the bundled pack).
    The file is read each time the source is called, so a reload picks up
    edits.
    """
    def _source() -> list[CnaeRule]:
        target = path if path is not None else get_settings().rules_path
        return load_rule_pack(target).rules

    return _source
