"""
cnaerisk Exception Hierarchy

Domain-specific exceptions for the risk classification engine.
All exceptions carry error codes for tracking and logging.

Exception codes follow the pattern: CR_<CATEGORY>_<SPECIFIC>

Malformed activity codes are NOT errors: the classifier skips them.
Only rule-pack problems, administrative write failures and rejected
overrides surface as exceptions.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class CnaeRiskError(Exception):
    """
    Base exception for all cnaerisk errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (CR_*)
        details: Additional context about the error
    """
    message: str
    code: str = "CR_INTERNAL_ERROR"
    details: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Serialize exception for logging/API responses."""
        result: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Rule Pack / Rule Table Errors
# =============================================================================

@dataclass
class RuleLoadError(CnaeRiskError):
    """Failed to load rules from their source."""
    code: str = "CR_RULE_LOAD_ERROR"


@dataclass
class RuleValidationError(CnaeRiskError):
    """Rule or rule pack failed validation."""
    code: str = "CR_RULE_VALIDATION_ERROR"


@dataclass
class RuleVersionMismatch(CnaeRiskError):
    """Rule pack schema version is not supported."""
    code: str = "CR_RULE_VERSION_MISMATCH"


@dataclass
class RuleTableNotReadyError(CnaeRiskError):
    """Rule table did not reach READY in time."""
    code: str = "CR_RULE_TABLE_NOT_READY"


# =============================================================================
# Backing Store Errors
# =============================================================================

@dataclass
class RuleStoreError(CnaeRiskError):
    """Backing store rejected a rule write."""
    code: str = "CR_RULE_STORE_ERROR"


# =============================================================================
# Override Errors
# =============================================================================

@dataclass
class OverrideValidationError(CnaeRiskError):
    """Manual risk override was rejected; the result is unchanged."""
    code: str = "CR_OVERRIDE_VALIDATION_ERROR"
