"""
Canonical Forms

Two kinds of canonicalization live here:

1. Activity codes. CNAE codes arrive formatted in many ways
   ("4771-7/01", "47.71-7-01", 4771701). Rule-table keys and lookup keys
   are both reduced to their digit sequence so punctuation never affects
   matching.

2. Canonical JSON for hashing analysis results. Based on RFC 8785
   (JSON Canonicalization Scheme) principles:
   - Sorted keys (lexicographic)
   - No whitespace
   - UTF-8 encoding

   The same result always produces the same hash, which lets auditors
   confirm that re-running an analysis with identical inputs reproduced
   the stored verdict.
"""
from __future__ import annotations

import hashlib
import json
import re
from enum import Enum
from typing import Any


# ASCII only: \D would keep full-width and other Unicode digits
_NON_DIGITS = re.compile(r"[^0-9]")


# =============================================================================
# Activity Codes
# =============================================================================

def normalize_cnae(code: Any) -> str:
    """
    Strip every non-digit character from an activity code.

    Total and idempotent: any input (including None and integers) yields a
    string, and normalizing a normalized code returns it unchanged.

    Example:
        >>> normalize_cnae("4771-7/01")
        '4771701'
    """
    if code is None:
        return ""
    return _NON_DIGITS.sub("", str(code))


def is_placeholder_code(normalized: str) -> bool:
    """
    True when a normalized code carries no activity.

    Registries pad missing secondary activities with all-zero codes
    ("0000000"); those and empty strings are skipped by the classifier.
    """
    return not normalized or not normalized.strip("0")


def format_cnae(code: Any) -> str:
    """
    Render a 7-digit code in the official NNNN-N/NN layout.

    Codes of any other length are returned normalized but unformatted.
    """
    digits = normalize_cnae(code)
    if len(digits) != 7:
        return digits
    return f"{digits[:4]}-{digits[4]}/{digits[5:]}"


# =============================================================================
# Canonical JSON
# =============================================================================

def _default_serializer(obj: Any) -> Any:
    """Serialize enums (risk tiers, competence) by their stored label."""
    if isinstance(obj, Enum):
        return obj.value
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def canonical_json(obj: Any) -> str:
    """
    Serialize object to canonical JSON string.

    Example:
        >>> canonical_json({"b": 1, "a": 2})
        '{"a":2,"b":1}'
    """
    return json.dumps(
        obj,
        sort_keys=True,
        separators=(",", ":"),
        default=_default_serializer,
        ensure_ascii=False,
    )


def content_hash(obj: Any) -> str:
    """SHA-256 hex digest of the canonical JSON representation."""
    return hashlib.sha256(canonical_json(obj).encode("utf-8")).hexdigest()


def content_hash_short(obj: Any, length: int = 12) -> str:
    """Truncated content hash for log lines and display."""
    return content_hash(obj)[:length]
