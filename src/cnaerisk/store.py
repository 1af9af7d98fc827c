"""
Rule Backing Store

Rule table administration writes through a RuleStore before touching the
in-memory index, so the cache never holds a rule the store rejected.

RuleStore is the persistence collaborator's contract (save/get/list/
delete keyed by normalized code). InMemoryRuleStore is the reference
implementation used by tests and by single-process deployments.
"""
from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from .exceptions import RuleStoreError
from .models import CnaeRule


@runtime_checkable
class RuleStore(Protocol):
    """Key-value persistence for rules, keyed by normalized code."""

    def save(self, key: str, rule: CnaeRule) -> None: ...

    def get(self, key: str) -> Optional[CnaeRule]: ...

    def list(self) -> list[CnaeRule]: ...

    def delete(self, key: str) -> None: ...


class InMemoryRuleStore:
    """
    Dict-backed RuleStore.

    Set fail_writes=True to make save/delete raise RuleStoreError, which
    is how administrative write failures are exercised.
    """

    def __init__(self, rules: Optional[list[CnaeRule]] = None, fail_writes: bool = False):
        self._rules: dict[str, CnaeRule] = {}
        self.fail_writes = fail_writes
        for rule in rules or []:
            self._rules[rule.code] = rule

    def _check_writable(self, operation: str, key: str) -> None:
        if self.fail_writes:
            raise RuleStoreError(
                message=f"Store rejected {operation} for {key!r}",
                details={"operation": operation, "key": key},
            )

    def save(self, key: str, rule: CnaeRule) -> None:
        self._check_writable("save", key)
        self._rules[key] = rule

    def get(self, key: str) -> Optional[CnaeRule]:
        return self._rules.get(key)

    def list(self) -> list[CnaeRule]:
        return [self._rules[k] for k in sorted(self._rules)]

    def delete(self, key: str) -> None:
        self._check_writable("delete", key)
        self._rules.pop(key, None)

    def __len__(self) -> int:
        return len(self._rules)
