"""
cnaerisk Rule Table

In-memory index of classification rules keyed by normalized activity
code, plus the administrative operations that edit it.

Key features:
- Explicit initialization state (UNINITIALIZED -> LOADING -> READY/FAILED)
- Copy-on-write index: readers take an immutable snapshot and never
  block; writers are serialized and swap in a new index
- Write-through administration: the backing store is written first and
  the index only changes after the store accepts the write
- Last-write-wins for duplicate codes in a rule source

Usage:
    table = RuleTable(store=InMemoryRuleStore())
    table.load(rule_source("packs/sesa.yaml"))

    table.upsert(CnaeRule(cnae="9602-5/01", description="...", risk=RiskLevel.BAIXO))
    table.delete("96.02-5-01")

    for rule in table.list_all():
        print(rule.cnae, rule.risk.value)
"""
from __future__ import annotations

import logging
import threading
from types import MappingProxyType
from typing import Callable, Iterable, Mapping, Optional

from ..canon import normalize_cnae
from ..exceptions import RuleTableNotReadyError, RuleValidationError
from ..models import CnaeRule, TableState
from ..store import RuleStore


logger = logging.getLogger(__name__)

RuleSource = Callable[[], Iterable[CnaeRule]]

_EMPTY_INDEX: Mapping[str, CnaeRule] = MappingProxyType({})


def build_index(rules: Iterable[CnaeRule]) -> dict[str, CnaeRule]:
    """
    Index rules by normalized code.

    Later rules replace earlier ones with the same code. Rules whose code
    has no digits cannot be looked up and are dropped.
    """
    index: dict[str, CnaeRule] = {}
    for rule in rules:
        key = rule.code
        if not key:
            logger.warning("Skipping rule with empty code: %r", rule.cnae)
            continue
        if key in index:
            logger.debug("Duplicate rule for %s, keeping the later one", key, extra={"cnae": key})
        index[key] = rule
    return index


class RuleTable:
    """
    Rule index shared by classifiers.

    A table built with an explicit rule list starts READY. A table built
    empty starts UNINITIALIZED and becomes READY once load() succeeds.
    Classifiers may run in any state; against an empty table every code
    degrades to the fallback tier, and the result records the state so
    callers can tell missing rules from unknown activities.
    """

    def __init__(
        self,
        rules: Optional[Iterable[CnaeRule]] = None,
        store: Optional[RuleStore] = None,
    ):
        self.store = store
        # (index, state) is replaced as one tuple so readers never pair a
        # snapshot with the state of a different load
        self._view: tuple[Mapping[str, CnaeRule], TableState] = (
            _EMPTY_INDEX, TableState.UNINITIALIZED,
        )
        self._write_lock = threading.Lock()
        self._settled = threading.Event()
        self._last_error: Optional[BaseException] = None

        if rules is not None:
            self._set_state(TableState.READY, MappingProxyType(build_index(rules)))

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def state(self) -> TableState:
        return self._state

    @property
    def _index(self) -> Mapping[str, CnaeRule]:
        return self._view[0]

    @property
    def _state(self) -> TableState:
        return self._view[1]

    @property
    def is_ready(self) -> bool:
        return self._state == TableState.READY

    @property
    def last_error(self) -> Optional[BaseException]:
        """The exception from the most recent failed load, if any."""
        return self._last_error

    def _set_state(
        self,
        state: TableState,
        index: Optional[Mapping[str, CnaeRule]] = None,
    ) -> None:
        previous = self._state
        self._view = (self._index if index is None else index, state)
        if state in (TableState.READY, TableState.FAILED):
            self._settled.set()
        else:
            self._settled.clear()
        if previous != state:
            logger.info(
                "Rule table %s -> %s (%d rules)",
                previous.value, state.value, len(self._index),
                extra={"table_state": state.value, "rule_count": len(self._index)},
            )

    def wait_until_ready(
        self,
        timeout: Optional[float] = None,
        raise_on_timeout: bool = False,
    ) -> bool:
        """
        Block until a pending load settles.

        Returns True when the table is READY. An UNINITIALIZED table has no
        load in flight and returns False immediately.

        Raises:
            RuleTableNotReadyError: If raise_on_timeout and not READY
        """
        if self._state != TableState.UNINITIALIZED:
            self._settled.wait(timeout)
        ready = self.is_ready
        if not ready and raise_on_timeout:
            raise RuleTableNotReadyError(
                message=f"Rule table is {self._state.value}",
                details={
                    "state": self._state.value,
                    "timeout": timeout,
                    "error": str(self._last_error) if self._last_error else None,
                },
            )
        return ready

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def load(self, source: RuleSource) -> int:
        """
        Replace the whole index with the rules from a source.

        The source is authoritative: rules added or removed with upsert()
        and delete() since the last load are replaced too, even though the
        backing store still holds them. To reload those edits, load from
        the store itself with table.load(table.store.list).

        On failure the table becomes FAILED, the previous snapshot stays
        in place, and the source's exception propagates.

        Returns:
            Number of indexed rules
        """
        with self._write_lock:
            self._set_state(TableState.LOADING)
            try:
                index = build_index(source())
            except Exception as e:
                self._last_error = e
                logger.exception("Failed to load rules")
                self._set_state(TableState.FAILED)
                raise
            self._last_error = None
            self._set_state(TableState.READY, MappingProxyType(index))
            return len(index)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def snapshot(self) -> Mapping[str, CnaeRule]:
        """Immutable view of the current index; later writes do not affect it."""
        return self._index

    def view(self) -> tuple[Mapping[str, CnaeRule], TableState]:
        """The current snapshot and the state it was published under, read together."""
        return self._view

    def get(self, code: str) -> Optional[CnaeRule]:
        """Look up a rule by code in any formatting."""
        return self._index.get(normalize_cnae(code))

    def list_all(self) -> list[CnaeRule]:
        """All rules ordered by normalized code."""
        index = self._index
        return [index[key] for key in sorted(index)]

    def search(self, term: str) -> list[CnaeRule]:
        """
        Case-insensitive match on code or description.

        Codes match by substring of either the written or the normalized
        form, so "4771-7" and "47717" both find "4771-7/01".
        """
        term = (term or "").strip().lower()
        if not term:
            return self.list_all()
        digits = normalize_cnae(term)
        return [
            rule for rule in self.list_all()
            if term in rule.cnae.lower()
            or (digits and digits in rule.code)
            or term in rule.description.lower()
        ]

    @property
    def count(self) -> int:
        return len(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, code: object) -> bool:
        return normalize_cnae(code) in self._index

    # -------------------------------------------------------------------------
    # Administration
    # -------------------------------------------------------------------------

    def upsert(self, rule: CnaeRule) -> CnaeRule:
        """
        Insert or replace the rule for the rule's normalized code.

        Raises:
            RuleValidationError: If the code has no digits
            Any exception raised by the backing store, unchanged
        """
        key = rule.code
        if not key:
            raise RuleValidationError(
                message=f"Activity code {rule.cnae!r} has no digits",
                details={"cnae": rule.cnae},
            )

        with self._write_lock:
            if self.store is not None:
                self.store.save(key, rule)
            index = dict(self._index)
            replaced = key in index
            index[key] = rule
            self._view = (MappingProxyType(index), self._state)

        logger.info(
            "%s rule %s (%s)",
            "Replaced" if replaced else "Inserted", key, rule.risk.value,
            extra={"cnae": key, "risk_level": rule.risk.value},
        )
        return rule

    def delete(self, code: str) -> bool:
        """
        Remove the rule for a code.

        Deleting a code that is not indexed is a no-op.

        Returns:
            True if a rule was removed

        Raises:
            Any exception raised by the backing store, unchanged
        """
        key = normalize_cnae(code)
        with self._write_lock:
            if key not in self._index:
                return False
            if self.store is not None:
                self.store.delete(key)
            index = dict(self._index)
            del index[key]
            self._view = (MappingProxyType(index), self._state)

        logger.info("Deleted rule %s", key, extra={"cnae": key})
        return True
