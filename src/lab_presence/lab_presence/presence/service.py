from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.locks import KeyedLock
from ..common.validators import require_bounded_int, require_identifier
from ..core.constants import (
    DEFAULT_HISTORY_LIMIT,
    DEFAULT_INSIDE_WINDOW_HOURS,
    DEFAULT_TOGGLE_MAX_ATTEMPTS,
    MAX_HISTORY_LIMIT,
)
from ..core.enums import PresenceStatus
from ..core.exceptions import InvalidUserError, LedgerConflictError, ValidationError
from ..roster.repository import RosterRepository
from .factory import TransitionStrategyFactory
from .model import InsideRow, NewPresenceRecord, PresenceRecord, ScanResult
from .repository import PresenceLedger

logger = logging.getLogger(__name__)


class ToggleEngine:
    """Use case: the single authoritative Entry-vs-Exit decision for a scan.

    Read-last-record and append for one identifier run as one critical
    section under a per-identifier lock; scans of different identifiers
    proceed in parallel. The ledger's conditional append covers writers in
    other processes.
    """

    def __init__(
        self,
        roster: RosterRepository,
        ledger: PresenceLedger,
        *,
        strategy_factory: TransitionStrategyFactory | None = None,
        locks: KeyedLock | None = None,
        max_attempts: int = DEFAULT_TOGGLE_MAX_ATTEMPTS,
    ):
        self._roster = roster
        self._ledger = ledger
        self._factory = strategy_factory or TransitionStrategyFactory()
        self._locks = locks or KeyedLock()
        self._max_attempts = max(1, int(max_attempts))

    def record_scan(self, identity_id: str, *, now: datetime | None = None) -> ScanResult:
        identity_id = require_identifier(identity_id)

        with self._locks.hold(identity_id):
            identity = self._roster.lookup(identity_id)
            if identity is None or not identity.authorized:
                logger.info("Rejected scan for %r", identity_id)
                raise InvalidUserError("Invalid user")

            for attempt in range(1, self._max_attempts + 1):
                last = self._ledger.last_record_for(identity_id)
                decision = self._factory.for_last(last).decide()
                record = NewPresenceRecord(
                    identity_id=identity.identity_id,
                    name=identity.name,
                    role=identity.role,
                    action=decision.action,
                    status=decision.status,
                    timestamp=now or now_local(),
                )
                try:
                    sequence_id = self._ledger.append(
                        record,
                        after_sequence_id=last.sequence_id if last else None,
                    )
                except LedgerConflictError:
                    logger.warning(
                        "Concurrent write for %s (attempt %d/%d), re-reading ledger",
                        identity_id,
                        attempt,
                        self._max_attempts,
                    )
                    continue

                logger.debug("Scan %s -> %s/%s #%d", identity_id, decision.action.value, decision.status.value, sequence_id)
                return ScanResult(action=decision.action, status=decision.status, sequence_id=sequence_id)

        raise LedgerConflictError(f"Could not record scan for {identity_id} after {self._max_attempts} attempts")


class PresenceViewService:
    """Use case: read-only projections of the ledger."""

    def __init__(
        self,
        ledger: PresenceLedger,
        roster: RosterRepository,
        *,
        window: timedelta = timedelta(hours=DEFAULT_INSIDE_WINDOW_HOURS),
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        max_history_limit: int = MAX_HISTORY_LIMIT,
    ):
        if window <= timedelta(0):
            raise ValueError("window must be positive")
        self._ledger = ledger
        self._roster = roster
        self._window = window
        self._max_history_limit = int(max_history_limit)
        self._history_limit = min(int(history_limit), self._max_history_limit)

    @property
    def window(self) -> timedelta:
        return self._window

    def recent_history(self, limit: Optional[int] = None) -> Sequence[PresenceRecord]:
        if limit is None:
            limit = self._history_limit
        limit = require_bounded_int(limit, "limit", minimum=1, maximum=self._max_history_limit)
        return self._ledger.recent(limit)

    def currently_inside(self, window: timedelta | None = None, *, now: datetime | None = None) -> Sequence[InsideRow]:
        """One row per authorized identity whose latest record inside the window is Inside.

        An Inside record older than the window does not count, even without
        a matching Exit.
        """
        window = window if window is not None else self._window
        if window <= timedelta(0):
            raise ValidationError("window must be positive")
        since = (now or now_local()) - window

        authorized = {i.identity_id for i in self._roster.list_authorized()}
        rows = []
        for r in self._ledger.latest_per_identity_since(since):
            if r.status != PresenceStatus.INSIDE or r.identity_id not in authorized:
                continue
            rows.append(InsideRow(identity_id=r.identity_id, name=r.name, role=r.role, timestamp=r.timestamp))
        return rows

    def count_records(self) -> int:
        return self._ledger.count()
