from __future__ import annotations

from datetime import timedelta

import pytest

from conftest import InMemoryLedger

from src.lab_presence.lab_presence.core.enums import PresenceAction, PresenceStatus
from src.lab_presence.lab_presence.core.exceptions import (
    InvalidUserError,
    LedgerConflictError,
    StorageFault,
    ValidationError,
)
from src.lab_presence.lab_presence.presence.model import NewPresenceRecord
from src.lab_presence.lab_presence.presence.service import PresenceViewService, ToggleEngine


def test_three_scans_toggle_entry_exit_entry(roster, ledger, fixed_now):
    engine = ToggleEngine(roster, ledger)

    first = engine.record_scan("7001", now=fixed_now)
    second = engine.record_scan("7001", now=fixed_now + timedelta(minutes=5))
    third = engine.record_scan("7001", now=fixed_now + timedelta(minutes=9))

    assert (first.action, first.status) == (PresenceAction.ENTRY, PresenceStatus.INSIDE)
    assert (second.action, second.status) == (PresenceAction.EXIT, PresenceStatus.OUTSIDE)
    assert (third.action, third.status) == (PresenceAction.ENTRY, PresenceStatus.INSIDE)

    history = PresenceViewService(ledger, roster).recent_history(10)
    assert [r.sequence_id for r in history] == [third.sequence_id, second.sequence_id, first.sequence_id]
    assert [r.action for r in history] == [PresenceAction.ENTRY, PresenceAction.EXIT, PresenceAction.ENTRY]


def test_unknown_id_is_invalid_user_and_ledger_unchanged(roster, ledger):
    engine = ToggleEngine(roster, ledger)
    engine.record_scan("7001")
    before = ledger.count()

    with pytest.raises(InvalidUserError):
        engine.record_scan("9999")

    assert ledger.count() == before


def test_unauthorized_identity_never_appends(roster, ledger):
    engine = ToggleEngine(roster, ledger)

    with pytest.raises(InvalidUserError):
        engine.record_scan("7003")

    assert ledger.count() == 0


def test_revoked_identity_is_rejected_mid_session(roster, ledger):
    engine = ToggleEngine(roster, ledger)
    engine.record_scan("7001")
    roster.set_authorized("7001", authorized=False)

    with pytest.raises(InvalidUserError):
        engine.record_scan("7001")
    assert ledger.count() == 1


@pytest.mark.parametrize("bad", ["", "   ", None, "x" * 65, ["7001"]])
def test_malformed_identifier_is_validation_error(roster, ledger, bad):
    engine = ToggleEngine(roster, ledger)

    with pytest.raises(ValidationError):
        engine.record_scan(bad)
    assert ledger.count() == 0


def test_identifier_is_trimmed(roster, ledger):
    result = ToggleEngine(roster, ledger).record_scan("  7001 \n")

    assert result.status == PresenceStatus.INSIDE
    assert ledger.last_record_for("7001") is not None


def test_records_snapshot_name_at_write_time(roster, ledger):
    engine = ToggleEngine(roster, ledger)
    engine.record_scan("7001")
    roster.rename("7001", "Renamed")
    engine.record_scan("7001")

    oldest, newest = list(ledger.iter_all())
    assert oldest.name == "Jaibharathi"
    assert newest.name == "Renamed"


class ForeignWriterLedger(InMemoryLedger):
    """Simulates another process writing between our read and our append."""

    def __init__(self):
        super().__init__()
        self.conflicts = 0

    def append(self, record, *, after_sequence_id):
        if self.conflicts == 0:
            self.conflicts += 1
            super().append(record, after_sequence_id=after_sequence_id)
            raise LedgerConflictError("lost the race")
        return super().append(record, after_sequence_id=after_sequence_id)


def test_conflict_rereads_and_decides_from_fresh_state(roster, fixed_now):
    ledger = ForeignWriterLedger()
    engine = ToggleEngine(roster, ledger)

    result = engine.record_scan("7001", now=fixed_now)

    # The foreign writer recorded the Entry, so our retry must be the Exit.
    assert result.action == PresenceAction.EXIT
    assert [r.status for r in ledger.iter_all()] == [PresenceStatus.INSIDE, PresenceStatus.OUTSIDE]


class AlwaysConflictLedger(InMemoryLedger):
    def append(self, record, *, after_sequence_id):
        raise LedgerConflictError("busy")


def test_conflict_retries_are_bounded(roster):
    ledger = AlwaysConflictLedger()
    engine = ToggleEngine(roster, ledger, max_attempts=2)

    with pytest.raises(LedgerConflictError):
        engine.record_scan("7001")
    assert ledger.count() == 0


class BrokenLedger(InMemoryLedger):
    def append(self, record: NewPresenceRecord, *, after_sequence_id):
        raise StorageFault("disk gone")


def test_storage_fault_propagates_without_partial_record(roster):
    ledger = BrokenLedger()

    with pytest.raises(StorageFault):
        ToggleEngine(roster, ledger).record_scan("7001")
    assert ledger.count() == 0
