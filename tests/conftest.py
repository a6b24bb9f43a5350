from __future__ import annotations

import os
import threading
import time
from dataclasses import replace
from datetime import datetime
from typing import Iterable, Optional

import pytest

os.environ.setdefault("APP_ENV", "testing")

from src.lab_presence.lab_presence.container import build_services
from src.lab_presence.lab_presence.core.exceptions import LedgerConflictError
from src.lab_presence.lab_presence.presence.model import NewPresenceRecord, PresenceRecord
from src.lab_presence.lab_presence.roster.model import Identity


class InMemoryRoster:
    def __init__(self, identities: Iterable[Identity] = ()):
        self._by_id: dict[str, Identity] = {i.identity_id: i for i in identities}
        self._lock = threading.Lock()

    def lookup(self, identity_id: str) -> Optional[Identity]:
        return self._by_id.get(identity_id)

    def list_authorized(self):
        return [i for i in self._by_id.values() if i.authorized]

    def insert_if_absent(self, identity: Identity) -> bool:
        with self._lock:
            if identity.identity_id in self._by_id:
                return False
            self._by_id[identity.identity_id] = identity
            return True

    def set_authorized(self, identity_id: str, *, authorized: bool) -> bool:
        with self._lock:
            current = self._by_id.get(identity_id)
            if current is None:
                return False
            self._by_id[identity_id] = replace(current, authorized=authorized)
            return True

    def rename(self, identity_id: str, name: str) -> None:
        self._by_id[identity_id] = replace(self._by_id[identity_id], name=name)


class InMemoryLedger:
    """Thread-safe ledger fake.

    `conditional=False` turns append into a blind insert so tests can show
    the engine's own lock is what keeps alternation; `read_delay` widens the
    read-then-append window.
    """

    def __init__(self, *, conditional: bool = True, read_delay: float = 0.0):
        self._lock = threading.Lock()
        self._records: list[PresenceRecord] = []
        self._next_seq = 1
        self.conditional = conditional
        self.read_delay = read_delay

    def _last(self, identity_id: str) -> Optional[PresenceRecord]:
        for r in reversed(self._records):
            if r.identity_id == identity_id:
                return r
        return None

    def last_record_for(self, identity_id: str) -> Optional[PresenceRecord]:
        with self._lock:
            found = self._last(identity_id)
        if self.read_delay:
            time.sleep(self.read_delay)
        return found

    def append(self, record: NewPresenceRecord, *, after_sequence_id: Optional[int]) -> int:
        with self._lock:
            last = self._last(record.identity_id)
            current = last.sequence_id if last else None
            if self.conditional and current != after_sequence_id:
                raise LedgerConflictError(f"expected {after_sequence_id}, found {current}")
            seq = self._next_seq
            self._next_seq += 1
            self._records.append(
                PresenceRecord(
                    sequence_id=seq,
                    identity_id=record.identity_id,
                    name=record.name,
                    role=record.role,
                    action=record.action,
                    status=record.status,
                    timestamp=record.timestamp,
                )
            )
            return seq

    def recent(self, limit: int):
        with self._lock:
            return list(reversed(self._records))[:limit]

    def latest_per_identity_since(self, since: datetime):
        with self._lock:
            latest: dict[str, PresenceRecord] = {}
            for r in self._records:
                if r.timestamp >= since:
                    latest[r.identity_id] = r
        return sorted(latest.values(), key=lambda r: r.sequence_id, reverse=True)

    def iter_all(self):
        with self._lock:
            snapshot = list(self._records)
        return iter(snapshot)

    def count(self) -> int:
        with self._lock:
            return len(self._records)


def make_identity(identity_id: str, name: str = "", *, authorized: bool = True) -> Identity:
    return Identity(
        identity_id=identity_id,
        name=name or f"Student {identity_id}",
        role="student",
        access_level="Full",
        authorized=authorized,
    )


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 1, 8, 30, 0)


@pytest.fixture
def roster() -> InMemoryRoster:
    return InMemoryRoster(
        [
            make_identity("7001", "Jaibharathi"),
            make_identity("7002", "Manikandan"),
            make_identity("7003", "Mathan", authorized=False),
        ]
    )


@pytest.fixture
def ledger() -> InMemoryLedger:
    return InMemoryLedger()


@pytest.fixture
def container(roster, ledger):
    return build_services(conn=None, roster_repo=roster, ledger=ledger)


@pytest.fixture
def client(container):
    from src.lab_presence.lab_presence.main import create_app

    app = create_app(container=container)
    return app.test_client()


class ScriptedCursor:
    """Records every statement and answers from a script, one entry per execute."""

    def __init__(self, script: Iterable[dict]):
        self._script = list(script)
        self.executed: list = []
        self.rowcount = -1
        self.lastrowid = None
        self.closed = False
        self._rows: list = []

    def execute(self, sql, params=None):
        self.executed.append((" ".join(sql.split()), params))
        step = self._script.pop(0) if self._script else {}
        self._rows = list(step.get("rows", []))
        self.rowcount = step.get("rowcount", len(self._rows))
        self.lastrowid = step.get("lastrowid", self.lastrowid)

    def fetchone(self):
        return self._rows.pop(0) if self._rows else None

    def fetchall(self):
        rows, self._rows = self._rows, []
        return rows

    def fetchmany(self, size):
        batch, self._rows = self._rows[:size], self._rows[size:]
        return batch

    def close(self):
        self.closed = True


class ScriptedConnection:
    def __init__(self, script: Iterable[dict]):
        self.cursor_obj = ScriptedCursor(script)
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=True):
        return self.cursor_obj

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class ScriptedFactory:
    """Connection factory handing out one scripted connection per db_cursor block."""

    def __init__(self, *scripts: Iterable[dict]):
        self._scripts = list(scripts)
        self.connections: list = []

    def connect(self):
        conn = ScriptedConnection(self._scripts.pop(0) if self._scripts else [])
        self.connections.append(conn)
        return conn

    @property
    def last(self) -> ScriptedConnection:
        return self.connections[-1]

    @property
    def statements(self) -> list:
        return [sql for sql, _ in self.last.cursor_obj.executed]
