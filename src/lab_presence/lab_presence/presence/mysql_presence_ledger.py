from __future__ import annotations

from datetime import datetime
from typing import Iterator, Optional, Sequence

from ..core.enums import PresenceAction, PresenceStatus
from ..core.exceptions import LedgerConflictError, StorageFault
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, iter_rows
from .model import NewPresenceRecord, PresenceRecord
from .repository import PresenceLedger

_COLUMNS = "sequence_id, identity_id, name, role, action, status, `timestamp`"
_P_COLUMNS = ", ".join("p." + c for c in _COLUMNS.split(", "))


def _row_to_record(r: dict) -> PresenceRecord:
    return PresenceRecord(
        sequence_id=int(r["sequence_id"]),
        identity_id=str(r["identity_id"]),
        name=r["name"],
        role=r["role"],
        action=PresenceAction(r["action"]),
        status=PresenceStatus(r["status"]),
        timestamp=r["timestamp"],
    )


class MySQLPresenceLedger(PresenceLedger):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def last_record_for(self, identity_id: str) -> Optional[PresenceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM presence_records
                WHERE identity_id=%s
                ORDER BY sequence_id DESC
                LIMIT 1
                """,
                (identity_id,),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def append(self, record: NewPresenceRecord, *, after_sequence_id: Optional[int]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            # Row lock on the identity serializes writers of the same id
            # (across processes too) until this transaction commits.
            cur.execute("SELECT id FROM identities WHERE id=%s FOR UPDATE", (record.identity_id,))
            if not fetchone(cur):
                raise StorageFault(f"Identity {record.identity_id} vanished from the roster")

            cur.execute(
                "SELECT MAX(sequence_id) AS last_seq FROM presence_records WHERE identity_id=%s FOR UPDATE",
                (record.identity_id,),
            )
            row = fetchone(cur)
            current = row.get("last_seq") if row else None
            current = int(current) if current is not None else None
            if current != after_sequence_id:
                raise LedgerConflictError(
                    f"Ledger moved for {record.identity_id}: expected {after_sequence_id}, found {current}"
                )

            # Held until commit, so sequence ids are assigned in commit order.
            cur.execute("SELECT id FROM ledger_sequence WHERE id=1 FOR UPDATE")
            if not fetchone(cur):
                raise StorageFault("ledger_sequence row is missing; re-apply the schema")

            cur.execute(
                """
                INSERT INTO presence_records(identity_id, name, role, action, status, `timestamp`)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    record.identity_id,
                    record.name,
                    record.role,
                    record.action.value,
                    record.status.value,
                    record.timestamp,
                ),
            )
            return int(cur.lastrowid)

    def recent(self, limit: int) -> Sequence[PresenceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM presence_records
                ORDER BY sequence_id DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def latest_per_identity_since(self, since: datetime) -> Sequence[PresenceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_P_COLUMNS}
                FROM presence_records p
                JOIN (
                    SELECT identity_id, MAX(sequence_id) AS last_seq
                    FROM presence_records
                    WHERE `timestamp` >= %s
                    GROUP BY identity_id
                ) latest ON latest.last_seq = p.sequence_id
                ORDER BY p.sequence_id DESC
                """,
                (since,),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def iter_all(self) -> Iterator[PresenceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM presence_records ORDER BY sequence_id ASC")
            for r in iter_rows(cur):
                yield _row_to_record(r)

    def count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM presence_records")
            row = fetchone(cur)
            return int(row["n"]) if row else 0
