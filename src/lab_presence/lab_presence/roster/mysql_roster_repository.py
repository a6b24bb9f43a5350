from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Identity
from .repository import RosterRepository


def _row_to_identity(row: dict) -> Identity:
    return Identity(
        identity_id=str(row["id"]),
        name=row["name"],
        role=row["role"],
        access_level=row["access_level"],
        authorized=bool(row["authorized"]),
    )


class MySQLRosterRepository(RosterRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def lookup(self, identity_id: str) -> Optional[Identity]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, name, role, access_level, authorized
                FROM identities
                WHERE id=%s
                """,
                (identity_id,),
            )
            row = fetchone(cur)
            return _row_to_identity(row) if row else None

    def list_authorized(self) -> Sequence[Identity]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, name, role, access_level, authorized
                FROM identities
                WHERE authorized=1
                ORDER BY id
                """
            )
            return [_row_to_identity(r) for r in fetchall(cur)]

    def insert_if_absent(self, identity: Identity) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT IGNORE INTO identities(id, name, role, access_level, authorized)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (
                    identity.identity_id,
                    identity.name,
                    identity.role,
                    identity.access_level,
                    1 if identity.authorized else 0,
                ),
            )
            return cur.rowcount > 0

    def set_authorized(self, identity_id: str, *, authorized: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE identities SET authorized=%s WHERE id=%s",
                (1 if authorized else 0, identity_id),
            )
            if cur.rowcount > 0:
                return True
            # Without FOUND_ROWS, an unchanged flag reports 0 affected rows.
            cur.execute("SELECT 1 AS present FROM identities WHERE id=%s", (identity_id,))
            return fetchone(cur) is not None
