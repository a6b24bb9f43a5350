from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Optional, Sequence

import mysql.connector

from ..core.enums import RecoveryPolicy
from ..core.exceptions import StorageFault
from .connection import DatabaseConnection
from .mysql_base import db_cursor, fetchall

logger = logging.getLogger(__name__)

LEDGER_TABLES = ("identities", "presence_records", "ledger_sequence")


@dataclass(frozen=True)
class StorageReport:
    tables: Sequence[str]
    reset_performed: bool = False


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?m)^\s*--.*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes).
    buf: list[str] = []
    quote: Optional[str] = None
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\" and quote:
            buf.append(ch)
            escape = True
            continue

        if ch in ("'", '"', "`"):
            if quote is None:
                quote = ch
            elif quote == ch:
                quote = None
            buf.append(ch)
            continue

        if ch == ";" and quote is None:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(conn_factory: DatabaseConnection) -> None:
    database = conn_factory.config.database
    try:
        conn = conn_factory.connect(with_database=False)
    except mysql.connector.Error as e:
        raise StorageFault(f"Cannot reach MySQL at {conn_factory.config.describe()}") from e
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    except mysql.connector.Error as e:
        raise StorageFault(f"Cannot create database {database!r}") from e
    finally:
        conn.close()


def apply_schema(conn_factory: DatabaseConnection, *, schema_path: str | Path) -> None:
    ensure_database_exists(conn_factory)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))
    with db_cursor(conn_factory, dictionary=False) as (_, cur):
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
    logger.info("Schema applied from %s", schema_path)


def list_tables(conn_factory: DatabaseConnection) -> list[str]:
    with db_cursor(conn_factory, dictionary=False) as (_, cur):
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]


def integrity_failures(rows: Sequence[dict]) -> list[str]:
    """Interpret CHECK TABLE output; any row that is not a clean status is a failure."""
    failures: list[str] = []
    for r in rows:
        msg_type = str(r.get("Msg_type", "")).lower()
        msg_text = str(r.get("Msg_text", ""))
        if msg_type == "error" or (msg_type == "status" and msg_text.upper() != "OK"):
            failures.append(f"{r.get('Table')}: {msg_text}")
    return failures


def check_integrity(conn_factory: DatabaseConnection) -> list[str]:
    with db_cursor(conn_factory) as (_, cur):
        cur.execute("CHECK TABLE " + ", ".join(LEDGER_TABLES))
        return integrity_failures(fetchall(cur))


def reset_storage(conn_factory: DatabaseConnection, *, schema_path: str | Path) -> None:
    """Drop both tables and recreate them empty. Callers must re-provision the roster."""
    logger.critical(
        "Resetting storage %s: all presence records and identities are discarded",
        conn_factory.config.describe(),
    )
    with db_cursor(conn_factory, dictionary=False) as (_, cur):
        cur.execute("SET FOREIGN_KEY_CHECKS=0")
        for table in reversed(LEDGER_TABLES):
            cur.execute(f"DROP TABLE IF EXISTS `{table}`")
        cur.execute("SET FOREIGN_KEY_CHECKS=1")
    apply_schema(conn_factory, schema_path=schema_path)


def prepare_storage(
    conn_factory: DatabaseConnection,
    *,
    schema_path: str | Path,
    policy: RecoveryPolicy = RecoveryPolicy.ABORT,
    apply: bool = True,
    audit: Optional[Callable[[], Sequence[str]]] = None,
) -> StorageReport:
    """Make storage trustworthy before the app serves traffic.

    Integrity failures either abort startup (default) or, when the operator
    opted into RecoveryPolicy.RESET, wipe and recreate the tables.
    """
    if apply:
        apply_schema(conn_factory, schema_path=schema_path)

    failures = check_integrity(conn_factory)
    if not failures and audit is not None:
        failures = list(audit())

    if not failures:
        tables = list_tables(conn_factory)
        logger.info("Storage integrity OK (%d tables)", len(tables))
        return StorageReport(tables=tables)

    for failure in failures:
        logger.error("Storage integrity failure: %s", failure)

    if policy != RecoveryPolicy.RESET:
        raise StorageFault(
            f"Storage failed integrity check ({len(failures)} problem(s)); "
            "refusing to start. Set STORAGE_RECOVERY=reset to rebuild it empty."
        )

    logger.warning("STORAGE_RECOVERY=reset: rebuilding storage after %d failure(s)", len(failures))
    reset_storage(conn_factory, schema_path=schema_path)
    return StorageReport(tables=list_tables(conn_factory), reset_performed=True)
