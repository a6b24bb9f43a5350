from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.lab_presence.lab_presence.database.bootstrap import apply_schema, check_integrity, list_tables
from src.lab_presence.lab_presence.database.connection import DatabaseConnection, DBConfig
from src.lab_presence.lab_presence.main import SCHEMA_PATH, load_settings


def main() -> None:
    settings = load_settings()
    conn = DatabaseConnection(DBConfig.from_dict(settings.DB_CONFIG))

    apply_schema(conn, schema_path=SCHEMA_PATH)
    failures = check_integrity(conn)
    tables = list_tables(conn)
    if failures:
        raise SystemExit("Integrity check failed:\n  " + "\n  ".join(failures))

    print(f"OK: Applied schema.sql -> {conn.config.describe()} (tables={len(tables)})")


if __name__ == "__main__":
    main()
