"""Check the whole ledger for alternation/ordering violations. Exit code 1 if any."""

from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.lab_presence.lab_presence.main import container_from_settings, load_settings
from src.lab_presence.lab_presence.presence.audit import find_violations


def main() -> None:
    container = container_from_settings(load_settings())
    violations = find_violations(container.ledger.iter_all())
    if violations:
        for v in violations:
            print(v)
        raise SystemExit(1)

    print(f"OK: ledger consistent ({container.presence_views.count_records()} records)")


if __name__ == "__main__":
    main()
