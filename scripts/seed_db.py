from __future__ import annotations

import argparse
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.lab_presence.lab_presence.main import container_from_settings, load_settings
from src.lab_presence.lab_presence.roster.provisioning import DEFAULT_ROSTER, load_roster_csv


def main() -> None:
    parser = argparse.ArgumentParser(description="Provision the roster (re-running is a no-op).")
    parser.add_argument("--csv", help="roster CSV with columns id,name,role,accessLevel,authorized")
    args = parser.parse_args()

    settings = load_settings()
    container = container_from_settings(settings)

    roster_file = args.csv or getattr(settings, "ROSTER_FILE", None)
    identities = load_roster_csv(roster_file) if roster_file else DEFAULT_ROSTER
    inserted = container.roster_service.provision(identities)

    print(f"OK: Provisioned roster -> {container.conn.config.describe()} ({inserted} new of {len(identities)})")


if __name__ == "__main__":
    main()
