from __future__ import annotations

import argparse
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.lab_presence.lab_presence.core.exceptions import NotFoundError, ValidationError
from src.lab_presence.lab_presence.main import container_from_settings, load_settings


def main() -> None:
    parser = argparse.ArgumentParser(description="Grant or revoke scanning for one identity.")
    parser.add_argument("identity_id")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--grant", action="store_true")
    group.add_argument("--revoke", action="store_true")
    args = parser.parse_args()

    container = container_from_settings(load_settings())
    try:
        container.roster_service.set_authorized(args.identity_id, args.grant)
    except (NotFoundError, ValidationError) as e:
        raise SystemExit(f"{args.identity_id}: {e}")

    print(f"OK: {args.identity_id} authorized={args.grant}")


if __name__ == "__main__":
    main()
