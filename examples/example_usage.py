"""Example: drive the service layer directly (no Flask).

Controllers are a thin layer; scanning and the read views live in services.
"""

import sys

from src.lab_presence.lab_presence.main import container_from_settings, load_settings


def main():
    container = container_from_settings(load_settings())
    identity_id = sys.argv[1] if len(sys.argv) > 1 else "7001"

    result = container.toggle_engine.record_scan(identity_id)
    print(f"{identity_id}: {result.action.value} -> {result.status.value}")

    for r in container.presence_views.recent_history(5):
        print(r.sequence_id, r.identity_id, r.name, r.action.value, r.status.value, r.timestamp)


if __name__ == "__main__":
    main()
