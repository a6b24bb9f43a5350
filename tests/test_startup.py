from __future__ import annotations

from types import SimpleNamespace

import pytest

from src.lab_presence.lab_presence import main
from src.lab_presence.lab_presence.core.enums import RecoveryPolicy
from src.lab_presence.lab_presence.core.exceptions import StorageFault
from src.lab_presence.lab_presence.database.bootstrap import StorageReport


def _settings(**overrides):
    base = dict(
        STORAGE_RECOVERY="abort",
        VERIFY_LEDGER_ON_STARTUP=False,
        AUTO_INIT_DB=True,
        AUTO_SEED_DB=False,
        ROSTER_FILE=None,
    )
    base.update(overrides)
    return SimpleNamespace(**base)


def test_reset_forces_roster_reprovisioning(monkeypatch, container):
    seen = {}

    def fake_prepare(conn, *, schema_path, policy, apply, audit):
        seen.update(policy=policy, apply=apply, audit=audit)
        return StorageReport(tables=[], reset_performed=True)

    monkeypatch.setattr(main, "prepare_storage", fake_prepare)

    main.startup(container, _settings(STORAGE_RECOVERY="RESET"))

    assert seen["policy"] == RecoveryPolicy.RESET
    assert seen["audit"] is None
    # 7003 stays unauthorized: provisioning never overwrites an existing row.
    assert len(container.roster_service.list_authorized()) == 99


def test_no_seed_when_clean_and_disabled(monkeypatch, container):
    monkeypatch.setattr(main, "prepare_storage", lambda conn, **kw: StorageReport(tables=[]))

    main.startup(container, _settings())

    assert len(container.roster_service.list_authorized()) == 2


def test_seed_from_csv(monkeypatch, container, tmp_path):
    path = tmp_path / "roster.csv"
    path.write_text("id,name,role,accessLevel,authorized\nZ9,Zed,staff,Full,1\n", encoding="utf-8")
    monkeypatch.setattr(main, "prepare_storage", lambda conn, **kw: StorageReport(tables=[]))

    main.startup(container, _settings(AUTO_SEED_DB=True, ROSTER_FILE=str(path)))

    assert container.roster_service.get_user("Z9").name == "Zed"


def test_ledger_audit_is_wired_when_enabled(monkeypatch, container):
    container.toggle_engine.record_scan("7001")

    def fake_prepare(conn, *, schema_path, policy, apply, audit):
        assert audit() == []
        raise StorageFault("refusing to start")

    monkeypatch.setattr(main, "prepare_storage", fake_prepare)

    with pytest.raises(StorageFault):
        main.startup(container, _settings(VERIFY_LEDGER_ON_STARTUP=True))


def test_unknown_recovery_policy_is_rejected(container):
    with pytest.raises(ValueError):
        main.startup(container, _settings(STORAGE_RECOVERY="delete-and-hope"))
