from __future__ import annotations

import importlib
import logging
from pathlib import Path
from types import ModuleType
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import Container, build_container
from .core.enums import RecoveryPolicy
from .database.bootstrap import prepare_storage
from .presence.audit import find_violations
from .presence.controller import register as register_presence
from .roster.controller import register as register_roster
from .roster.provisioning import DEFAULT_ROSTER, load_roster_csv

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def load_settings() -> ModuleType:
    load_dotenv(override=False)
    return importlib.import_module(get_settings_module())


def container_from_settings(settings: ModuleType) -> Container:
    return build_container(
        db_config=getattr(settings, "DB_CONFIG"),
        inside_window_hours=getattr(settings, "INSIDE_WINDOW_HOURS", 24),
        history_limit=getattr(settings, "HISTORY_LIMIT", 100),
        max_history_limit=getattr(settings, "MAX_HISTORY_LIMIT", 500),
        toggle_max_attempts=getattr(settings, "TOGGLE_MAX_ATTEMPTS", 3),
    )


def startup(container: Container, settings: ModuleType) -> None:
    """Integrity check, recovery policy, and roster provisioning. Raises StorageFault to abort."""
    policy = RecoveryPolicy(str(getattr(settings, "STORAGE_RECOVERY", "abort")).lower())

    def audit_ledger():
        return find_violations(container.ledger.iter_all())

    verify = bool(getattr(settings, "VERIFY_LEDGER_ON_STARTUP", False))

    report = prepare_storage(
        container.conn,
        schema_path=SCHEMA_PATH,
        policy=policy,
        apply=bool(getattr(settings, "AUTO_INIT_DB", False)),
        audit=audit_ledger if verify else None,
    )

    if bool(getattr(settings, "AUTO_SEED_DB", False)) or report.reset_performed:
        roster_file = getattr(settings, "ROSTER_FILE", None)
        identities = load_roster_csv(roster_file) if roster_file else DEFAULT_ROSTER
        container.roster_service.provision(identities)


def create_app(container: Optional[Container] = None) -> Flask:
    settings = load_settings()
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["PORT"] = int(getattr(settings, "PORT", 3000))

    if container is None:
        container = container_from_settings(settings)
        logger.info("settings=%s db=%s", settings.__name__, container.conn.config.describe())
        startup(container, settings)

    register_roster(app, container)
    register_presence(app, container)
    app.extensions["lab_presence"] = container

    return app


def run() -> None:
    app = create_app()
    app.run(host="0.0.0.0", port=int(app.config.get("PORT", 3000)), threaded=True)
