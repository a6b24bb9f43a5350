from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from .common.locks import KeyedLock
from .core.constants import (
    DEFAULT_HISTORY_LIMIT,
    DEFAULT_INSIDE_WINDOW_HOURS,
    DEFAULT_TOGGLE_MAX_ATTEMPTS,
    MAX_HISTORY_LIMIT,
)
from .database.connection import DBConfig, DatabaseConnection
from .presence.factory import TransitionStrategyFactory
from .presence.mysql_presence_ledger import MySQLPresenceLedger
from .presence.repository import PresenceLedger
from .presence.service import PresenceViewService, ToggleEngine
from .roster.mysql_roster_repository import MySQLRosterRepository
from .roster.repository import RosterRepository
from .roster.service import RosterService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    roster_repo: RosterRepository
    ledger: PresenceLedger

    roster_service: RosterService
    toggle_engine: ToggleEngine
    presence_views: PresenceViewService


def build_services(
    *,
    conn: Optional[DatabaseConnection],
    roster_repo: RosterRepository,
    ledger: PresenceLedger,
    inside_window_hours: float = DEFAULT_INSIDE_WINDOW_HOURS,
    history_limit: int = DEFAULT_HISTORY_LIMIT,
    max_history_limit: int = MAX_HISTORY_LIMIT,
    toggle_max_attempts: int = DEFAULT_TOGGLE_MAX_ATTEMPTS,
) -> Container:
    return Container(
        conn=conn,
        roster_repo=roster_repo,
        ledger=ledger,
        roster_service=RosterService(roster_repo),
        toggle_engine=ToggleEngine(
            roster_repo,
            ledger,
            strategy_factory=TransitionStrategyFactory(),
            locks=KeyedLock(),
            max_attempts=toggle_max_attempts,
        ),
        presence_views=PresenceViewService(
            ledger,
            roster_repo,
            window=timedelta(hours=float(inside_window_hours)),
            history_limit=history_limit,
            max_history_limit=max_history_limit,
        ),
    )


def build_container(*, db_config: dict, **options) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))
    return build_services(
        conn=conn,
        roster_repo=MySQLRosterRepository(conn),
        ledger=MySQLPresenceLedger(conn),
        **options,
    )
