from __future__ import annotations

from datetime import datetime

from ..core.constants import TIMESTAMP_FORMAT


def now_local() -> datetime:
    """Current local wall-clock time, truncated to whole seconds.

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now().replace(microsecond=0)


def format_timestamp(value: datetime) -> str:
    return value.strftime(TIMESTAMP_FORMAT)

