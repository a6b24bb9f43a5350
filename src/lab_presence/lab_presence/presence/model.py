from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import PresenceAction, PresenceStatus


@dataclass(frozen=True)
class NewPresenceRecord:
    """A ledger entry before the ledger assigns its sequence id."""

    identity_id: str
    name: str
    role: str
    action: PresenceAction
    status: PresenceStatus
    timestamp: datetime


@dataclass(frozen=True)
class PresenceRecord:
    """Domain entity: one immutable ledger entry.

    `name`/`role` are a snapshot of the identity at write time; history is
    never re-joined to the current roster. `sequence_id` is the only ordering
    key (timestamps can collide within a second).
    """

    sequence_id: int
    identity_id: str
    name: str
    role: str
    action: PresenceAction
    status: PresenceStatus
    timestamp: datetime


@dataclass(frozen=True)
class ScanResult:
    action: PresenceAction
    status: PresenceStatus
    sequence_id: Optional[int] = None


@dataclass(frozen=True)
class InsideRow:
    """Read-model for the currently-inside view."""

    identity_id: str
    name: str
    role: str
    timestamp: datetime
