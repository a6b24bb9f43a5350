from __future__ import annotations

from enum import Enum


class PresenceAction(str, Enum):
    """Event recorded by a scan."""

    ENTRY = "Entry"
    EXIT = "Exit"


class PresenceStatus(str, Enum):
    """State resulting from a scan."""

    INSIDE = "Inside"
    OUTSIDE = "Outside"


class RecoveryPolicy(str, Enum):
    """What startup does when the storage layer fails its integrity check."""

    ABORT = "abort"
    RESET = "reset"
