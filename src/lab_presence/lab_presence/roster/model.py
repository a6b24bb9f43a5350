from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Identity:
    """Domain entity: a registered person eligible to be tracked.

    Note: Plain data object (no DB access code). `access_level` is
    informational only; `authorized` gates scanning and read views.
    """

    identity_id: str
    name: str
    role: str
    access_level: str
    authorized: bool = True
