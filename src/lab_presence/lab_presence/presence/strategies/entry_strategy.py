from __future__ import annotations

from ...core.enums import PresenceAction, PresenceStatus
from .base import TransitionDecision, TransitionStrategy


class EntryStrategy(TransitionStrategy):
    """First scan ever, or scan while Outside."""

    def decide(self) -> TransitionDecision:
        return TransitionDecision(action=PresenceAction.ENTRY, status=PresenceStatus.INSIDE)
