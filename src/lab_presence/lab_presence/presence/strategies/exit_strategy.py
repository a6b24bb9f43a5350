from __future__ import annotations

from ...core.enums import PresenceAction, PresenceStatus
from .base import TransitionDecision, TransitionStrategy


class ExitStrategy(TransitionStrategy):
    """Scan while Inside."""

    def decide(self) -> TransitionDecision:
        return TransitionDecision(action=PresenceAction.EXIT, status=PresenceStatus.OUTSIDE)
