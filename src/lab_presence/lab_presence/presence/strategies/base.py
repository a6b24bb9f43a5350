from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ...core.enums import PresenceAction, PresenceStatus


@dataclass(frozen=True)
class TransitionDecision:
    action: PresenceAction
    status: PresenceStatus


class TransitionStrategy(ABC):
    """Strategy Pattern: encapsulate what a scan does from a given state."""

    @abstractmethod
    def decide(self) -> TransitionDecision:
        raise NotImplementedError
