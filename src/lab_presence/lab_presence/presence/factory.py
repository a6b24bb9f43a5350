from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import PresenceStatus
from .model import PresenceRecord
from .strategies.base import TransitionStrategy
from .strategies.entry_strategy import EntryStrategy
from .strategies.exit_strategy import ExitStrategy


@dataclass
class TransitionStrategyFactory:
    """Factory Pattern: strict two-state toggle keyed on the last record.

    No timeout-based auto-exit: an Inside record stays Inside until the next scan.
    """

    def for_last(self, last: Optional[PresenceRecord]) -> TransitionStrategy:
        if last is not None and last.status == PresenceStatus.INSIDE:
            return ExitStrategy()
        return EntryStrategy()
