from __future__ import annotations

from datetime import datetime
from typing import Iterator, Optional, Protocol, Sequence

from .model import NewPresenceRecord, PresenceRecord


class PresenceLedger(Protocol):
    """Append-only, ordered storage for PresenceRecord."""

    def last_record_for(self, identity_id: str) -> Optional[PresenceRecord]:
        """Latest record by sequence id; must see every committed append."""

        raise NotImplementedError

    def append(self, record: NewPresenceRecord, *, after_sequence_id: Optional[int]) -> int:
        """Conditionally append and return the new sequence id.

        The append happens only if the identity's latest sequence id still
        equals `after_sequence_id` (None: no prior record). Otherwise
        LedgerConflictError is raised and nothing is written.
        """

        raise NotImplementedError

    def recent(self, limit: int) -> Sequence[PresenceRecord]:
        """Newest first, by sequence id descending."""

        raise NotImplementedError

    def latest_per_identity_since(self, since: datetime) -> Sequence[PresenceRecord]:
        """For each identity, its latest record with timestamp >= since; newest sequence id first."""

        raise NotImplementedError

    def iter_all(self) -> Iterator[PresenceRecord]:
        """Every record in ascending sequence order."""

        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError
