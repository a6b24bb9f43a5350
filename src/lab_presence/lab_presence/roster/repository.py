from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Identity


class RosterRepository(Protocol):
    """Repository interface for Identity.

    Services depend on this interface, never on a concrete database.
    """

    def lookup(self, identity_id: str) -> Optional[Identity]:
        raise NotImplementedError

    def list_authorized(self) -> Sequence[Identity]:
        raise NotImplementedError

    def insert_if_absent(self, identity: Identity) -> bool:
        """Return True when a new row was written, False when the id already existed."""

        raise NotImplementedError

    def set_authorized(self, identity_id: str, *, authorized: bool) -> bool:
        raise NotImplementedError
