from __future__ import annotations

import logging
from typing import Iterable, Sequence

from ..common.validators import require_identifier
from ..core.exceptions import NotFoundError
from .model import Identity
from .repository import RosterRepository

logger = logging.getLogger(__name__)


class RosterService:
    """Use cases over the fixed roster of identities."""

    def __init__(self, roster: RosterRepository):
        self._roster = roster

    def list_authorized(self) -> Sequence[Identity]:
        return self._roster.list_authorized()

    def get_user(self, identity_id: str) -> Identity:
        # Unauthorized identities are reported exactly like unknown ones.
        identity = self._roster.lookup(require_identifier(identity_id))
        if identity is None or not identity.authorized:
            raise NotFoundError("User not found")
        return identity

    def provision(self, identities: Iterable[Identity]) -> int:
        """Insert identities that are not present yet. Re-running is a no-op."""
        inserted = 0
        total = 0
        for identity in identities:
            total += 1
            if self._roster.insert_if_absent(identity):
                inserted += 1
        logger.info("Roster provisioned: %d new of %d identities", inserted, total)
        return inserted

    def set_authorized(self, identity_id: str, authorized: bool) -> None:
        identity_id = require_identifier(identity_id)
        if not self._roster.set_authorized(identity_id, authorized=bool(authorized)):
            raise NotFoundError("User not found")
        logger.info("Identity %s authorized=%s", identity_id, bool(authorized))
