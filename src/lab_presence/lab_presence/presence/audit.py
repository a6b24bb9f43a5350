"""Logical ledger audit: alternation and ordering checks over the full history."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from ..core.enums import PresenceAction, PresenceStatus
from .model import PresenceRecord

_EXPECTED_ACTION = {
    PresenceStatus.INSIDE: PresenceAction.ENTRY,
    PresenceStatus.OUTSIDE: PresenceAction.EXIT,
}


def find_violations(records: Iterable[PresenceRecord], *, max_reports: int = 50) -> List[str]:
    """Return human-readable violations; records must be in ascending sequence order.

    Checks: sequence ids strictly increase, each identity starts Inside and
    strictly alternates, and every action matches its resulting status.
    """
    violations: List[str] = []
    last_status: Dict[str, PresenceStatus] = {}
    prev_seq: Optional[int] = None

    for r in records:
        if len(violations) >= max_reports:
            break

        if prev_seq is not None and r.sequence_id <= prev_seq:
            violations.append(f"#{r.sequence_id}: sequence id not increasing (after #{prev_seq})")
        prev_seq = r.sequence_id

        if _EXPECTED_ACTION[r.status] != r.action:
            violations.append(f"#{r.sequence_id}: action {r.action.value} with status {r.status.value}")

        before = last_status.get(r.identity_id)
        if before is None and r.status != PresenceStatus.INSIDE:
            violations.append(f"#{r.sequence_id}: first record for {r.identity_id} is {r.status.value}")
        elif before is not None and before == r.status:
            violations.append(f"#{r.sequence_id}: {r.identity_id} repeated {r.status.value}")
        last_status[r.identity_id] = r.status

    return violations
