"""Initial roster data and CSV loading for provisioning."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import List

from ..common.validators import require_identifier, require_non_empty
from ..core.exceptions import ValidationError
from .model import Identity

_NAMED_STUDENTS = (
    ("7001", "Jaibharathi"),
    ("7002", "Manikandan"),
    ("7003", "Mathan"),
    ("7004", "Gowrisankar"),
)

_TRUE_VALUES = {"1", "true", "yes", "y"}
_FALSE_VALUES = {"0", "false", "no", "n"}


def _access_level_for(number: int) -> str:
    return "Full" if number % 2 == 1 else "Restricted"


def build_default_roster(size: int = 100) -> List[Identity]:
    """Lab roster: ids 7001..7000+size, all authorized students."""
    named = dict(_NAMED_STUDENTS)
    roster: List[Identity] = []
    for n in range(1, size + 1):
        identity_id = str(7000 + n)
        roster.append(
            Identity(
                identity_id=identity_id,
                name=named.get(identity_id, f"Student{n}"),
                role="student",
                access_level=_access_level_for(n),
                authorized=True,
            )
        )
    return roster


DEFAULT_ROSTER = tuple(build_default_roster())


def _parse_flag(value: str | None, *, line_no: int) -> bool:
    if value is None or not value.strip():
        return True
    v = value.strip().lower()
    if v in _TRUE_VALUES:
        return True
    if v in _FALSE_VALUES:
        return False
    raise ValidationError(f"Line {line_no}: authorized must be true/false, got {value!r}")


def load_roster_csv(path: str | Path) -> List[Identity]:
    """Read `id,name,role,accessLevel,authorized` rows (header required)."""
    identities: List[Identity] = []
    seen: set[str] = set()
    with Path(path).open(newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        for line_no, row in enumerate(reader, start=2):
            identity_id = require_identifier(row.get("id"))
            if identity_id in seen:
                raise ValidationError(f"Line {line_no}: duplicate id {identity_id}")
            seen.add(identity_id)
            identities.append(
                Identity(
                    identity_id=identity_id,
                    name=require_non_empty(row.get("name"), f"Line {line_no}: name"),
                    role=require_non_empty(row.get("role"), f"Line {line_no}: role"),
                    access_level=(row.get("accessLevel") or "Restricted").strip(),
                    authorized=_parse_flag(row.get("authorized"), line_no=line_no),
                )
            )
    return identities
