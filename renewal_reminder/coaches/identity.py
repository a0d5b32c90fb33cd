from __future__ import annotations

import json
import logging
from typing import Any, Iterable, Mapping, Sequence

logger = logging.getLogger(__name__)


def normalize_name(name: Any) -> str:
    """Lowercase, collapse whitespace runs (NBSP included) to one space, trim."""
    if name is None:
        return ""
    return " ".join(str(name).split()).lower()


class IdentityMap:
    """Lookup from normalized coach name to Slack user id."""

    def __init__(self, entries: Mapping[str, str] | None = None) -> None:
        self._entries: dict[str, str] = {}
        for name, identity in (entries or {}).items():
            self.add(name, identity)

    def add(self, name: Any, identity: Any) -> bool:
        key = normalize_name(name)
        value = "" if identity is None else str(identity).strip()
        if not key or not value:
            return False
        self._entries[key] = value
        return True

    def resolve(self, name: Any) -> str | None:
        return self._entries.get(normalize_name(name))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return normalize_name(name) in self._entries

    def as_dict(self) -> dict[str, str]:
        return dict(self._entries)


def _load_overrides(raw: str | None) -> dict[str, Any]:
    if raw is None or not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.warning("Ignoring coach override JSON, could not parse it: %s", exc)
        return {}
    if not isinstance(data, dict):
        logger.warning(
            "Ignoring coach override JSON, expected an object but got %s",
            type(data).__name__,
        )
        return {}
    return data


def build_identity_map(
    table_rows: Iterable[Sequence[Any]] | None,
    override_json: str | None,
) -> IdentityMap:
    """Merge the coach table with the JSON overrides.

    The first table row is a header. Overrides are applied last and win on
    any key collision, so a single mapping can be patched without editing
    the table.
    """
    identities = IdentityMap()

    from_table = 0
    for position, row in enumerate(table_rows or []):
        if position == 0 or len(row) < 2:
            continue
        if identities.add(row[0], row[1]):
            from_table += 1

    from_overrides = 0
    for name, identity in _load_overrides(override_json).items():
        if identities.add(name, identity):
            from_overrides += 1

    logger.info(
        "Loaded %d coach mapping(s) (%d from table, %d from overrides)",
        len(identities),
        from_table,
        from_overrides,
    )
    return identities
