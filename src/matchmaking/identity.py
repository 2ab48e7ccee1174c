"""Player identity keys shared by momentum and team-editing logic."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Identifiable(Protocol):
    """Anything carrying a roster id (possibly unsaved) and a display name."""

    @property
    def id(self) -> int | str | None: ...

    @property
    def name(self) -> str: ...


def identity_key(entity: Identifiable) -> str:
    """Stable key for a player: saved id when present, else the lowercased name.

    Temporary players and match snapshots of unsaved players only share a name,
    so the name fallback is what correlates them across records.
    """
    if entity.id is not None:
        return f"id-{entity.id}"
    return f"name-{entity.name.lower()}"


def is_same_player(a: Identifiable, b: Identifiable) -> bool:
    return identity_key(a) == identity_key(b) and a.name == b.name


__all__ = ["Identifiable", "identity_key", "is_same_player"]
