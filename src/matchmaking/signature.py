"""Content signature for shared team line-ups."""

from __future__ import annotations

import hashlib
from collections.abc import Sequence

from matchmaking.common import Player, TeamAssignment

SIGNATURE_VERSION = "v1"


def _format_side(team: Sequence[Player]) -> str:
    return ",".join(
        f"{player.id if player.id is not None else player.name}:{player.skill}" for player in team
    )


def signature_payload(
    assignment: TeamAssignment,
    *,
    game: str | None = None,
    map_name: str | None = None,
) -> str:
    return "|".join(
        [
            f"A={_format_side(assignment.team_a)}",
            f"B={_format_side(assignment.team_b)}",
            f"game={game or 'none'}",
            f"map={map_name or 'none'}",
        ]
    )


def team_share_signature(
    assignment: TeamAssignment,
    *,
    game: str | None = None,
    map_name: str | None = None,
) -> str:
    """Stable signature used to award sharing a given line-up only once."""
    payload = signature_payload(assignment, game=game, map_name=map_name)
    digest = hashlib.sha256(payload.encode("utf-8")).hexdigest()
    return f"{SIGNATURE_VERSION}-{digest}"


__all__ = ["SIGNATURE_VERSION", "signature_payload", "team_share_signature"]
