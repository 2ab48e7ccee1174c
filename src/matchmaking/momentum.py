"""Windowed win/loss momentum for effective skill."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta

from matchmaking.common import (
    Match,
    Player,
    TeamPlayer,
    Winner,
    is_within_window,
    parse_event_time,
    utc_now,
)
from matchmaking.identity import identity_key


@dataclass(frozen=True)
class MomentumParameters:
    window_hours: float = 4.0
    step: float = 0.5

    @property
    def window(self) -> timedelta:
        return timedelta(hours=self.window_hours)


def _apply_delta(momentum: dict[str, float], team: Iterable[Player], delta: float) -> None:
    for player in team:
        key = identity_key(player)
        momentum[key] = momentum.get(key, 0.0) + delta


def calculate_momentum(
    matches: Iterable[Match],
    *,
    now: datetime | None = None,
    params: MomentumParameters = MomentumParameters(),
    filter_game: str | None = None,
) -> dict[str, float]:
    """Return momentum per player key from matches inside the trailing window.

    The window is a hard cutoff rather than a decay: a match counts fully or not
    at all. Winners gain `step`, losers lose `step`, and values accumulate without
    a cap. Canceled matches, undecided matches and matches with unparseable
    timestamps contribute nothing. Players absent from the result have 0.
    """
    current_time = now if now is not None else utc_now()
    window = params.window
    momentum: dict[str, float] = {}

    for match in matches:
        if filter_game and match.game != filter_game:
            continue
        if match.is_canceled:
            continue

        played_at = parse_event_time(match.created_at)
        if played_at is None or not is_within_window(played_at, current_time, window):
            continue

        winner = Winner.parse(match.winner)
        if winner is Winner.TEAM_A:
            _apply_delta(momentum, match.team_a, params.step)
            _apply_delta(momentum, match.team_b, -params.step)
        elif winner is Winner.TEAM_B:
            _apply_delta(momentum, match.team_b, params.step)
            _apply_delta(momentum, match.team_a, -params.step)

    return {key: round(value, 2) for key, value in momentum.items()}


def annotate_player(player: Player, momentum_map: dict[str, float]) -> TeamPlayer:
    momentum = momentum_map.get(identity_key(player), 0.0)
    return TeamPlayer(
        name=player.name,
        skill=player.skill,
        id=player.id,
        temporary=player.temporary,
        momentum=momentum,
        effective_skill=round(player.skill + momentum, 2),
    )


def annotate_players(
    players: Sequence[Player],
    momentum_map: dict[str, float],
) -> list[TeamPlayer]:
    """Attach momentum and effective skill to every player in roster order."""
    return [annotate_player(player, momentum_map) for player in players]


__all__ = [
    "MomentumParameters",
    "annotate_player",
    "annotate_players",
    "calculate_momentum",
]
