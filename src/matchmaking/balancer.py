"""Randomized two-team balancing and manual roster edits."""

from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass

from matchmaking.common import Player, Side, TeamAssignment, TeamPlayer
from matchmaking.identity import is_same_player

DEFAULT_TRIALS = 120
DEFAULT_FAIRNESS_THRESHOLD = 3.0


@dataclass(frozen=True)
class BalancerParameters:
    trials: int = DEFAULT_TRIALS
    fairness_threshold: float = DEFAULT_FAIRNESS_THRESHOLD


@dataclass(frozen=True)
class TeamStats:
    total_skill: float
    average_skill: float


@dataclass(frozen=True)
class FairnessReport:
    """Advisory skill-gap check; never blocks saving a match."""

    ready: bool
    difference: float
    unfair: bool


def player_value(player: Player) -> float:
    """Momentum-aware skill when annotated, raw skill otherwise."""
    effective_skill = getattr(player, "effective_skill", None)
    if effective_skill is not None:
        return effective_skill
    return player.skill


def _sum_skill(team: Sequence[Player]) -> float:
    return sum(player_value(player) for player in team)


def balance_teams(
    players: Sequence[TeamPlayer],
    players_per_team: int,
    *,
    trials: int = DEFAULT_TRIALS,
    rng: random.Random | None = None,
) -> TeamAssignment:
    """Split the pool into two equal teams with a small skill-sum gap.

    Monte Carlo search: each trial shuffles the pool, takes the first
    `2 * players_per_team` players and halves them. The first split reaching the
    smallest observed gap is kept. This converges near the optimum for small
    pools but is a heuristic; it is not guaranteed to find the best partition.

    Returns the empty assignment when the pool is too small or
    `players_per_team` is not positive. At least one trial always runs.
    """
    required = players_per_team * 2
    if players_per_team < 1 or len(players) < required:
        return TeamAssignment.empty()

    source = rng if rng is not None else random.Random()
    best = TeamAssignment.empty()
    best_diff = float("inf")

    for _ in range(max(1, trials)):
        shuffled = list(players)
        source.shuffle(shuffled)
        team_a = shuffled[:players_per_team]
        team_b = shuffled[players_per_team:required]
        diff = abs(_sum_skill(team_a) - _sum_skill(team_b))
        if diff < best_diff:
            best = TeamAssignment(team_a=team_a, team_b=team_b)
            best_diff = diff

    return best


def team_stats(team: Sequence[Player]) -> TeamStats:
    if not team:
        return TeamStats(total_skill=0.0, average_skill=0.0)
    total = _sum_skill(team)
    return TeamStats(total_skill=total, average_skill=round(total / len(team), 2))


def evaluate_fairness(
    assignment: TeamAssignment,
    players_per_team: int,
    *,
    threshold: float = DEFAULT_FAIRNESS_THRESHOLD,
) -> FairnessReport:
    if not assignment.is_ready(players_per_team):
        return FairnessReport(ready=False, difference=0.0, unfair=False)

    difference = abs(
        team_stats(assignment.team_a).total_skill - team_stats(assignment.team_b).total_skill
    )
    return FairnessReport(ready=True, difference=difference, unfair=difference > threshold)


def _index_of(team: Sequence[Player], player: Player) -> int:
    for index, member in enumerate(team):
        if is_same_player(member, player):
            return index
    return -1


def move_player(
    assignment: TeamAssignment,
    player: TeamPlayer,
    source: Side,
    destination: Side,
    players_per_team: int,
) -> TeamAssignment:
    """Move one player to the end of the other side if it has room."""
    if source is destination:
        return assignment
    if len(assignment.side(destination)) >= players_per_team:
        return assignment
    if _index_of(assignment.side(source), player) == -1:
        return assignment

    updated = assignment.copy()
    source_team = updated.side(source)
    source_team[:] = [member for member in source_team if not is_same_player(member, player)]
    updated.side(destination).append(player)
    return updated


def drop_player(
    assignment: TeamAssignment,
    player: TeamPlayer,
    source: Side,
    target: Side,
    players_per_team: int,
    *,
    target_player: TeamPlayer | None = None,
) -> TeamAssignment:
    """Drag-and-drop edit of a generated assignment.

    Dropping onto the same side reorders onto `target_player`. Dropping onto the
    other side inserts at the target player's position; when that side is full
    the target player is displaced back into the mover's old slot. A drop on a
    full side without a target player is rejected.
    """
    updated = assignment.copy()
    source_team = updated.side(source)
    target_team = updated.side(target)

    source_index = _index_of(source_team, player)
    if source_index == -1:
        return assignment

    if source is target:
        if target_player is None:
            return assignment
        target_index = _index_of(target_team, target_player)
        if target_index == -1 or target_index == source_index:
            return assignment
        moving = target_team.pop(source_index)
        target_team.insert(target_index, moving)
        return updated

    if len(target_team) >= players_per_team and target_player is None:
        return assignment

    moving = source_team.pop(source_index)
    target_index = len(target_team)
    if target_player is not None:
        found = _index_of(target_team, target_player)
        if found != -1:
            target_index = found

    displaced: TeamPlayer | None = None
    if len(target_team) >= players_per_team:
        if target_index >= len(target_team):
            return assignment
        displaced = target_team.pop(target_index)

    target_team.insert(min(target_index, len(target_team)), moving)
    if displaced is not None:
        source_team.insert(min(source_index, len(source_team)), displaced)
    return updated


def swap_players(
    assignment: TeamAssignment,
    player: TeamPlayer,
    target_player: TeamPlayer,
    source: Side,
    players_per_team: int,
) -> TeamAssignment:
    """Exchange two players across sides, keeping both slot positions."""
    return drop_player(
        assignment,
        player,
        source,
        source.other(),
        players_per_team,
        target_player=target_player,
    )


def sanitize_team(team: Sequence[Player]) -> list[Player]:
    """Strip momentum annotations before persisting a roster snapshot."""
    return [
        Player(
            name=player.name,
            skill=player.skill,
            id=player.id,
            temporary=bool(player.temporary),
        )
        for player in team
    ]


__all__ = [
    "BalancerParameters",
    "DEFAULT_FAIRNESS_THRESHOLD",
    "DEFAULT_TRIALS",
    "FairnessReport",
    "TeamStats",
    "balance_teams",
    "drop_player",
    "evaluate_fairness",
    "move_player",
    "player_value",
    "sanitize_team",
    "swap_players",
    "team_stats",
]
