"""Unit tests for randomized team balancing and manual edits."""

from __future__ import annotations

import random

import pytest

from matchmaking.balancer import (
    BalancerParameters,
    balance_teams,
    drop_player,
    evaluate_fairness,
    move_player,
    player_value,
    sanitize_team,
    swap_players,
    team_stats,
)
from matchmaking.common import Player, Side, TeamAssignment, TeamPlayer
from matchmaking.identity import identity_key


def _pool(skills: list[int]) -> list[TeamPlayer]:
    return [
        TeamPlayer(name=f"P{index}", skill=skill, id=index)
        for index, skill in enumerate(skills, start=1)
    ]


def _total(team: list[TeamPlayer]) -> float:
    return sum(player_value(player) for player in team)


def test_balancer_parameters_defaults() -> None:
    params = BalancerParameters()
    assert params.trials == 120
    assert params.fairness_threshold == pytest.approx(3.0)


def test_small_pool_returns_empty_assignment() -> None:
    assignment = balance_teams(_pool([5, 5, 5]), 2, rng=random.Random(1))
    assert assignment.team_a == []
    assert assignment.team_b == []
    assert assignment.is_empty()


@pytest.mark.parametrize("seed", range(15))
def test_sides_are_full_and_disjoint(seed: int) -> None:
    rng = random.Random(seed)
    pool = _pool([rng.randint(0, 10) for _ in range(13)])

    assignment = balance_teams(pool, 5, rng=random.Random(seed))

    assert len(assignment.team_a) == 5
    assert len(assignment.team_b) == 5
    keys_a = {identity_key(player) for player in assignment.team_a}
    keys_b = {identity_key(player) for player in assignment.team_b}
    assert len(keys_a) == 5
    assert len(keys_b) == 5
    assert keys_a.isdisjoint(keys_b)
    assert keys_a | keys_b <= {identity_key(player) for player in pool}


def test_equal_skills_always_balance_perfectly() -> None:
    pool = _pool([5] * 10)
    assignment = balance_teams(pool, 5, rng=random.Random(3))

    report = evaluate_fairness(assignment, 5)
    assert report.ready
    assert report.difference == pytest.approx(0.0)
    assert not report.unfair


def test_search_finds_the_best_split_for_a_small_pool() -> None:
    assignment = balance_teams(_pool([10, 9, 1, 1]), 2, rng=random.Random(7))
    assert abs(_total(assignment.team_a) - _total(assignment.team_b)) == pytest.approx(1.0)


def test_effective_skill_is_preferred_over_raw_skill() -> None:
    pool = [
        TeamPlayer(name="Hot", skill=5, id=1, momentum=2.0, effective_skill=7.0),
        TeamPlayer(name="Cold", skill=5, id=2, momentum=-2.0, effective_skill=3.0),
        TeamPlayer(name="Even1", skill=5, id=3),
        TeamPlayer(name="Even2", skill=5, id=4),
    ]
    assignment = balance_teams(pool, 2, rng=random.Random(11))

    names_a = {player.name for player in assignment.team_a}
    assert names_a in ({"Hot", "Cold"}, {"Even1", "Even2"})
    assert _total(assignment.team_a) == pytest.approx(_total(assignment.team_b))


def test_player_value_falls_back_to_skill() -> None:
    assert player_value(Player(name="Raw", skill=4)) == 4
    assert player_value(TeamPlayer(name="Annotated", skill=4, effective_skill=5.5)) == 5.5


def test_non_positive_team_size_returns_empty_assignment() -> None:
    assert balance_teams(_pool([5, 5, 5]), 0, rng=random.Random(1)).is_empty()
    assert balance_teams(_pool([5, 5]), -1, rng=random.Random(1)).is_empty()


def test_non_positive_trials_still_runs_one_shuffle() -> None:
    pool = _pool([8, 6, 4, 2])
    assignment = balance_teams(pool, 2, trials=0, rng=random.Random(3))

    replay = list(pool)
    random.Random(3).shuffle(replay)
    assert assignment == TeamAssignment(team_a=replay[:2], team_b=replay[2:4])


def test_first_split_reaching_the_minimum_is_kept() -> None:
    # Every split of an all-equal pool ties at zero, so only the first may win.
    pool = _pool([5, 5, 5, 5, 5, 5])
    assignment = balance_teams(pool, 3, trials=50, rng=random.Random(9))

    replay_rng = random.Random(9)
    first = list(pool)
    replay_rng.shuffle(first)

    assert assignment.team_a == first[:3]
    assert assignment.team_b == first[3:6]


def test_same_seed_gives_same_assignment() -> None:
    pool = _pool([8, 7, 6, 5, 4, 3, 2, 1])
    first = balance_teams(pool, 3, rng=random.Random(42))
    second = balance_teams(pool, 3, rng=random.Random(42))
    assert first == second


def test_team_stats() -> None:
    assert team_stats([]).total_skill == pytest.approx(0.0)
    assert team_stats([]).average_skill == pytest.approx(0.0)

    stats = team_stats(_pool([3, 4, 4]))
    assert stats.total_skill == pytest.approx(11.0)
    assert stats.average_skill == pytest.approx(3.67)


def test_fairness_requires_ready_teams() -> None:
    assignment = TeamAssignment(team_a=_pool([10, 10]), team_b=_pool([1]))
    report = evaluate_fairness(assignment, 2)
    assert not report.ready
    assert not report.unfair
    assert report.difference == pytest.approx(0.0)


def test_fairness_threshold_is_exclusive() -> None:
    at_threshold = TeamAssignment(team_a=_pool([6, 5]), team_b=_pool([4, 4]))
    over_threshold = TeamAssignment(team_a=_pool([7, 5]), team_b=_pool([4, 4]))

    assert not evaluate_fairness(at_threshold, 2).unfair
    report = evaluate_fairness(over_threshold, 2)
    assert report.unfair
    assert report.difference == pytest.approx(4.0)
    assert not evaluate_fairness(over_threshold, 2, threshold=5.0).unfair


def _named(name: str, skill: int = 5, player_id: int | None = None) -> TeamPlayer:
    return TeamPlayer(name=name, skill=skill, id=player_id)


def test_move_player_to_side_with_room() -> None:
    a, b, c = _named("A", player_id=1), _named("B", player_id=2), _named("C", player_id=3)
    assignment = TeamAssignment(team_a=[a, b], team_b=[c])

    moved = move_player(assignment, b, Side.TEAM_A, Side.TEAM_B, 2)

    assert moved.team_a == [a]
    assert moved.team_b == [c, b]
    assert assignment.team_a == [a, b]


def test_move_player_rejected_when_destination_full() -> None:
    a, b, c, d = (_named(name, player_id=index) for index, name in enumerate("ABCD"))
    assignment = TeamAssignment(team_a=[a, b], team_b=[c, d])

    assert move_player(assignment, a, Side.TEAM_A, Side.TEAM_B, 2) is assignment


def test_drop_on_full_side_swaps_with_target() -> None:
    a, b, c, d = (_named(name, player_id=index) for index, name in enumerate("ABCD"))
    assignment = TeamAssignment(team_a=[a, b], team_b=[c, d])

    swapped = drop_player(assignment, b, Side.TEAM_A, Side.TEAM_B, 2, target_player=c)

    assert swapped.team_a == [a, c]
    assert swapped.team_b == [b, d]


def test_swap_players_keeps_slots() -> None:
    a, b, c, d = (_named(name, player_id=index) for index, name in enumerate("ABCD"))
    assignment = TeamAssignment(team_a=[a, b], team_b=[c, d])

    swapped = swap_players(assignment, a, d, Side.TEAM_A, 2)

    assert swapped.team_a == [d, b]
    assert swapped.team_b == [c, a]


def test_drop_on_full_side_without_target_is_rejected() -> None:
    a, b, c, d = (_named(name, player_id=index) for index, name in enumerate("ABCD"))
    assignment = TeamAssignment(team_a=[a, b], team_b=[c, d])

    assert drop_player(assignment, a, Side.TEAM_A, Side.TEAM_B, 2) is assignment


def test_drop_with_unknown_target_on_full_side_is_rejected() -> None:
    a, b, c, d = (_named(name, player_id=index) for index, name in enumerate("ABCD"))
    stranger = _named("Z", player_id=99)
    assignment = TeamAssignment(team_a=[a, b], team_b=[c, d])

    result = drop_player(assignment, a, Side.TEAM_A, Side.TEAM_B, 2, target_player=stranger)
    assert result is assignment


def test_drop_inserts_before_target_when_room() -> None:
    a, b, c = _named("A", player_id=1), _named("B", player_id=2), _named("C", player_id=3)
    assignment = TeamAssignment(team_a=[a, b], team_b=[c])

    result = drop_player(assignment, b, Side.TEAM_A, Side.TEAM_B, 2, target_player=c)

    assert result.team_a == [a]
    assert result.team_b == [b, c]


def test_drop_within_side_reorders() -> None:
    a, b, c = _named("A", player_id=1), _named("B", player_id=2), _named("C", player_id=3)
    assignment = TeamAssignment(team_a=[a, b, c], team_b=[])

    result = drop_player(assignment, a, Side.TEAM_A, Side.TEAM_A, 3, target_player=c)

    assert result.team_a == [b, c, a]
    assert drop_player(assignment, a, Side.TEAM_A, Side.TEAM_A, 3) is assignment


def test_unsaved_players_are_matched_by_key_and_name() -> None:
    temp = _named("Guest")
    other = _named("guest")
    assignment = TeamAssignment(team_a=[temp, other], team_b=[])

    moved = move_player(assignment, temp, Side.TEAM_A, Side.TEAM_B, 2)

    assert moved.team_a == [other]
    assert moved.team_b == [temp]


def test_sanitize_team_drops_momentum() -> None:
    annotated = [TeamPlayer(name="A", skill=5, id=1, momentum=1.0, effective_skill=6.0)]
    sanitized = sanitize_team(annotated)
    assert sanitized == [Player(name="A", skill=5, id=1, temporary=False)]
    assert type(sanitized[0]) is Player
