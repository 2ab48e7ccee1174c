"""Matchmaking and progression engine."""

from matchmaking.balancer import (
    BalancerParameters,
    FairnessReport,
    TeamStats,
    balance_teams,
    drop_player,
    evaluate_fairness,
    move_player,
    swap_players,
    team_stats,
)
from matchmaking.common import (
    Match,
    MatchStatus,
    Player,
    Side,
    TeamAssignment,
    TeamPlayer,
    Winner,
)
from matchmaking.identity import identity_key, is_same_player
from matchmaking.leveling import LevelState, LevelingParameters, calculate_level_state
from matchmaking.maps import MapParameters, MapPreferences, pick_map, pick_map_for_game
from matchmaking.momentum import MomentumParameters, annotate_players, calculate_momentum

__all__ = [
    "BalancerParameters",
    "FairnessReport",
    "LevelState",
    "LevelingParameters",
    "MapParameters",
    "MapPreferences",
    "Match",
    "MatchStatus",
    "MomentumParameters",
    "Player",
    "Side",
    "TeamAssignment",
    "TeamPlayer",
    "TeamStats",
    "Winner",
    "annotate_players",
    "balance_teams",
    "calculate_level_state",
    "calculate_momentum",
    "drop_player",
    "evaluate_fairness",
    "identity_key",
    "is_same_player",
    "move_player",
    "pick_map",
    "pick_map_for_game",
    "swap_players",
    "team_stats",
]
