"""Shared types for matchmaking calculators."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import Enum


class Winner(str, Enum):
    """Decided side of a stored match."""

    TEAM_A = "teamA"
    TEAM_B = "teamB"
    NONE = "none"

    @classmethod
    def parse(cls, value: object) -> Winner:
        if isinstance(value, Winner):
            return value
        if value == cls.TEAM_A.value:
            return cls.TEAM_A
        if value == cls.TEAM_B.value:
            return cls.TEAM_B
        # Older rows stored "unknown" for draws and unscored matches.
        return cls.NONE


class MatchStatus(str, Enum):
    COMPLETED = "completed"
    CANCELED = "canceled"

    @classmethod
    def parse(cls, value: object) -> MatchStatus:
        if value == cls.CANCELED.value:
            return cls.CANCELED
        return cls.COMPLETED


class Side(str, Enum):
    TEAM_A = "teamA"
    TEAM_B = "teamB"

    def other(self) -> Side:
        return Side.TEAM_B if self is Side.TEAM_A else Side.TEAM_A


@dataclass(frozen=True)
class Player:
    """Rated roster entry, either saved (stable id) or temporary."""

    name: str
    skill: int
    id: int | str | None = None
    temporary: bool = False


@dataclass(frozen=True)
class TeamPlayer(Player):
    """Player annotated with per-invocation momentum."""

    momentum: float | None = None
    effective_skill: float | None = None


@dataclass(frozen=True)
class Match:
    """Historical match snapshot as supplied by the match-history store."""

    team_a: tuple[Player, ...]
    team_b: tuple[Player, ...]
    team_a_score: int = 0
    team_b_score: int = 0
    winner: Winner = Winner.NONE
    created_at: datetime | str | None = None
    game: str | None = None
    map_name: str | None = None
    status: MatchStatus = MatchStatus.COMPLETED
    match_id: int | None = None

    @property
    def is_canceled(self) -> bool:
        return MatchStatus.parse(self.status) is MatchStatus.CANCELED


@dataclass
class TeamAssignment:
    """Two ordered team rosters."""

    team_a: list[TeamPlayer] = field(default_factory=list)
    team_b: list[TeamPlayer] = field(default_factory=list)

    @classmethod
    def empty(cls) -> TeamAssignment:
        return cls(team_a=[], team_b=[])

    def is_empty(self) -> bool:
        return not self.team_a and not self.team_b

    def side(self, side: Side) -> list[TeamPlayer]:
        return self.team_a if side is Side.TEAM_A else self.team_b

    def is_ready(self, players_per_team: int) -> bool:
        """Both sides are filled exactly to the configured size."""
        return len(self.team_a) == players_per_team and len(self.team_b) == players_per_team

    def copy(self) -> TeamAssignment:
        return TeamAssignment(team_a=list(self.team_a), team_b=list(self.team_b))


def winner_from_scores(team_a_score: int, team_b_score: int) -> Winner:
    if team_a_score == team_b_score:
        return Winner.NONE
    return Winner.TEAM_A if team_a_score > team_b_score else Winner.TEAM_B


def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def utc_now() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


def parse_event_time(value: datetime | str | None) -> datetime | None:
    """Parse a stored timestamp into naive UTC, or None when unusable."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return _to_naive_utc(value)
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return _to_naive_utc(parsed)


def is_within_window(event_time: datetime, now: datetime, window: timedelta) -> bool:
    """Hard cutoff: an event exactly `window` old still counts."""
    return _to_naive_utc(now) - event_time <= window


__all__ = [
    "Match",
    "MatchStatus",
    "Player",
    "Side",
    "TeamAssignment",
    "TeamPlayer",
    "Winner",
    "is_within_window",
    "parse_event_time",
    "utc_now",
    "winner_from_scores",
]
