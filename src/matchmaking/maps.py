"""Map bans, recent-map history and non-repeating map picks."""

from __future__ import annotations

import random
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from matchmaking.common import Match, is_within_window, parse_event_time, utc_now
from matchmaking.map_pool import maps_for_game


@dataclass(frozen=True)
class MapParameters:
    repeat_window_hours: float = 4.0

    @property
    def repeat_window(self) -> timedelta:
        return timedelta(hours=self.repeat_window_hours)


@dataclass(frozen=True)
class MapPreferences:
    """Banned map names per game."""

    banned: dict[str, frozenset[str]] = field(default_factory=dict)

    def banned_for(self, game: str) -> frozenset[str]:
        return self.banned.get(game, frozenset())

    def as_json(self) -> dict[str, dict[str, list[str]]]:
        return {"banned": {game: sorted(maps) for game, maps in self.banned.items()}}


@dataclass(frozen=True)
class RecentMap:
    map_name: str
    played_at: datetime


def normalize_preferences(raw: object) -> MapPreferences:
    """Build preferences from untrusted payload data, dropping anything malformed."""
    if not isinstance(raw, Mapping):
        return MapPreferences()
    banned_raw = raw.get("banned")
    if not isinstance(banned_raw, Mapping):
        return MapPreferences()

    banned: dict[str, frozenset[str]] = {}
    for game, maps in banned_raw.items():
        if not isinstance(maps, (list, tuple)):
            continue
        filtered = frozenset(
            name for name in maps if isinstance(name, str) and name.strip()
        )
        if filtered:
            banned[str(game)] = filtered
    return MapPreferences(banned=banned)


def toggle_ban(preferences: MapPreferences, game: str, map_name: str) -> MapPreferences:
    banned_set = set(preferences.banned_for(game))
    if map_name in banned_set:
        banned_set.remove(map_name)
    else:
        banned_set.add(map_name)

    banned = dict(preferences.banned)
    if banned_set:
        banned[game] = frozenset(banned_set)
    else:
        banned.pop(game, None)
    return MapPreferences(banned=banned)


def allowed_maps(pool: Sequence[str], banned: Iterable[str]) -> list[str]:
    banned_set = set(banned)
    return [map_name for map_name in pool if map_name not in banned_set]


def recent_map_by_game(
    matches: Iterable[Match],
    *,
    now: datetime | None = None,
    window: timedelta = MapParameters().repeat_window,
) -> dict[str, RecentMap]:
    """Newest map per game among completed matches inside the trailing window."""
    current_time = now if now is not None else utc_now()
    recent: dict[str, RecentMap] = {}

    for match in matches:
        if not match.game or not match.map_name or match.is_canceled:
            continue
        played_at = parse_event_time(match.created_at)
        if played_at is None or not is_within_window(played_at, current_time, window):
            continue
        existing = recent.get(match.game)
        if existing is None or played_at > existing.played_at:
            recent[match.game] = RecentMap(map_name=match.map_name, played_at=played_at)

    return recent


def pick_map(
    pool: Sequence[str],
    banned: Iterable[str],
    *,
    recent_map: str | None = None,
    extra_exclude: Iterable[str | None] = (),
    rng: random.Random | None = None,
) -> str | None:
    """Pick a random allowed map, avoiding the recent map when possible.

    Returns None when every map in the pool is banned. When excluding the recent
    map and `extra_exclude` leaves nothing, a repeat is accepted instead.
    """
    options = allowed_maps(pool, banned)
    if not options:
        return None

    exclusions = {entry for entry in extra_exclude if entry}
    if recent_map:
        exclusions.add(recent_map)

    preferred = [map_name for map_name in options if map_name not in exclusions]
    candidates = preferred or options
    source = rng if rng is not None else random.Random()
    return source.choice(candidates)


def pick_map_for_game(
    game: str,
    *,
    preferences: MapPreferences,
    matches: Iterable[Match] = (),
    now: datetime | None = None,
    params: MapParameters = MapParameters(),
    extra_exclude: Iterable[str | None] = (),
    rng: random.Random | None = None,
    pool: Sequence[str] | None = None,
) -> str | None:
    recent = recent_map_by_game(matches, now=now, window=params.repeat_window).get(game)
    return pick_map(
        maps_for_game(game) if pool is None else pool,
        preferences.banned_for(game),
        recent_map=recent.map_name if recent is not None else None,
        extra_exclude=extra_exclude,
        rng=rng,
    )


__all__ = [
    "MapParameters",
    "MapPreferences",
    "RecentMap",
    "allowed_maps",
    "normalize_preferences",
    "pick_map",
    "pick_map_for_game",
    "recent_map_by_game",
    "toggle_ban",
]
