"""Match-history, map-preference and experience persistence helpers."""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Any

from sqlalchemy import (
    Column,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
    insert,
    select,
    update,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from matchmaking.balancer import sanitize_team
from matchmaking.common import (
    Match,
    MatchStatus,
    Player,
    TeamAssignment,
    Winner,
    utc_now,
    winner_from_scores,
)
from matchmaking.maps import MapPreferences, normalize_preferences
from matchmaking.rewards import XpBreakdownEntry, XpEvent, XpSummary, apply_xp_events

_metadata = MetaData()

_matches = Table(
    "matches",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", String, nullable=False),
    Column("team_a", Text, nullable=False),
    Column("team_b", Text, nullable=False),
    Column("team_a_score", Integer, nullable=False, default=0),
    Column("team_b_score", Integer, nullable=False, default=0),
    Column("winner", String, nullable=False, default=Winner.NONE.value),
    Column("game", String, nullable=True),
    Column("map_name", String, nullable=True),
    Column("status", String, nullable=False, default=MatchStatus.COMPLETED.value),
    Column("created_at", String, nullable=False),
)

_map_preferences = Table(
    "map_preferences",
    _metadata,
    Column("network_id", String, primary_key=True),
    Column("preferences", Text, nullable=False),
)

_users = Table(
    "users",
    _metadata,
    Column("id", String, primary_key=True),
    Column("xp_total", Integer, nullable=False, default=0),
)

_xp_events = Table(
    "xp_events",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", String, nullable=False),
    Column("type", String, nullable=False),
    Column("context", String, nullable=False),
    Column("amount", Integer, nullable=False),
    UniqueConstraint("user_id", "context", name="uq_xp_events_user_context"),
)


def ensure_schema(engine: Engine) -> None:
    """Create the collaborator tables if they do not exist yet."""
    _metadata.create_all(engine)


def _player_from_payload(payload: object) -> Player | None:
    if not isinstance(payload, dict):
        return None
    name = payload.get("name")
    skill = payload.get("skill")
    if not isinstance(name, str) or isinstance(skill, bool) or not isinstance(skill, (int, float)):
        return None
    player_id = payload.get("id")
    if not isinstance(player_id, (int, str)) or isinstance(player_id, bool):
        player_id = None
    return Player(
        name=name,
        skill=int(skill),
        id=player_id,
        temporary=bool(payload.get("temporary", False)),
    )


def _decode_roster(raw: str | None) -> tuple[Player, ...]:
    # A corrupt roster only loses that side; the rest of the history stays usable.
    if not raw:
        return ()
    try:
        payload = json.loads(raw)
    except ValueError:
        return ()
    if not isinstance(payload, list):
        return ()
    players = (_player_from_payload(entry) for entry in payload)
    return tuple(player for player in players if player is not None)


def _encode_roster(team: Sequence[Player]) -> str:
    return json.dumps(
        [
            {
                "id": player.id,
                "name": player.name,
                "skill": player.skill,
                "temporary": player.temporary,
            }
            for player in sanitize_team(team)
        ]
    )


def _row_to_match(row: Any) -> Match:
    return Match(
        match_id=int(row.id),
        team_a=_decode_roster(row.team_a),
        team_b=_decode_roster(row.team_b),
        team_a_score=int(row.team_a_score or 0),
        team_b_score=int(row.team_b_score or 0),
        winner=Winner.parse(row.winner),
        created_at=row.created_at,
        game=row.game,
        map_name=row.map_name,
        status=MatchStatus.parse(row.status),
    )


def fetch_match_history(
    session: Session,
    *,
    user_id: str | None = None,
    limit: int | None = None,
) -> list[Match]:
    """Fetch stored matches, newest first."""
    statement = select(_matches).order_by(_matches.c.id.desc())
    if user_id is not None:
        statement = statement.where(_matches.c.user_id == user_id)
    if limit is not None:
        statement = statement.limit(limit)
    return [_row_to_match(row) for row in session.execute(statement)]


def insert_match(
    session: Session,
    *,
    user_id: str,
    assignment: TeamAssignment,
    team_a_score: int = 0,
    team_b_score: int = 0,
    game: str | None = None,
    map_name: str | None = None,
    status: MatchStatus = MatchStatus.COMPLETED,
    created_at: datetime | None = None,
) -> Match:
    """Append one match row; winner is derived from the scores."""
    if status is MatchStatus.CANCELED:
        team_a_score = 0
        team_b_score = 0
    winner = winner_from_scores(team_a_score, team_b_score)
    timestamp = (created_at or utc_now()).isoformat(sep=" ")

    result = session.execute(
        insert(_matches).values(
            user_id=user_id,
            team_a=_encode_roster(assignment.team_a),
            team_b=_encode_roster(assignment.team_b),
            team_a_score=team_a_score,
            team_b_score=team_b_score,
            winner=winner.value,
            game=game,
            map_name=map_name,
            status=status.value,
            created_at=timestamp,
        )
    )
    return Match(
        match_id=int(result.inserted_primary_key[0]),
        team_a=tuple(sanitize_team(assignment.team_a)),
        team_b=tuple(sanitize_team(assignment.team_b)),
        team_a_score=team_a_score,
        team_b_score=team_b_score,
        winner=winner,
        created_at=timestamp,
        game=game,
        map_name=map_name,
        status=status,
    )


def fetch_map_preferences(session: Session, network_id: str) -> MapPreferences:
    raw = session.execute(
        select(_map_preferences.c.preferences).where(_map_preferences.c.network_id == network_id)
    ).scalar_one_or_none()
    if raw is None:
        return MapPreferences()
    try:
        return normalize_preferences(json.loads(raw))
    except ValueError:
        return MapPreferences()


def save_map_preferences(
    session: Session,
    network_id: str,
    preferences: MapPreferences,
) -> MapPreferences:
    normalized = normalize_preferences(preferences.as_json())
    payload = json.dumps(normalized.as_json())
    exists = session.execute(
        select(_map_preferences.c.network_id).where(_map_preferences.c.network_id == network_id)
    ).first()
    if exists is None:
        session.execute(insert(_map_preferences).values(network_id=network_id, preferences=payload))
    else:
        session.execute(
            update(_map_preferences)
            .where(_map_preferences.c.network_id == network_id)
            .values(preferences=payload)
        )
    return normalized


def fetch_xp_total(session: Session, user_id: str) -> int:
    total = session.execute(
        select(_users.c.xp_total).where(_users.c.id == user_id)
    ).scalar_one_or_none()
    return int(total or 0)


def record_xp_events(session: Session, user_id: str, events: Iterable[XpEvent]) -> XpSummary:
    """Apply awards for a user, skipping contexts that were already recorded."""
    if session.execute(select(_users.c.id).where(_users.c.id == user_id)).first() is None:
        session.execute(insert(_users).values(id=user_id, xp_total=0))

    seen = set(
        session.execute(select(_xp_events.c.context).where(_xp_events.c.user_id == user_id)).scalars()
    )
    total = fetch_xp_total(session, user_id)
    starting_total = total
    breakdown: list[XpBreakdownEntry] = []

    for event in events:
        if event.context in seen:
            continue
        summary = apply_xp_events(total, [event])
        session.execute(
            insert(_xp_events).values(
                user_id=user_id,
                type=event.type,
                context=event.context,
                amount=summary.delta,
            )
        )
        seen.add(event.context)
        total = summary.total
        breakdown.extend(summary.breakdown)

    if total != starting_total:
        session.execute(update(_users).where(_users.c.id == user_id).values(xp_total=total))

    return XpSummary(total=total, delta=total - starting_total, breakdown=tuple(breakdown))


__all__ = [
    "ensure_schema",
    "fetch_map_preferences",
    "fetch_match_history",
    "fetch_xp_total",
    "insert_match",
    "record_xp_events",
    "save_map_preferences",
]
