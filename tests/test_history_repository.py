"""Tests for the SQLAlchemy match-history and preference helpers."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime, timedelta

import pytest
from sqlalchemy import text
from sqlalchemy.orm import Session

from db import create_db_engine, create_session_factory
from matchmaking.common import MatchStatus, TeamAssignment, TeamPlayer, Winner
from matchmaking.maps import MapPreferences, recent_map_by_game, toggle_ban
from matchmaking.momentum import calculate_momentum
from matchmaking.rewards import match_completion_events, player_removal_event
from repositories.history import (
    ensure_schema,
    fetch_map_preferences,
    fetch_match_history,
    fetch_xp_total,
    insert_match,
    record_xp_events,
    save_map_preferences,
)

NOW = datetime(2026, 1, 1, 12, 0, 0)


@pytest.fixture
def session() -> Iterator[Session]:
    engine = create_db_engine("sqlite://")
    ensure_schema(engine)
    session_factory = create_session_factory(engine)
    with session_factory() as db_session:
        yield db_session
    engine.dispose()


def _assignment() -> TeamAssignment:
    return TeamAssignment(
        team_a=[
            TeamPlayer(name="Alice", skill=6, id=1, momentum=0.5, effective_skill=6.5),
            TeamPlayer(name="Guest", skill=4, temporary=True),
        ],
        team_b=[
            TeamPlayer(name="Bob", skill=5, id=2),
            TeamPlayer(name="Cara", skill=5, id=3),
        ],
    )


def test_insert_and_fetch_match(session: Session) -> None:
    inserted = insert_match(
        session,
        user_id="u1",
        assignment=_assignment(),
        team_a_score=13,
        team_b_score=9,
        game="Valorant",
        map_name="Bind",
        created_at=NOW - timedelta(minutes=30),
    )
    session.commit()

    matches = fetch_match_history(session, user_id="u1")

    assert len(matches) == 1
    match = matches[0]
    assert match.match_id == inserted.match_id
    assert match.winner is Winner.TEAM_A
    assert match.status is MatchStatus.COMPLETED
    assert [player.name for player in match.team_a] == ["Alice", "Guest"]
    assert match.team_a[1].id is None
    assert match.team_a[1].temporary
    assert not hasattr(match.team_a[0], "effective_skill")
    assert match.game == "Valorant"
    assert match.map_name == "Bind"


def test_history_feeds_momentum_and_recent_maps(session: Session) -> None:
    insert_match(
        session,
        user_id="u1",
        assignment=_assignment(),
        team_a_score=2,
        team_b_score=1,
        game="Valorant",
        map_name="Haven",
        created_at=NOW - timedelta(hours=1),
    )
    insert_match(
        session,
        user_id="u1",
        assignment=_assignment(),
        team_a_score=5,
        team_b_score=3,
        game="Valorant",
        map_name="Bind",
        status=MatchStatus.CANCELED,
        created_at=NOW - timedelta(minutes=5),
    )
    insert_match(
        session,
        user_id="u2",
        assignment=_assignment(),
        team_a_score=0,
        team_b_score=1,
        created_at=NOW - timedelta(minutes=5),
    )
    session.commit()

    matches = fetch_match_history(session, user_id="u1")
    assert [match.status for match in matches] == [MatchStatus.CANCELED, MatchStatus.COMPLETED]
    assert matches[0].team_a_score == 0
    assert matches[0].winner is Winner.NONE

    momentum = calculate_momentum(matches, now=NOW)
    assert momentum == {
        "id-1": pytest.approx(0.5),
        "name-guest": pytest.approx(0.5),
        "id-2": pytest.approx(-0.5),
        "id-3": pytest.approx(-0.5),
    }
    assert recent_map_by_game(matches, now=NOW)["Valorant"].map_name == "Haven"
    assert len(fetch_match_history(session)) == 3
    assert len(fetch_match_history(session, limit=1)) == 1


def test_corrupt_rows_do_not_break_history(session: Session) -> None:
    session.execute(
        text(
            "INSERT INTO matches (user_id, team_a, team_b, team_a_score, team_b_score, "
            "winner, status, created_at) VALUES "
            "('u1', 'not json', '[{\"name\": \"Bob\", \"skill\": 5}, {\"skill\": 3}]', "
            "1, 0, 'unknown', 'completed', 'never')"
        )
    )
    session.commit()

    matches = fetch_match_history(session, user_id="u1")

    assert len(matches) == 1
    assert matches[0].team_a == ()
    assert [player.name for player in matches[0].team_b] == ["Bob"]
    assert matches[0].winner is Winner.NONE
    assert calculate_momentum(matches, now=NOW) == {}


def test_map_preferences_round_trip(session: Session) -> None:
    assert fetch_map_preferences(session, "net").banned == {}

    preferences = toggle_ban(MapPreferences(), "Valorant", "Bind")
    save_map_preferences(session, "net", preferences)
    session.commit()
    assert fetch_map_preferences(session, "net") == preferences

    cleared = toggle_ban(preferences, "Valorant", "Bind")
    save_map_preferences(session, "net", cleared)
    session.commit()
    assert fetch_map_preferences(session, "net").banned == {}


def test_invalid_stored_preferences_fall_back_to_defaults(session: Session) -> None:
    session.execute(
        text("INSERT INTO map_preferences (network_id, preferences) VALUES ('net', '{oops')")
    )
    session.commit()
    assert fetch_map_preferences(session, "net") == MapPreferences()


def test_record_xp_events_is_idempotent_per_context(session: Session) -> None:
    assert fetch_xp_total(session, "u1") == 0

    first = record_xp_events(session, "u1", match_completion_events(1, map_selection=True))
    session.commit()
    assert first.total == 70
    assert first.delta == 70

    repeat = record_xp_events(session, "u1", match_completion_events(1, map_selection=True))
    session.commit()
    assert repeat.total == 70
    assert repeat.delta == 0
    assert repeat.breakdown == ()

    penalty = record_xp_events(session, "u1", [player_removal_event(4)])
    session.commit()
    assert penalty.total == 65
    assert fetch_xp_total(session, "u1") == 65
