#!/usr/bin/env python3
"""Team generation, map picks and progression commands backed by a match database."""

from __future__ import annotations

import random
import sys
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import DEFAULT_DB_URL, create_db_engine, create_session_factory
from matchmaking.balancer import balance_teams, evaluate_fairness, team_stats
from matchmaking.common import MatchStatus, TeamAssignment, TeamPlayer
from matchmaking.config import EngineConfig, load_engine_config
from matchmaking.leveling import calculate_level_state
from matchmaking.map_pool import GAME_TITLES, maps_for_game
from matchmaking.maps import pick_map_for_game, recent_map_by_game, toggle_ban
from matchmaking.momentum import annotate_players, calculate_momentum
from matchmaking.rewards import match_completion_events
from matchmaking.signature import team_share_signature
from repositories.history import (
    ensure_schema,
    fetch_map_preferences,
    fetch_match_history,
    fetch_xp_total,
    insert_match,
    record_xp_events,
    save_map_preferences,
)

DEFAULT_CONFIG = ROOT_DIR / "configs" / "engine" / "default.toml"

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Balanced team generation and progression commands.",
)

DbUrlOption = Annotated[
    str,
    typer.Option("--db-url", help="Database URL. Defaults to a local SQLite file."),
]
ConfigOption = Annotated[
    Path,
    typer.Option("--config", help="Engine TOML config file."),
]
UserOption = Annotated[
    str,
    typer.Option("--user-id", help="Owner of the match history and experience total."),
]


def _load_config(config_path: Path) -> EngineConfig:
    try:
        return load_engine_config(config_path)
    except (FileNotFoundError, ValueError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--config") from exc


def _open_sessions(db_url: str):
    engine = create_db_engine(db_url)
    ensure_schema(engine)
    return create_session_factory(engine)


def _parse_player(raw: str, param_hint: str) -> TeamPlayer:
    """Parse NAME:SKILL or NAME:SKILL:ID."""
    parts = raw.split(":")
    if len(parts) not in (2, 3) or not parts[0].strip():
        raise typer.BadParameter(
            f"Invalid player '{raw}', expected NAME:SKILL or NAME:SKILL:ID",
            param_hint=param_hint,
        )
    try:
        skill = int(parts[1])
    except ValueError as exc:
        raise typer.BadParameter(f"Invalid skill in '{raw}'", param_hint=param_hint) from exc
    if skill < 0 or skill > 10:
        raise typer.BadParameter(f"Skill must be between 0 and 10 in '{raw}'", param_hint=param_hint)

    player_id: int | str | None = None
    if len(parts) == 3 and parts[2].strip():
        raw_id = parts[2].strip()
        player_id = int(raw_id) if raw_id.isdigit() else raw_id
    return TeamPlayer(
        name=parts[0].strip(),
        skill=skill,
        id=player_id,
        temporary=player_id is None,
    )


def _echo_team(label: str, team: list[TeamPlayer]) -> None:
    stats = team_stats(team)
    typer.echo(f"{label} total={stats.total_skill:.2f} average={stats.average_skill:.2f}")
    for player in team:
        value = player.momentum or 0.0
        typer.echo(
            f"  name={player.name} skill={player.skill} "
            f"momentum={value:+.2f} effective={player.effective_skill}"
        )


@app.command()
def momentum(
    db_url: DbUrlOption = DEFAULT_DB_URL,
    config_path: ConfigOption = DEFAULT_CONFIG,
    user_id: UserOption = "local",
    game: Annotated[
        str | None,
        typer.Option("--game", help="Only count matches played in this game."),
    ] = None,
) -> None:
    """Print current momentum per player key."""
    config = _load_config(config_path)
    session_factory = _open_sessions(db_url)
    with session_factory() as session:
        matches = fetch_match_history(session, user_id=user_id)

    momentum_map = calculate_momentum(matches, params=config.momentum, filter_game=game)
    if not momentum_map:
        typer.echo("no recent decided matches")
        return
    for key, value in sorted(momentum_map.items(), key=lambda item: (-item[1], item[0])):
        typer.echo(f"player={key} momentum={value:+.2f}")


@app.command()
def balance(
    players: Annotated[
        list[str],
        typer.Option("--player", "-p", help="Player as NAME:SKILL or NAME:SKILL:ID (repeatable)."),
    ],
    players_per_team: Annotated[
        int,
        typer.Option("--players-per-team", "-n", help="Players on each side."),
    ] = 5,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    config_path: ConfigOption = DEFAULT_CONFIG,
    user_id: UserOption = "local",
    use_momentum: Annotated[
        bool,
        typer.Option("--momentum/--no-momentum", help="Adjust skills by recent results."),
    ] = True,
    game: Annotated[
        str | None,
        typer.Option("--game", help="Game for momentum filtering and the share signature."),
    ] = None,
    seed: Annotated[
        int | None,
        typer.Option("--seed", help="Seed for reproducible shuffles."),
    ] = None,
) -> None:
    """Generate two balanced teams from the given players."""
    if players_per_team <= 0:
        raise typer.BadParameter("--players-per-team must be greater than 0")
    config = _load_config(config_path)
    pool = [_parse_player(raw, "--player") for raw in players]

    momentum_map: dict[str, float] = {}
    if use_momentum:
        session_factory = _open_sessions(db_url)
        with session_factory() as session:
            matches = fetch_match_history(session, user_id=user_id)
        momentum_map = calculate_momentum(matches, params=config.momentum, filter_game=game)

    annotated = annotate_players(pool, momentum_map)
    assignment = balance_teams(
        annotated,
        players_per_team,
        trials=config.balancer.trials,
        rng=random.Random(seed),
    )
    if assignment.is_empty():
        needed = players_per_team * 2 - len(pool)
        typer.echo(f"not enough players: need {needed} more")
        raise typer.Exit(code=1)

    _echo_team("teamA", assignment.team_a)
    _echo_team("teamB", assignment.team_b)
    report = evaluate_fairness(
        assignment,
        players_per_team,
        threshold=config.balancer.fairness_threshold,
    )
    typer.echo(f"difference={report.difference:.2f} unfair={str(report.unfair).lower()}")
    typer.echo(f"signature={team_share_signature(assignment, game=game)}")


@app.command("pick-map")
def pick_map_command(
    game: Annotated[str, typer.Argument(help="Game title, see list-games.")],
    db_url: DbUrlOption = DEFAULT_DB_URL,
    config_path: ConfigOption = DEFAULT_CONFIG,
    user_id: UserOption = "local",
    network_id: Annotated[
        str | None,
        typer.Option("--network-id", help="Preference owner; defaults to the user id."),
    ] = None,
    exclude: Annotated[
        list[str] | None,
        typer.Option("--exclude", help="Extra map to avoid (repeatable)."),
    ] = None,
    seed: Annotated[
        int | None,
        typer.Option("--seed", help="Seed for a reproducible pick."),
    ] = None,
) -> None:
    """Pick a non-banned map, avoiding the one played most recently."""
    if game not in GAME_TITLES:
        raise typer.BadParameter(
            f"Unknown game '{game}'. Choose one of: {', '.join(GAME_TITLES)}.",
            param_hint="game",
        )
    config = _load_config(config_path)
    session_factory = _open_sessions(db_url)
    with session_factory() as session:
        preferences = fetch_map_preferences(session, network_id or user_id)
        matches = fetch_match_history(session, user_id=user_id)

    recent = recent_map_by_game(matches, window=config.maps.repeat_window).get(game)
    if recent is not None:
        typer.echo(f"recent_map={recent.map_name} played_at={recent.played_at.isoformat()}")

    selected = pick_map_for_game(
        game,
        preferences=preferences,
        matches=matches,
        params=config.maps,
        extra_exclude=exclude or (),
        rng=random.Random(seed),
    )
    if selected is None:
        typer.echo(f"no maps available for {game}")
        raise typer.Exit(code=1)
    typer.echo(f"game={game} map={selected}")


@app.command()
def ban(
    game: Annotated[str, typer.Argument(help="Game title.")],
    map_name: Annotated[str, typer.Argument(help="Map to ban or unban.")],
    db_url: DbUrlOption = DEFAULT_DB_URL,
    network_id: Annotated[
        str,
        typer.Option("--network-id", help="Preference owner."),
    ] = "local",
) -> None:
    """Toggle a map ban for one game."""
    if map_name not in maps_for_game(game):
        raise typer.BadParameter(f"'{map_name}' is not in the {game} map pool", param_hint="map_name")

    session_factory = _open_sessions(db_url)
    with session_factory() as session:
        try:
            preferences = toggle_ban(fetch_map_preferences(session, network_id), game, map_name)
            saved = save_map_preferences(session, network_id, preferences)
            session.commit()
        except Exception:
            session.rollback()
            raise

    banned = sorted(saved.banned_for(game))
    state = "banned" if map_name in banned else "allowed"
    typer.echo(f"game={game} map={map_name} state={state} banned_count={len(banned)}")


@app.command("record-match")
def record_match(
    team_a: Annotated[
        list[str],
        typer.Option("--team-a", help="Team A player as NAME:SKILL[:ID] (repeatable)."),
    ],
    team_b: Annotated[
        list[str],
        typer.Option("--team-b", help="Team B player as NAME:SKILL[:ID] (repeatable)."),
    ],
    score_a: Annotated[int, typer.Option("--score-a")] = 0,
    score_b: Annotated[int, typer.Option("--score-b")] = 0,
    game: Annotated[str | None, typer.Option("--game")] = None,
    map_name: Annotated[str | None, typer.Option("--map")] = None,
    canceled: Annotated[
        bool,
        typer.Option("--canceled", help="Store as canceled (zero scores, no experience)."),
    ] = False,
    momentum_used: Annotated[
        bool,
        typer.Option("--momentum-used", help="Teams were generated with momentum enabled."),
    ] = False,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    user_id: UserOption = "local",
) -> None:
    """Persist a played match and award completion experience."""
    if score_a < 0 or score_b < 0:
        raise typer.BadParameter("scores must be >= 0")
    assignment = TeamAssignment(
        team_a=[_parse_player(raw, "--team-a") for raw in team_a],
        team_b=[_parse_player(raw, "--team-b") for raw in team_b],
    )
    status = MatchStatus.CANCELED if canceled else MatchStatus.COMPLETED

    session_factory = _open_sessions(db_url)
    with session_factory() as session:
        try:
            match = insert_match(
                session,
                user_id=user_id,
                assignment=assignment,
                team_a_score=score_a,
                team_b_score=score_b,
                game=game,
                map_name=map_name,
                status=status,
            )
            summary = None
            if status is MatchStatus.COMPLETED and match.match_id is not None:
                summary = record_xp_events(
                    session,
                    user_id,
                    match_completion_events(
                        match.match_id,
                        map_selection=bool(map_name),
                        momentum=momentum_used,
                    ),
                )
            session.commit()
        except Exception:
            session.rollback()
            raise

    typer.echo(
        f"match_id={match.match_id} status={match.status.value} "
        f"winner={match.winner.value} score={match.team_a_score}-{match.team_b_score}"
    )
    if summary is not None:
        typer.echo(f"xp_total={summary.total} xp_delta={summary.delta}")


@app.command()
def level(
    db_url: DbUrlOption = DEFAULT_DB_URL,
    config_path: ConfigOption = DEFAULT_CONFIG,
    user_id: UserOption = "local",
    xp: Annotated[
        int | None,
        typer.Option("--xp", help="Use this total instead of the stored one."),
    ] = None,
) -> None:
    """Show the level state for an experience total."""
    config = _load_config(config_path)
    total = xp
    if total is None:
        session_factory = _open_sessions(db_url)
        with session_factory() as session:
            total = fetch_xp_total(session, user_id)

    state = calculate_level_state(total, config.leveling)
    typer.echo(
        f"total_xp={state.total_xp} level={state.level} "
        f"xp_into_level={state.xp_into_level} xp_for_level={state.xp_for_level} "
        f"progress={state.progress:.4f}"
    )


@app.command()
def list_games() -> None:
    """Print supported games and their pool sizes."""
    for title in GAME_TITLES:
        typer.echo(f"game={title} maps={len(maps_for_game(title))}")


if __name__ == "__main__":
    app()
