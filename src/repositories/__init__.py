"""Database repository helpers."""

from repositories.history import (
    ensure_schema,
    fetch_map_preferences,
    fetch_match_history,
    fetch_xp_total,
    insert_match,
    record_xp_events,
    save_map_preferences,
)

__all__ = [
    "ensure_schema",
    "fetch_map_preferences",
    "fetch_match_history",
    "fetch_xp_total",
    "insert_match",
    "record_xp_events",
    "save_map_preferences",
]
