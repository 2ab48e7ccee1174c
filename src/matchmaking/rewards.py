"""Experience awards feeding the leveling projection."""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class XpRewards:
    match_base: int = 50
    match_map_bonus: int = 20
    match_momentum_bonus: int = 15
    team_share: int = 15
    match_screenshot: int = 12
    player_create: int = 8
    player_remove: int = -5
    referral: int = 150


@dataclass(frozen=True)
class XpEvent:
    """One award; `context` makes repeated awards for the same action no-ops."""

    type: str
    amount: int
    context: str


@dataclass(frozen=True)
class XpBreakdownEntry:
    type: str
    amount: int


@dataclass(frozen=True)
class XpSummary:
    total: int
    delta: int
    breakdown: tuple[XpBreakdownEntry, ...]


DEFAULT_REWARDS = XpRewards()


def match_completion_events(
    match_id: int,
    *,
    map_selection: bool = False,
    momentum: bool = False,
    rewards: XpRewards = DEFAULT_REWARDS,
) -> list[XpEvent]:
    events = [XpEvent("match:completed", rewards.match_base, f"match:{match_id}:base")]
    if map_selection:
        events.append(XpEvent("match:map", rewards.match_map_bonus, f"match:{match_id}:map"))
    if momentum:
        events.append(
            XpEvent("match:momentum", rewards.match_momentum_bonus, f"match:{match_id}:momentum")
        )
    return events


def player_creation_event(player_id: int, rewards: XpRewards = DEFAULT_REWARDS) -> XpEvent:
    return XpEvent("player:create", rewards.player_create, f"player:{player_id}:create")


def player_removal_event(player_id: int, rewards: XpRewards = DEFAULT_REWARDS) -> XpEvent:
    # Every removal is penalized, so the context is never reused.
    return XpEvent(
        "player:remove",
        rewards.player_remove,
        f"player:{player_id}:remove:{uuid.uuid4()}",
    )


def team_share_event(signature: str, rewards: XpRewards = DEFAULT_REWARDS) -> XpEvent:
    return XpEvent("share:team", rewards.team_share, f"teamshare:{signature}")


def match_screenshot_event(match_id: int, rewards: XpRewards = DEFAULT_REWARDS) -> XpEvent:
    return XpEvent("screenshot:history", rewards.match_screenshot, f"matchshot:{match_id}")


def referral_event(
    referrer_id: str,
    referred_id: str,
    rewards: XpRewards = DEFAULT_REWARDS,
) -> XpEvent:
    if referrer_id == referred_id:
        raise ValueError("Cannot refer yourself")
    return XpEvent("referral:bonus", rewards.referral, f"referral:{referred_id}")


def apply_xp_events(
    total: int,
    events: Iterable[XpEvent],
    *,
    applied_contexts: Iterable[str] = (),
) -> XpSummary:
    """Fold awards into a running total that never drops below zero.

    Events whose context is already in `applied_contexts` (or repeated within
    `events`) are skipped.
    """
    seen = set(applied_contexts)
    current = max(0, total)
    delta_sum = 0
    breakdown: list[XpBreakdownEntry] = []

    for event in events:
        if event.context in seen:
            continue
        seen.add(event.context)

        next_total = max(0, current + event.amount)
        applied_delta = next_total - current
        current = next_total
        if applied_delta != 0:
            breakdown.append(XpBreakdownEntry(type=event.type, amount=applied_delta))
            delta_sum += applied_delta

    return XpSummary(total=current, delta=delta_sum, breakdown=tuple(breakdown))


__all__ = [
    "DEFAULT_REWARDS",
    "XpBreakdownEntry",
    "XpEvent",
    "XpRewards",
    "XpSummary",
    "apply_xp_events",
    "match_completion_events",
    "match_screenshot_event",
    "player_creation_event",
    "player_removal_event",
    "referral_event",
    "team_share_event",
]
