"""Cumulative experience to level/progress projection."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LevelingParameters:
    base: int = 120
    step: int = 30

    def cost_for_level(self, level: int) -> int:
        """Experience needed to complete `level` (arithmetic progression)."""
        return self.base + (level - 1) * self.step


@dataclass(frozen=True)
class LevelState:
    total_xp: int
    level: int
    xp_into_level: int
    xp_for_level: int
    progress: float


def calculate_level_state(
    total_xp: int,
    params: LevelingParameters = LevelingParameters(),
) -> LevelState:
    """Recompute level state from scratch; negative totals count as zero.

    A level that costs nothing stops the climb with zero progress.
    """
    remaining = max(0, total_xp)
    level = 1
    requirement = params.cost_for_level(level)

    while requirement > 0 and remaining >= requirement:
        remaining -= requirement
        level += 1
        requirement = params.cost_for_level(level)

    progress = 0.0 if requirement <= 0 else remaining / requirement
    return LevelState(
        total_xp=total_xp,
        level=level,
        xp_into_level=remaining,
        xp_for_level=requirement,
        progress=progress,
    )


__all__ = ["LevelState", "LevelingParameters", "calculate_level_state"]
