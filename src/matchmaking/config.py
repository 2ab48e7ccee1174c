"""Load engine parameter sets from TOML files."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Any
import tomllib

from matchmaking.balancer import BalancerParameters
from matchmaking.leveling import LevelingParameters
from matchmaking.maps import MapParameters
from matchmaking.momentum import MomentumParameters


@dataclass(frozen=True)
class EngineConfig:
    """Parameters for one matchmaking/progression setup."""

    name: str
    description: str | None
    file_path: Path
    momentum: MomentumParameters
    maps: MapParameters
    balancer: BalancerParameters
    leveling: LevelingParameters

    def as_config_json(self) -> dict[str, Any]:
        return {
            "momentum_window_hours": self.momentum.window_hours,
            "momentum_step": self.momentum.step,
            "map_repeat_window_hours": self.maps.repeat_window_hours,
            "balancer_trials": self.balancer.trials,
            "fairness_threshold": self.balancer.fairness_threshold,
            "level_base": self.leveling.base,
            "level_step": self.leveling.step,
        }


DEFAULT_ENGINE_CONFIG = EngineConfig(
    name="builtin",
    description="Built-in defaults",
    file_path=Path("<builtin>"),
    momentum=MomentumParameters(),
    maps=MapParameters(),
    balancer=BalancerParameters(),
    leveling=LevelingParameters(),
)


def _read_toml(file_path: Path) -> dict[str, Any]:
    with file_path.open("rb") as file:
        return tomllib.load(file)


def load_engine_configs(config_dir: Path) -> list[EngineConfig]:
    """Load and validate every engine TOML file in a directory."""
    if not config_dir.exists():
        raise FileNotFoundError(f"Config directory not found: {config_dir}")
    if not config_dir.is_dir():
        raise NotADirectoryError(f"Config path is not a directory: {config_dir}")

    config_files = sorted(config_dir.glob("*.toml"))
    if not config_files:
        raise ValueError(f"No .toml config files found in: {config_dir}")

    configs = [_parse_engine_config(_read_toml(path), path) for path in config_files]
    counts = Counter(config.name for config in configs)
    duplicates = sorted(name for name, count in counts.items() if count > 1)
    if duplicates:
        raise ValueError(f"Duplicate engine config names found in {config_dir}: {duplicates}")
    return configs


def load_engine_config(file_path: Path) -> EngineConfig:
    if not file_path.is_file():
        raise FileNotFoundError(f"Config file not found: {file_path}")
    return _parse_engine_config(_read_toml(file_path), file_path)


def _parse_engine_config(raw: dict[str, Any], file_path: Path) -> EngineConfig:
    system_raw = raw.get("system", {})
    momentum_raw = raw.get("momentum", {})
    maps_raw = raw.get("maps", {})
    balancer_raw = raw.get("balancer", {})
    leveling_raw = raw.get("leveling", {})

    name = str(system_raw.get("name", "")).strip()
    if not name:
        raise ValueError(f"{file_path}: [system].name is required")

    description_value = system_raw.get("description")
    description = None if description_value is None else str(description_value)

    momentum = MomentumParameters(
        window_hours=float(momentum_raw.get("window_hours", 4.0)),
        step=float(momentum_raw.get("step", 0.5)),
    )
    maps = MapParameters(
        repeat_window_hours=float(maps_raw.get("repeat_window_hours", 4.0)),
    )
    balancer = BalancerParameters(
        trials=int(balancer_raw.get("trials", 120)),
        fairness_threshold=float(balancer_raw.get("fairness_threshold", 3.0)),
    )
    leveling = LevelingParameters(
        base=int(leveling_raw.get("base", 120)),
        step=int(leveling_raw.get("step", 30)),
    )
    _validate_parameters(
        file_path=file_path,
        momentum=momentum,
        maps=maps,
        balancer=balancer,
        leveling=leveling,
    )

    return EngineConfig(
        name=name,
        description=description,
        file_path=file_path,
        momentum=momentum,
        maps=maps,
        balancer=balancer,
        leveling=leveling,
    )


def _validate_parameters(
    *,
    file_path: Path,
    momentum: MomentumParameters,
    maps: MapParameters,
    balancer: BalancerParameters,
    leveling: LevelingParameters,
) -> None:
    if momentum.window_hours <= 0.0:
        raise ValueError(f"{file_path}: [momentum].window_hours must be > 0")
    if momentum.step <= 0.0:
        raise ValueError(f"{file_path}: [momentum].step must be > 0")
    if maps.repeat_window_hours <= 0.0:
        raise ValueError(f"{file_path}: [maps].repeat_window_hours must be > 0")
    if balancer.trials < 1:
        raise ValueError(f"{file_path}: [balancer].trials must be >= 1")
    if balancer.fairness_threshold < 0.0:
        raise ValueError(f"{file_path}: [balancer].fairness_threshold must be >= 0")
    if leveling.base <= 0:
        raise ValueError(f"{file_path}: [leveling].base must be > 0")
    if leveling.step < 0:
        raise ValueError(f"{file_path}: [leveling].step must be >= 0")


__all__ = [
    "DEFAULT_ENGINE_CONFIG",
    "EngineConfig",
    "load_engine_config",
    "load_engine_configs",
]
