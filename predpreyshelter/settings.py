"""
Initial configuration of a run: grid size, vegetation amounts, shelter cells
and run pacing. Settings are persisted as flat JSON; only the starting
configuration is stored, never a running world.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional
import json
import logging

import numpy as np

from predpreyshelter.config.config_simulation import config_env
from predpreyshelter.errors import ConfigurationError
from predpreyshelter.events import EventLogger
from predpreyshelter.shelter import DEFAULT_SHELTER_CAPACITY
from predpreyshelter.simulation import Simulation
from predpreyshelter.world import DEFAULT_ROSTER_SIZE, World, build_world, default_shelters

logger = logging.getLogger(__name__)

SETTINGS_FILE_PREFIX = "simulation_settings_"


@dataclass
class SimulationSettings:
    map_size: int = 20
    grass_amount: int = 0
    thick_vegetation_amount: int = 0
    rabbit_shelter_ids: List[int] = field(default_factory=list)
    fox_shelter_ids: List[int] = field(default_factory=list)
    timeout_between_simulation_steps: int = 0
    logs_enabled: bool = True
    seed: Optional[int] = None
    shelter_capacity: int = DEFAULT_SHELTER_CAPACITY
    roster_size: int = DEFAULT_ROSTER_SIZE

    @classmethod
    def from_dict(cls, data: Dict[str, object]) -> "SimulationSettings":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown settings keys: {', '.join(unknown)}")
        settings = cls(**data)
        settings.validate()
        return settings

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)

    def validate(self) -> None:
        for name in ("map_size", "grass_amount", "thick_vegetation_amount",
                     "timeout_between_simulation_steps", "shelter_capacity", "roster_size"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}")
            if value < 0:
                raise ConfigurationError(f"{name} must not be negative, got {value}")
        for name in ("rabbit_shelter_ids", "fox_shelter_ids"):
            ids = getattr(self, name)
            if not isinstance(ids, list) or any(isinstance(i, bool) or not isinstance(i, int) for i in ids):
                raise ConfigurationError(f"{name} must be a list of cell ids, got {ids!r}")
        if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, int)):
            raise ConfigurationError(f"seed must be an integer or null, got {self.seed!r}")
        if not isinstance(self.logs_enabled, bool):
            raise ConfigurationError(f"logs_enabled must be a boolean, got {self.logs_enabled!r}")
        if self.roster_size > self.shelter_capacity:
            raise ConfigurationError(
                f"roster_size ({self.roster_size}) exceeds shelter_capacity ({self.shelter_capacity})"
            )


def build_settings(overrides: Optional[Dict[str, object]] = None) -> SimulationSettings:
    """Defaults from `config/config_simulation.py`, patched with `overrides`."""
    data = dict(config_env)
    if overrides:
        for key, value in overrides.items():
            if key not in data:
                raise ConfigurationError(f"Unknown settings key: {key}")
            data[key] = value
    return SimulationSettings.from_dict(data)


def load_settings(path: str | Path) -> SimulationSettings:
    try:
        with open(Path(path), "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Settings file {path} is not valid JSON: {exc}") from exc
    except (UnicodeDecodeError, OSError) as exc:
        raise ConfigurationError(f"Settings file {path} cannot be read: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings file {path} must hold a JSON object")
    settings = SimulationSettings.from_dict(data)
    logger.info("Loaded settings from %s", path)
    return settings


def export_settings(settings: SimulationSettings, directory: str | Path, now: Optional[datetime] = None) -> Path:
    """Writes `simulation_settings_<YYYYmmdd_HHMMSS>.json` into `directory` and returns its path."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    path = directory / f"{SETTINGS_FILE_PREFIX}{stamp}.json"
    with open(path, "w", encoding="utf-8") as f:
        json.dump(settings.to_dict(), f, indent=2)
    logger.info("Exported settings to %s", path)
    return path


def build_world_from_settings(settings: SimulationSettings, rng: Optional[np.random.Generator] = None) -> World:
    rng = rng if rng is not None else np.random.default_rng(settings.seed)
    return build_world(
        settings.map_size,
        grass_amount=settings.grass_amount,
        thick_vegetation_amount=settings.thick_vegetation_amount,
        prey_shelters=default_shelters(settings.rabbit_shelter_ids, settings.shelter_capacity, settings.roster_size),
        predator_shelters=default_shelters(settings.fox_shelter_ids, settings.shelter_capacity, settings.roster_size),
        rng=rng,
    )


def build_simulation(
    settings: SimulationSettings,
    rng: Optional[np.random.Generator] = None,
    listeners: Iterable = (),
) -> Simulation:
    """World plus stepper, with an `EventLogger` subscribed according to `logs_enabled`."""
    simulation = Simulation(build_world_from_settings(settings, rng), listeners)
    simulation.subscribe(EventLogger(enabled=settings.logs_enabled))
    return simulation
