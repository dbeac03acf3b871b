"""Configuration management."""

import json
import math
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict

import yaml

from orbit_sim.physics.bodies import G_SI
from orbit_sim.physics.controller import DEFAULT_DT, DEFAULT_MAX_SPEED, DEFAULT_MIN_SPEED
from orbit_sim.physics.forces import DEFAULT_MIN_SEPARATION
from orbit_sim.physics.history import HISTORY_CAPACITY
from orbit_sim.physics.integrators.factory import DEFAULT_INTEGRATOR, list_integrators


@dataclass
class Config:
    """Simulation configuration."""
    # Simulation parameters
    dt: float = DEFAULT_DT
    speed: float = 1.0
    min_speed: float = DEFAULT_MIN_SPEED
    max_speed: float = DEFAULT_MAX_SPEED
    integrator: str = DEFAULT_INTEGRATOR
    G: float = G_SI
    min_separation: float = DEFAULT_MIN_SEPARATION
    history_capacity: int = HISTORY_CAPACITY

    # System to load: a file path or a prefab name
    system: str = "ours"

    # Viewer parameters
    fps: int = 60
    steps_per_frame: int = 24
    distance_scale: float = 1e10
    planet_scale: float = 1.0
    fake_planet_scale: bool = True
    speed_step: float = 1.05
    zoom_step: float = 1.1
    pan_speed: float = 10.0

    verbose: bool = False

    def __post_init__(self):
        # YAML 1.1 reads "1e3" as a string, and quoted numbers stay strings
        for f in fields(self):
            value = getattr(self, f.name)
            if f.type is float and isinstance(value, (int, str)) and not isinstance(value, bool):
                try:
                    setattr(self, f.name, float(value))
                except ValueError:
                    raise ValueError(f"Config.{f.name} must be a number, got {value!r}")
            elif f.type is int and isinstance(value, str):
                try:
                    setattr(self, f.name, int(value))
                except ValueError:
                    raise ValueError(f"Config.{f.name} must be an integer, got {value!r}")
        for name in ("dt", "G", "min_separation", "distance_scale", "planet_scale",
                     "speed_step", "zoom_step"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or not math.isfinite(value) or value <= 0:
                raise ValueError(f"Config.{name} must be a positive number, got {value!r}")
        if not (0.0 <= self.min_speed <= self.max_speed):
            raise ValueError(
                f"Config speed range must satisfy 0 <= min_speed <= max_speed, "
                f"got [{self.min_speed}, {self.max_speed}]"
            )
        if self.speed < 0:
            raise ValueError(f"Config.speed must be non-negative, got {self.speed}")
        if int(self.history_capacity) < 1:
            raise ValueError(f"Config.history_capacity must be at least 1, got {self.history_capacity}")
        if int(self.fps) < 1 or int(self.steps_per_frame) < 1:
            raise ValueError("Config.fps and Config.steps_per_frame must be at least 1")
        if self.integrator.lower() not in list_integrators():
            raise ValueError(f"Unknown integrator '{self.integrator}'. Available: {list_integrators()}")
        self.integrator = self.integrator.lower()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Build a Config, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {unknown}")
        return cls(**data)

    def updated(self, **overrides) -> "Config":
        """Return a copy with the non-None overrides applied."""
        data = asdict(self)
        data.update({key: value for key, value in overrides.items() if value is not None})
        return Config.from_dict(data)


def load_config(config_path: str) -> Config:
    """Load configuration from file.

    Args:
        config_path: Path to config file (.json or .yaml)

    Returns:
        Config object
    """
    config_path = Path(config_path)

    with open(config_path, 'r') as f:
        if config_path.suffix in ('.yaml', '.yml'):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)

    return Config.from_dict(data or {})


def save_config(config: Config, output_path: str):
    """Save configuration to file.

    Args:
        config: Config object
        output_path: Output file path (.json or .yaml)
    """
    output_path = Path(output_path)
    data = asdict(config)

    with open(output_path, 'w') as f:
        if output_path.suffix in ('.yaml', '.yml'):
            yaml.safe_dump(data, f, default_flow_style=False)
        else:
            json.dump(data, f, indent=2)
