"""
Run configuration, loaded from a JSON file and/or the command line.
"""

import json
from dataclasses import asdict, dataclass, field, fields
from typing import Dict, Optional


def _default_particles() -> Dict[str, int]:
    return {"rho0": 200, "Delta++": 100, "K*+": 100, "pi+": 200}


@dataclass
class SimulationConfig:
    """Parameters of one simulation run."""

    seed: Optional[int] = 42
    dt: float = 0.1  # fm
    end_time: float = 20.0  # fm
    box_length: float = 10.0  # fm
    cell_length: float = 2.0  # fm
    particles: Dict[str, int] = field(default_factory=_default_particles)
    momentum_spread: float = 0.3  # GeV
    formation_time_max: float = 1.0  # fm
    loglevel: str = "INFO"

    def __post_init__(self):
        for name in ("dt", "end_time", "box_length", "cell_length"):
            value = getattr(self, name)
            if not value > 0:
                raise ValueError(f"'{name}' must be positive, got {value}")
        for name in ("momentum_spread", "formation_time_max"):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"'{name}' must not be negative, got {value}")
        for species, count in self.particles.items():
            if not isinstance(count, int) or count < 0:
                raise ValueError(f"Invalid particle count for '{species}': {count!r}")

    @classmethod
    def from_dict(cls, data: dict) -> "SimulationConfig":
        """
        Create a configuration from a plain dictionary.

        Raises:
            ValueError: On unknown keys or invalid values
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown configuration keys: {sorted(unknown)}")
        return cls(**data)

    def to_dict(self) -> dict:
        return asdict(self)


def load_config(config_file: str) -> SimulationConfig:
    """Load configuration from JSON file."""
    with open(config_file, 'r') as f:
        return SimulationConfig.from_dict(json.load(f))
