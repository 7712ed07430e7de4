"""Config — load simulation parameters from YAML files.

All tunable constants (grid dimensions, population, shading, depletion,
species profile) live in YAML and are parsed into typed dataclasses
here.  Parameters are validated on construction so a bad config fails
before the first frame is stepped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from terrarium.exceptions import ConfigurationError
from terrarium.flora.species import Species


@dataclass
class SimulationConfig:
    """Top-level simulation configuration.

    Attributes:
        seed: RNG seed for deterministic replay.
        grid_size: Number of soil cells along each edge of the grid.
        cell_size: Edge length of a soil cell in world units.
        initial_plants: Number of plants created at start-up.
        initial_plant_size: Starting size of every plant.
        height_scale: Vertical stretch used to derive a plant's height.
        shading_coefficient: Light lost under a fully overlapping taller
            neighbour.
        depletion_rate: Converts an amount taken into the drop in each
            soil resource level.
        drift_amplitude: Maximum horizontal drift per frame for young
            plants (0 disables drift).
        dead_cast_shade: Whether dead plants keep shading their
            neighbours.
        randomize_soil: Draw initial soil levels from [0.5, 1.0) instead
            of starting every channel at 1.0.
        species: Physiological profile shared by all plants.
    """

    seed: int = 42
    grid_size: int = 40
    cell_size: float = 1.0
    initial_plants: int = 60
    initial_plant_size: float = 1.0
    height_scale: float = 5.0

    # Competition and uptake
    shading_coefficient: float = 0.5
    depletion_rate: float = 0.001
    drift_amplitude: float = 0.0
    dead_cast_shade: bool = True
    randomize_soil: bool = True

    species: Species = field(default_factory=Species)

    def __post_init__(self) -> None:
        """Reject parameters the simulation cannot run with.

        Raises:
            ConfigurationError: If any parameter is out of range.
        """
        checks = [
            (self.grid_size > 0, f"grid_size must be positive, got {self.grid_size}"),
            (self.cell_size > 0, f"cell_size must be positive, got {self.cell_size}"),
            (
                self.initial_plants >= 0,
                f"initial_plants must not be negative, got {self.initial_plants}",
            ),
            (
                self.initial_plant_size > 0,
                f"initial_plant_size must be positive, got {self.initial_plant_size}",
            ),
            (
                self.height_scale > 0,
                f"height_scale must be positive, got {self.height_scale}",
            ),
            (
                0.0 <= self.shading_coefficient <= 1.0,
                "shading_coefficient must be in [0, 1], "
                f"got {self.shading_coefficient}",
            ),
            (
                self.depletion_rate >= 0,
                f"depletion_rate must not be negative, got {self.depletion_rate}",
            ),
            (
                self.drift_amplitude >= 0,
                f"drift_amplitude must not be negative, got {self.drift_amplitude}",
            ),
        ]
        for ok, msg in checks:
            if not ok:
                raise ConfigurationError(msg)

    @classmethod
    def from_yaml(cls, path: str | Path) -> SimulationConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated SimulationConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
            ConfigurationError: If the file is not a mapping or a value
                is out of range.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            msg = f"{path}: expected a mapping at top level"
            raise ConfigurationError(msg)

        return cls(
            seed=data.get("seed", cls.seed),
            grid_size=data.get("grid_size", cls.grid_size),
            cell_size=data.get("cell_size", cls.cell_size),
            initial_plants=data.get("initial_plants", cls.initial_plants),
            initial_plant_size=data.get(
                "initial_plant_size",
                cls.initial_plant_size,
            ),
            height_scale=data.get("height_scale", cls.height_scale),
            shading_coefficient=data.get(
                "shading_coefficient",
                cls.shading_coefficient,
            ),
            depletion_rate=data.get("depletion_rate", cls.depletion_rate),
            drift_amplitude=data.get("drift_amplitude", cls.drift_amplitude),
            dead_cast_shade=data.get("dead_cast_shade", cls.dead_cast_shade),
            randomize_soil=data.get("randomize_soil", cls.randomize_soil),
            species=Species.from_dict(data.get("species") or {}),
        )
