"""SimulationEngine — the main frame loop.

Owns all top-level simulation state and advances it in the canonical
frame order:

1. Snapshot every plant's canopy
2. Compute light factors for all plants from that snapshot
3. Grow each plant in ascending id order against the shared soil grid
4. Collect the frame's resource-usage records

Light is computed from a snapshot, so growth earlier in the frame never
changes the shade a later plant sees.  Soil is not snapshotted: a
plant's uptake is visible to every plant grown after it in the same
frame.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np
from numpy.random import Generator
from numpy.typing import NDArray

from terrarium.exceptions import SimulationError
from terrarium.flora.plant import GrowthParams, Plant
from terrarium.simulation.config import SimulationConfig
from terrarium.simulation.usage import FrameUsage
from terrarium.world.soil import SoilGrid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrameReport:
    """What one call to ``SimulationEngine.step`` produced.

    Attributes:
        frame: Number of the frame that was just simulated.
        usage: Resource-usage records for the frame.
        alive: Plants still alive after the frame.
        deaths: Ids of plants that died during the frame.
    """

    frame: int
    usage: FrameUsage
    alive: int
    deaths: tuple[int, ...] = ()


@dataclass
class SimulationEngine:
    """Drives the simulation forward frame by frame.

    Attributes:
        config: Loaded simulation configuration.
        soil: The shared soil grid.
        plants: Every plant ever created, kept in ascending id order.
        rng: Master seeded random generator.
        params: Growth parameters derived from config.
        last_usage: Usage records of the most recent frame.
        frame: Number of frames simulated so far.
    """

    config: SimulationConfig
    soil: SoilGrid = field(init=False)
    plants: list[Plant] = field(init=False, default_factory=list)
    rng: Generator = field(init=False)
    params: GrowthParams = field(init=False)
    last_usage: FrameUsage | None = field(init=False, default=None)
    frame: int = 0

    def __post_init__(self) -> None:
        """Build soil grid, RNG and initial plant population from config."""
        self.rng = np.random.default_rng(self.config.seed)
        self.soil = SoilGrid(
            grid_size=self.config.grid_size,
            cell_size=self.config.cell_size,
        )
        if self.config.randomize_soil:
            self.soil.populate(self.rng)
        self.params = GrowthParams(
            depletion_rate=self.config.depletion_rate,
            drift_amplitude=self.config.drift_amplitude,
        )
        self._spawn_initial_plants()
        logger.info(
            "Created %dx%d soil grid with %d plants (seed=%s)",
            self.config.grid_size,
            self.config.grid_size,
            len(self.plants),
            self.config.seed,
        )

    @property
    def alive_count(self) -> int:
        return sum(1 for p in self.plants if p.alive)

    def add_plant(self, plant: Plant) -> None:
        """Register an extra plant, keeping the population in id order.

        Args:
            plant: The plant to add.

        Raises:
            SimulationError: If a plant with the same id already exists.
        """
        if any(p.plant_id == plant.plant_id for p in self.plants):
            msg = f"duplicate plant id {plant.plant_id}"
            raise SimulationError(msg)
        self.plants.append(plant)
        self.plants.sort(key=lambda p: p.plant_id)

    def step(self) -> FrameReport:
        """Advance the simulation by one frame.

        Returns:
            The frame's usage records plus alive and death counts.
        """
        canopies = [p.canopy() for p in self.plants]
        lights = [
            p.compute_light(
                canopies,
                self.config.shading_coefficient,
                dead_cast_shade=self.config.dead_cast_shade,
            )
            if p.alive
            else 0.0
            for p in self.plants
        ]

        usage = FrameUsage(frame=self.frame)
        deaths: list[int] = []
        for plant, light in zip(self.plants, lights, strict=True):
            if not plant.alive:
                continue
            usage.extend(plant.grow(self.soil, light, self.params, self.rng))
            if not plant.alive:
                deaths.append(plant.plant_id)
                logger.info(
                    "Plant %d died at frame %d (age=%.2f, health=%.3f)",
                    plant.plant_id,
                    self.frame,
                    plant.age,
                    plant.health,
                )

        self.last_usage = usage
        report = FrameReport(
            frame=self.frame,
            usage=usage,
            alive=self.alive_count,
            deaths=tuple(deaths),
        )
        logger.debug(
            "Frame %d: %d alive, %d usage records",
            self.frame,
            report.alive,
            len(usage),
        )
        self.frame += 1
        return report

    def run(self, frames: int) -> None:
        """Run the simulation for a fixed number of frames.

        Args:
            frames: Number of frames to advance.
        """
        for _ in range(frames):
            self.step()

    def plant_array(self) -> NDArray[np.float64]:
        """Return an ``(n_plants, 7)`` snapshot of plant state.

        Columns are ``x, y, z, size, health, age, alive`` in id order.
        """
        return np.array(
            [
                (p.x, p.y, p.z, p.size, p.health, p.age, float(p.alive))
                for p in self.plants
            ],
            dtype=np.float64,
        ).reshape(len(self.plants), 7)

    def _spawn_initial_plants(self) -> None:
        """Place plants on random cell corners across the grid."""
        lo, _ = self.soil.world_bounds()
        size = self.config.grid_size
        for plant_id in range(self.config.initial_plants):
            gx = int(self.rng.integers(0, size))
            gz = int(self.rng.integers(0, size))
            plant = Plant.spawn(
                plant_id,
                lo + gx * self.config.cell_size,
                lo + gz * self.config.cell_size,
                self.rng,
                size=self.config.initial_plant_size,
                species=self.config.species,
                height_scale=self.config.height_scale,
            )
            self.plants.append(plant)
