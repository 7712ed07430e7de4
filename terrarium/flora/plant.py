"""Plant -- a single organism competing for light and soil resources.

Each frame a plant goes through two phases:

- **Light competition**: ``compute_light`` compares the plant's canopy
  footprint against a snapshot of every other canopy.  Each taller
  neighbour whose footprint overlaps ours multiplies the light factor
  by ``1 - overlap_fraction * shading_coefficient``.
- **Energy budget**: ``grow`` reads the soil under the footprint,
  weighs production (light x nutrients x water x efficiency x growth
  rate) against maintenance (fixed + size + age), grows, draws the
  matching resources out of the soil, updates health and age, and
  re-evaluates whether the plant is still alive.

Death is terminal: once ``alive`` latches false the plant is never
updated again, but it stays in the population so ids remain stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING

from terrarium.flora.colour import plant_colour
from terrarium.flora.species import Species
from terrarium.simulation.usage import UsageRecord
from terrarium.world.geometry import Square

if TYPE_CHECKING:
    from collections.abc import Iterable

    from numpy.random import Generator

    from terrarium.world.soil import SoilGrid

# -- Constants ---------------------------------------------------------------

_AGE_STEP = 0.01  # age advanced per frame
_MIN_SIZE = 0.2
_AGE_MAINTENANCE = 0.2  # maintenance added at the end of life
_GROWTH_SCALE = 0.01
_DEFICIT_GROWTH = 0.2  # growth multiplier while energy balance is negative
_DEMAND_PER_GROWTH = 0.5  # resource demand per unit of size gained
_HEALTH_GAIN = 0.001  # health per unit of net energy
_HEALTH_DECAY = 0.0005  # background senescence per frame
_GROUND_CLEARANCE = 0.1


class LifeState(Enum):
    """Life-cycle state of a plant."""

    ALIVE = auto()
    DEAD = auto()


@dataclass(frozen=True)
class Canopy:
    """Frozen view of a plant used for light competition.

    Attributes:
        plant_id: Id of the plant this canopy belongs to.
        footprint: Horizontal square covered by the canopy.
        top: Height of the canopy's top surface.
        alive: Whether the plant was alive when the snapshot was taken.
    """

    plant_id: int
    footprint: Square
    top: float
    alive: bool


@dataclass(frozen=True)
class GrowthParams:
    """Per-run parameters passed to every growth update.

    Attributes:
        depletion_rate: Converts an amount taken into the drop in each
            soil resource level.
        drift_amplitude: Maximum horizontal drift per frame for young
            plants; 0 disables drift.
    """

    depletion_rate: float = 0.001
    drift_amplitude: float = 0.0


@dataclass
class Plant:
    """A single plant.

    Attributes:
        plant_id: Unique identifier, fixed for the whole run.
        x: Horizontal position on the x axis.
        z: Horizontal position on the z axis.
        size: Edge length of the plant's bounding cube.
        growth_rate: Per-plant growth constant drawn at creation.
        max_age: Life span; the plant dies once ``age`` reaches it.
        species: Physiological constants.
        health: Vitality in [0, 1]; the plant dies at 0.
        age: Time alive, advanced by a fixed step every frame.
        alive: Latched false on death, never reset.
        height_scale: Vertical stretch applied when deriving ``y``.
        nutrient_intake: Total amount taken from the soil in the most
            recent growth frame.
        area_occupied: Soil area under the footprint in the most recent
            growth frame.
    """

    plant_id: int
    x: float
    z: float
    size: float = 1.0
    growth_rate: float = 0.025
    max_age: float = 100.0
    species: Species = field(default_factory=Species)
    health: float = 1.0
    age: float = 0.0
    alive: bool = True
    height_scale: float = 5.0
    nutrient_intake: float = 0.0
    area_occupied: float = 0.0

    @classmethod
    def spawn(
        cls,
        plant_id: int,
        x: float,
        z: float,
        rng: Generator,
        *,
        size: float = 1.0,
        species: Species | None = None,
        height_scale: float = 5.0,
    ) -> Plant:
        """Create a plant with growth rate and life span drawn from its species.

        Args:
            plant_id: Unique identifier.
            x: Spawn position on the x axis.
            z: Spawn position on the z axis.
            rng: Seeded random generator.
            size: Initial size.
            species: Physiological profile (defaults to ``Species()``).
            height_scale: Vertical stretch for the derived ``y``.

        Returns:
            A new, living Plant.
        """
        species = species or Species()
        rate_lo, rate_hi = species.growth_rate_range
        age_lo, age_hi = species.max_age_range
        return cls(
            plant_id=plant_id,
            x=x,
            z=z,
            size=size,
            growth_rate=float(rng.uniform(rate_lo, rate_hi)),
            max_age=float(rng.uniform(age_lo, age_hi)),
            species=species,
            height_scale=height_scale,
        )

    # -- Derived state --

    @property
    def y(self) -> float:
        """Vertical position, always derived from size."""
        return self.size * self.height_scale / 2.0 + _GROUND_CLEARANCE

    @property
    def top(self) -> float:
        """Height of the canopy's top surface."""
        return self.y + self.size / 2.0

    @property
    def footprint(self) -> Square:
        return Square(x=self.x, z=self.z, half=self.size / 2.0)

    @property
    def age_fraction(self) -> float:
        return self.age / self.max_age

    @property
    def state(self) -> LifeState:
        return LifeState.ALIVE if self.alive else LifeState.DEAD

    @property
    def colour(self) -> tuple[int, int, int, int]:
        """RGBA display colour; see ``plant_colour``."""
        return plant_colour(self.age_fraction, self.health)

    def canopy(self) -> Canopy:
        """Return a frozen snapshot of this plant's canopy."""
        return Canopy(
            plant_id=self.plant_id,
            footprint=self.footprint,
            top=self.top,
            alive=self.alive,
        )

    # -- Light --

    def compute_light(
        self,
        canopies: Iterable[Canopy],
        shading_coefficient: float = 0.5,
        *,
        dead_cast_shade: bool = True,
    ) -> float:
        """Return the fraction of full light reaching this plant.

        Args:
            canopies: Snapshot of every canopy in the population; this
                plant's own entry is skipped.
            shading_coefficient: Light lost under a fully overlapping
                taller neighbour.
            dead_cast_shade: Whether dead plants still shade others.

        Returns:
            Light factor in [0, 1].
        """
        own = self.footprint
        own_area = own.area
        own_top = self.top
        light = 1.0
        for other in canopies:
            if other.plant_id == self.plant_id:
                continue
            if not other.alive and not dead_cast_shade:
                continue
            if other.top <= own_top:
                continue
            overlap = own.overlap(other.footprint)
            if overlap <= 0.0:
                continue
            fraction = min(1.0, overlap / own_area)
            light *= 1.0 - fraction * shading_coefficient
        return min(1.0, max(0.0, light))

    # -- Growth --

    def grow(
        self,
        soil: SoilGrid,
        light_factor: float,
        params: GrowthParams | None = None,
        rng: Generator | None = None,
    ) -> list[UsageRecord]:
        """Run one frame of the energy budget and life-cycle update.

        A plant whose footprint covers no soil at all only ages this
        frame: no growth, no uptake, no health change.

        Args:
            soil: Shared soil grid; depleted in place.
            light_factor: Result of ``compute_light`` for this frame.
            params: Depletion and drift settings.
            rng: Random generator, only needed when drift is enabled.

        Returns:
            One usage record per soil cell drawn from (empty when dead
            or off-grid).
        """
        if not self.alive:
            return []
        params = params or GrowthParams()
        species = self.species

        center = (self.x, self.z)
        half = self.size / 2.0
        shares: list[tuple[int, float]] = []
        total_overlap = 0.0
        nutrient_sum = 0.0
        water_sum = 0.0
        for index in sorted(soil.cell_indices_under_footprint(center, half)):
            fraction = soil.overlap_fraction(index, center, half)
            if fraction <= 0.0:
                continue
            nutrient, water = soil.resource_average(index)
            shares.append((index, fraction))
            total_overlap += fraction
            nutrient_sum += nutrient * fraction
            water_sum += water * fraction

        if total_overlap == 0.0:
            self.age += _AGE_STEP
            self.nutrient_intake = 0.0
            self.area_occupied = 0.0
            self._update_life_state()
            return []

        nutrient_factor = nutrient_sum / total_overlap
        water_factor = water_sum / total_overlap
        age_fraction = self.age_fraction

        production = (
            light_factor
            * nutrient_factor
            * water_factor
            * species.photosynthetic_efficiency
            * self.growth_rate
        )
        maintenance = (
            species.base_maintenance
            + species.maintenance_per_size * self.size
            + age_fraction * _AGE_MAINTENANCE
        )
        net_energy = production - maintenance

        delta = self.growth_rate * _GROWTH_SCALE * (
            1.0 if net_energy > 0 else _DEFICIT_GROWTH
        )
        self.size = max(_MIN_SIZE, self.size + delta)

        demand = max(0.0, delta * _DEMAND_PER_GROWTH)
        records: list[UsageRecord] = []
        intake = 0.0
        for index, fraction in shares:
            taken = demand * (fraction / total_overlap) * species.adsorption_efficiency
            soil.deplete(index, taken, params.depletion_rate)
            records.append(
                UsageRecord(
                    cell_index=index,
                    plant_id=self.plant_id,
                    overlap_fraction=fraction,
                    amount_taken=taken,
                ),
            )
            intake += taken
        self.nutrient_intake = intake
        self.area_occupied = total_overlap * soil.cell_area

        self.health = min(
            1.0,
            max(0.0, self.health + net_energy * _HEALTH_GAIN - _HEALTH_DECAY),
        )
        self.age += _AGE_STEP

        if rng is not None and params.drift_amplitude > 0 and age_fraction < 0.5:
            self._drift(soil, params.drift_amplitude, rng)

        self._update_life_state()
        return records

    # -- Private helpers --

    def _drift(self, soil: SoilGrid, amplitude: float, rng: Generator) -> None:
        """Nudge a young plant's position, keeping it inside the grid."""
        lo, hi = soil.world_bounds()
        self.x = min(hi, max(lo, self.x + float(rng.uniform(-amplitude, amplitude))))
        self.z = min(hi, max(lo, self.z + float(rng.uniform(-amplitude, amplitude))))

    def _update_life_state(self) -> None:
        if self.health <= 0.0 or self.age >= self.max_age:
            self.alive = False
