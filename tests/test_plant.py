"""Tests for terrarium.flora - Plant light, growth and Species."""

import pytest
from numpy.random import Generator

from terrarium.flora.colour import plant_colour
from terrarium.flora.plant import GrowthParams, LifeState, Plant
from terrarium.flora.species import Species
from terrarium.world.soil import SoilGrid


class TestSpecies:
    """Tests for the Species profile."""

    def test_defaults_positive(self) -> None:
        s = Species()
        assert s.photosynthetic_efficiency > 0
        assert 0.0 < s.adsorption_efficiency <= 1.0

    def test_from_dict_overrides(self) -> None:
        s = Species.from_dict({"base_maintenance": 0.2, "max_age_range": [10, 20]})
        assert s.base_maintenance == 0.2
        assert s.max_age_range == (10, 20)
        assert s.maintenance_per_size == Species().maintenance_per_size


class TestSpawn:
    """Tests for randomised plant construction."""

    def test_spawn_draws_from_species_ranges(self, rng: Generator) -> None:
        for plant_id in range(20):
            plant = Plant.spawn(plant_id, 1.0, -2.0, rng)
            assert 0.02 <= plant.growth_rate < 0.03
            assert 80.0 <= plant.max_age < 120.0
            assert plant.alive
            assert plant.state is LifeState.ALIVE

    def test_height_derived_from_size(self) -> None:
        plant = Plant(plant_id=0, x=0.0, z=0.0, size=2.0, height_scale=5.0)
        assert plant.y == pytest.approx(5.1)
        assert plant.top == pytest.approx(6.1)


class TestLight:
    """Tests for light competition."""

    def test_alone_gets_full_light(self, centred_plant: Plant) -> None:
        assert centred_plant.compute_light([centred_plant.canopy()]) == 1.0

    def test_taller_overlapping_neighbour_shades(self, centred_plant: Plant) -> None:
        tall = Plant(plant_id=1, x=0.5, z=0.0, size=2.0)
        canopies = [centred_plant.canopy(), tall.canopy()]
        assert centred_plant.compute_light(canopies, 0.5) == pytest.approx(0.5)
        # The taller plant is not shaded by the shorter one
        assert tall.compute_light(canopies, 0.5) == 1.0

    def test_partial_overlap_scales_shading(self, centred_plant: Plant) -> None:
        tall = Plant(plant_id=1, x=1.0, z=0.0, size=2.0)
        # Tall footprint spans x 0..2, covering half of the small plant
        light = centred_plant.compute_light([tall.canopy()], 0.5)
        assert light == pytest.approx(1.0 - 0.5 * 0.5)

    def test_equal_height_does_not_shade(self, centred_plant: Plant) -> None:
        twin = Plant(plant_id=1, x=0.2, z=0.2, size=1.0)
        assert centred_plant.compute_light([twin.canopy()]) == 1.0

    def test_disjoint_taller_does_not_shade(self, centred_plant: Plant) -> None:
        tall = Plant(plant_id=1, x=5.0, z=5.0, size=2.0)
        assert centred_plant.compute_light([tall.canopy()]) == 1.0

    def test_dead_shade_switch(self, centred_plant: Plant) -> None:
        dead = Plant(plant_id=1, x=0.0, z=0.0, size=3.0, alive=False)
        canopies = [dead.canopy()]
        assert centred_plant.compute_light(canopies, 0.5) == pytest.approx(0.5)
        assert centred_plant.compute_light(
            canopies,
            0.5,
            dead_cast_shade=False,
        ) == 1.0

    def test_light_clamped_to_unit_interval(self, centred_plant: Plant) -> None:
        towers = [
            Plant(plant_id=i, x=0.0, z=0.0, size=2.0 + i).canopy() for i in range(1, 6)
        ]
        light = centred_plant.compute_light(towers, 1.0)
        assert light == 0.0


class TestGrowth:
    """Tests for the energy-budget update on uniform soil."""

    def test_first_frame_on_uniform_soil(
        self,
        centred_plant: Plant,
        uniform_soil: SoilGrid,
    ) -> None:
        records = centred_plant.grow(uniform_soil, 1.0, GrowthParams())
        # Four cells each a quarter covered
        assert len(records) == 4
        assert sum(r.overlap_fraction for r in records) == pytest.approx(1.0)
        # net energy = 0.025 - 0.01 > 0, so full-rate growth
        assert centred_plant.size == pytest.approx(1.0 + 0.025 * 0.01)
        assert centred_plant.health == pytest.approx(1.0 + 0.015 * 0.001 - 0.0005)
        assert centred_plant.age == pytest.approx(0.01)
        assert centred_plant.area_occupied == pytest.approx(1.0)
        assert centred_plant.nutrient_intake == pytest.approx(0.000125 * 0.8)
        for record in records:
            cell = uniform_soil.cell(record.cell_index)
            assert record.plant_id == 0
            assert record.amount_taken == pytest.approx(0.000125 * 0.25 * 0.8)
            for level in cell.levels():
                assert 0.0 < level < 1.0

    def test_untouched_cells_keep_levels(
        self,
        centred_plant: Plant,
        uniform_soil: SoilGrid,
    ) -> None:
        records = centred_plant.grow(uniform_soil, 1.0)
        used = {r.cell_index for r in records}
        for index, cell in enumerate(uniform_soil):
            if index not in used:
                assert cell.levels() == (1.0, 1.0, 1.0, 1.0)

    def test_energy_deficit_slows_growth(self, uniform_soil: SoilGrid) -> None:
        plant = Plant(
            plant_id=0,
            x=0.0,
            z=0.0,
            growth_rate=0.025,
            species=Species(base_maintenance=1.0),
        )
        plant.grow(uniform_soil, 1.0)
        assert plant.size == pytest.approx(1.0 + 0.025 * 0.01 * 0.2)
        assert plant.health < 1.0

    def test_shade_reduces_health_gain(self, uniform_soil: SoilGrid) -> None:
        lit = Plant(plant_id=0, x=-2.0, z=-2.0, growth_rate=0.025)
        shaded = Plant(plant_id=1, x=2.0, z=2.0, growth_rate=0.025)
        lit.grow(uniform_soil, 1.0)
        shaded.grow(uniform_soil, 0.5)
        assert shaded.health < lit.health

    def test_size_floor(self, uniform_soil: SoilGrid) -> None:
        plant = Plant(plant_id=0, x=0.0, z=0.0, size=0.05)
        plant.grow(uniform_soil, 1.0)
        assert plant.size == 0.2

    def test_off_grid_only_ages(self, uniform_soil: SoilGrid) -> None:
        plant = Plant(plant_id=0, x=100.0, z=100.0, size=1.0, health=0.7)
        before = uniform_soil.resource_array()
        records = plant.grow(uniform_soil, 1.0)
        assert records == []
        assert plant.size == 1.0
        assert plant.health == 0.7
        assert plant.age == pytest.approx(0.01)
        assert plant.alive
        assert (uniform_soil.resource_array() == before).all()

    def test_no_drift_without_rng(self, uniform_soil: SoilGrid) -> None:
        plant = Plant(plant_id=0, x=0.0, z=0.0)
        plant.grow(uniform_soil, 1.0, GrowthParams(drift_amplitude=0.5))
        assert (plant.x, plant.z) == (0.0, 0.0)

    def test_drift_stays_inside_grid(
        self,
        uniform_soil: SoilGrid,
        rng: Generator,
    ) -> None:
        plant = Plant(plant_id=0, x=4.9, z=-4.9)
        params = GrowthParams(drift_amplitude=2.0)
        lo, hi = uniform_soil.world_bounds()
        for _ in range(50):
            plant.grow(uniform_soil, 1.0, params, rng)
            assert lo <= plant.x <= hi
            assert lo <= plant.z <= hi


class TestLifeCycle:
    """Tests for the Alive -> Dead state machine."""

    def test_dies_of_old_age(self, uniform_soil: SoilGrid) -> None:
        plant = Plant(plant_id=0, x=0.0, z=0.0, max_age=1.0, age=0.995)
        plant.grow(uniform_soil, 1.0)
        assert not plant.alive
        assert plant.state is LifeState.DEAD

    def test_dies_when_health_exhausted(self, uniform_soil: SoilGrid) -> None:
        plant = Plant(
            plant_id=0,
            x=0.0,
            z=0.0,
            health=0.0001,
            species=Species(base_maintenance=1.0),
        )
        plant.grow(uniform_soil, 1.0)
        assert plant.health == 0.0
        assert not plant.alive

    def test_off_grid_plant_can_age_out(self, uniform_soil: SoilGrid) -> None:
        plant = Plant(plant_id=0, x=50.0, z=50.0, max_age=1.0, age=0.995)
        plant.grow(uniform_soil, 1.0)
        assert not plant.alive

    def test_dead_plant_is_frozen(self, uniform_soil: SoilGrid) -> None:
        plant = Plant(plant_id=0, x=0.0, z=0.0, max_age=1.0, age=0.995)
        plant.grow(uniform_soil, 1.0)
        frozen = (plant.x, plant.y, plant.z, plant.size, plant.age, plant.health)
        before = uniform_soil.resource_array()
        for _ in range(10):
            assert plant.grow(uniform_soil, 1.0) == []
        assert (plant.x, plant.y, plant.z, plant.size, plant.age, plant.health) == frozen
        assert not plant.alive
        assert (uniform_soil.resource_array() == before).all()


class TestColour:
    """Tests for the pure colour function."""

    def test_healthy_young_is_opaque_green(self) -> None:
        assert plant_colour(0.1, 1.0) == (50, 150, 50, 255)

    def test_fades_after_sixty_percent(self) -> None:
        assert plant_colour(0.7, 1.0)[3] == int(0.75 * 255)
        assert plant_colour(0.6, 1.0)[3] == 255
        assert plant_colour(1.0, 1.0)[3] == 0

    def test_unhealthy_turns_brown(self) -> None:
        r, g, _, _ = plant_colour(0.1, 0.0)
        assert (r, g) == (139, 110)

    def test_plant_colour_property(self, centred_plant: Plant) -> None:
        assert centred_plant.colour == plant_colour(0.0, 1.0)
