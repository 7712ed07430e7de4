"""Shared fixtures for the Terrarium test suite."""

from __future__ import annotations

import numpy as np
import pytest
from numpy.random import Generator

from terrarium.flora.plant import Plant
from terrarium.simulation.config import SimulationConfig
from terrarium.world.soil import SoilGrid


@pytest.fixture
def rng() -> Generator:
    """A deterministic random generator for reproducible tests."""
    return np.random.default_rng(seed=12345)


@pytest.fixture
def uniform_soil() -> SoilGrid:
    """A 10x10 grid with every resource level at 1.0."""
    return SoilGrid(grid_size=10, cell_size=1.0)


@pytest.fixture
def centred_plant() -> Plant:
    """A size-1 plant sitting on the grid origin."""
    return Plant(plant_id=0, x=0.0, z=0.0, size=1.0, growth_rate=0.025, max_age=100.0)


@pytest.fixture
def default_config() -> SimulationConfig:
    """Default simulation config (no YAML file needed)."""
    return SimulationConfig()


@pytest.fixture
def small_config() -> SimulationConfig:
    """A small, fast config with a handful of plants."""
    return SimulationConfig(seed=777, grid_size=12, initial_plants=8)
