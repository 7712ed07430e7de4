"""SoilGrid — the spatial container for soil resources.

The grid owns ``grid_size * grid_size`` cells stored in a flat list
indexed as ``z * grid_size + x``.  World coordinates are centred on the
origin: cell ``(x, z)`` spans ``x * cell_size - grid_size / 2`` to
``(x + 1) * cell_size - grid_size / 2`` on each axis.

Plants query the grid for the cells under their canopy footprint, read
resource levels, and deplete them as they grow.
"""

from __future__ import annotations

import math
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from numpy.random import Generator

from terrarium.exceptions import ConfigurationError
from terrarium.world.cell import RESOURCE_CHANNELS, SoilCell
from terrarium.world.geometry import Square, overlap_area


@dataclass
class SoilGrid:
    """A square grid of soil cells.

    Attributes:
        grid_size: Number of cells along each edge.
        cell_size: Edge length of a single cell in world units.
        cells: Flat list of cells indexed as ``z * grid_size + x``.
    """

    grid_size: int
    cell_size: float = 1.0
    cells: list[SoilCell] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Validate dimensions and create default cells."""
        if self.grid_size <= 0:
            msg = f"grid_size must be positive, got {self.grid_size}"
            raise ConfigurationError(msg)
        if self.cell_size <= 0:
            msg = f"cell_size must be positive, got {self.cell_size}"
            raise ConfigurationError(msg)
        self.cells = [
            SoilCell(x=x, z=z)
            for z in range(self.grid_size)
            for x in range(self.grid_size)
        ]

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self) -> Iterator[SoilCell]:
        return iter(self.cells)

    @property
    def cell_area(self) -> float:
        return self.cell_size * self.cell_size

    def index_of(self, x: int, z: int) -> int:
        """Return the flat index for grid coordinates ``(x, z)``.

        Raises:
            IndexError: If coordinates are out of bounds.
        """
        if not (0 <= x < self.grid_size and 0 <= z < self.grid_size):
            msg = f"({x}, {z}) out of bounds for {self.grid_size}x{self.grid_size}"
            raise IndexError(msg)
        return z * self.grid_size + x

    def cell_at(self, x: int, z: int) -> SoilCell:
        """Return the cell at grid coordinates ``(x, z)``.

        Raises:
            IndexError: If coordinates are out of bounds.
        """
        return self.cells[self.index_of(x, z)]

    def cell(self, index: int) -> SoilCell:
        """Return the cell at a flat index.

        Raises:
            IndexError: If the index is negative or past the last cell.
        """
        if not 0 <= index < len(self.cells):
            msg = f"cell index {index} out of range 0..{len(self.cells) - 1}"
            raise IndexError(msg)
        return self.cells[index]

    def cell_square(self, index: int) -> Square:
        """Return the world-space footprint of the cell at ``index``."""
        cell = self.cell(index)
        half = self.cell_size / 2.0
        offset = self.grid_size / 2.0
        return Square(
            x=cell.x * self.cell_size - offset + half,
            z=cell.z * self.cell_size - offset + half,
            half=half,
        )

    def world_bounds(self) -> tuple[float, float]:
        """Return the ``(min, max)`` world coordinate covered on each axis."""
        lo = -self.grid_size / 2.0
        return lo, lo + self.grid_size * self.cell_size

    def populate(
        self,
        rng: Generator,
        *,
        level_range: tuple[float, float] = (0.5, 1.0),
    ) -> None:
        """Draw every resource channel of every cell uniformly.

        Args:
            rng: Seeded random generator.
            level_range: ``[low, high)`` range for the initial levels.
        """
        lo, hi = level_range
        for cell in self.cells:
            for channel in RESOURCE_CHANNELS:
                setattr(cell, channel, float(rng.uniform(lo, hi)))

    def cell_indices_under_footprint(
        self,
        center: tuple[float, float],
        half_extent: float,
    ) -> set[int]:
        """Return indices of every cell the square footprint could touch.

        The bounding box is computed with ``math.floor`` so footprints
        reaching into negative grid coordinates are not pulled one cell
        inward, then clipped to the grid.

        Args:
            center: ``(x, z)`` centre of the footprint in world units.
            half_extent: Half edge length of the footprint.

        Returns:
            Set of flat cell indices (empty if the footprint is off-grid).
        """
        offset = self.grid_size / 2.0
        cx, cz = center
        min_x = max(0, math.floor((cx - half_extent + offset) / self.cell_size))
        max_x = min(
            self.grid_size - 1,
            math.floor((cx + half_extent + offset) / self.cell_size),
        )
        min_z = max(0, math.floor((cz - half_extent + offset) / self.cell_size))
        max_z = min(
            self.grid_size - 1,
            math.floor((cz + half_extent + offset) / self.cell_size),
        )
        return {
            z * self.grid_size + x
            for z in range(min_z, max_z + 1)
            for x in range(min_x, max_x + 1)
        }

    def overlap_fraction(
        self,
        index: int,
        center: tuple[float, float],
        half_extent: float,
    ) -> float:
        """Return the share of cell ``index`` covered by a footprint, in [0, 1]."""
        cell = self.cell_square(index)
        area = overlap_area(center, half_extent, cell.center, cell.half)
        return min(1.0, max(0.0, area / self.cell_area))

    def deplete(self, index: int, amount: float, depletion_rate: float) -> None:
        """Remove ``amount * depletion_rate`` from all four channels.

        Levels are floored at zero.
        """
        cell = self.cell(index)
        loss = amount * depletion_rate
        for channel in RESOURCE_CHANNELS:
            setattr(cell, channel, max(0.0, getattr(cell, channel) - loss))

    def resource_average(self, index: int) -> tuple[float, float]:
        """Return ``(nutrient_average, water)`` for the cell at ``index``."""
        cell = self.cell(index)
        return cell.nutrient_average, cell.water

    def resource_array(self) -> NDArray[np.float64]:
        """Return an ``(n_cells, 4)`` snapshot of all resource levels.

        Columns follow ``RESOURCE_CHANNELS`` order and rows follow the
        flat cell index.
        """
        return np.array([cell.levels() for cell in self.cells], dtype=np.float64)
