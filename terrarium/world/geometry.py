"""Geometry — axis-aligned square overlap in the horizontal plane.

Plant canopies and soil cells are both modelled as squares on the
x/z plane described by a centre and a half extent.  The overlap area
between two such squares drives both light competition and the soil
footprint a plant draws from.
"""

from __future__ import annotations

from dataclasses import dataclass


def overlap_area(
    center_a: tuple[float, float],
    half_a: float,
    center_b: tuple[float, float],
    half_b: float,
) -> float:
    """Return the overlap area of two axis-aligned squares.

    Args:
        center_a: ``(x, z)`` centre of the first square.
        half_a: Half edge length of the first square.
        center_b: ``(x, z)`` centre of the second square.
        half_b: Half edge length of the second square.

    Returns:
        The intersecting area, or 0.0 when the squares are disjoint or
        only touch along an edge.
    """
    ax, az = center_a
    bx, bz = center_b
    dx = min(ax + half_a, bx + half_b) - max(ax - half_a, bx - half_b)
    if dx <= 0.0:
        return 0.0
    dz = min(az + half_a, bz + half_b) - max(az - half_a, bz - half_b)
    if dz <= 0.0:
        return 0.0
    return dx * dz


@dataclass(frozen=True)
class Square:
    """An axis-aligned square footprint.

    Attributes:
        x: Centre on the x axis.
        z: Centre on the z axis.
        half: Half edge length.
    """

    x: float
    z: float
    half: float

    @property
    def center(self) -> tuple[float, float]:
        return (self.x, self.z)

    @property
    def area(self) -> float:
        edge = 2.0 * self.half
        return edge * edge

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        """Return ``(min_x, max_x, min_z, max_z)``."""
        return (
            self.x - self.half,
            self.x + self.half,
            self.z - self.half,
            self.z + self.half,
        )

    def overlap(self, other: Square) -> float:
        """Return the area shared with ``other``."""
        return overlap_area(self.center, self.half, other.center, other.half)
