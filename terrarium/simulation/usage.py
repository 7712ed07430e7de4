"""Per-frame resource-usage records.

Every growth update reports which soil cells a plant drew from and how
much it took.  The engine collects these into a fresh ``FrameUsage`` each
frame and hands it to whoever is logging; nothing here is kept in
simulation state between frames.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field


@dataclass(frozen=True)
class UsageRecord:
    """One plant's draw on one soil cell during a single frame.

    Attributes:
        cell_index: Flat index of the soil cell.
        plant_id: Id of the drawing plant.
        overlap_fraction: Share of the cell covered by the plant's footprint.
        amount_taken: Resource amount taken before the depletion rate applies.
    """

    cell_index: int
    plant_id: int
    overlap_fraction: float
    amount_taken: float


@dataclass
class FrameUsage:
    """All usage records produced during one frame, in update order.

    Attributes:
        frame: Frame number the records belong to.
        records: Records in the order plants were grown.
    """

    frame: int
    records: list[UsageRecord] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[UsageRecord]:
        return iter(self.records)

    def extend(self, records: Iterable[UsageRecord]) -> None:
        self.records.extend(records)

    def by_cell(self) -> dict[int, list[UsageRecord]]:
        """Group records by soil cell, preserving update order within a cell."""
        grouped: dict[int, list[UsageRecord]] = {}
        for record in self.records:
            grouped.setdefault(record.cell_index, []).append(record)
        return grouped

    def occupancy(self, cell_index: int) -> int:
        """Return how many plants drew from ``cell_index`` this frame."""
        return sum(1 for r in self.records if r.cell_index == cell_index)

    def intake_by_plant(self) -> dict[int, float]:
        """Return the total amount each plant took this frame."""
        totals: dict[int, float] = {}
        for record in self.records:
            totals[record.plant_id] = totals.get(record.plant_id, 0.0) + record.amount_taken
        return totals
