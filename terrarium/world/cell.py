"""SoilCell — a single tile of the soil grid.

Each cell holds the four resource channels plants draw from.  Levels
have no upper bound; uptake floors them at zero.
"""

from __future__ import annotations

from dataclasses import dataclass

RESOURCE_CHANNELS: tuple[str, ...] = ("water", "nitrogen", "phosphorus", "potassium")


@dataclass
class SoilCell:
    """A single tile in the soil grid.

    Attributes:
        x: Column position.
        z: Row position.
        water: Water level (>= 0).
        nitrogen: Nitrogen level (>= 0).
        phosphorus: Phosphorus level (>= 0).
        potassium: Potassium level (>= 0).

    ``x`` and ``z`` are fixed once the cell is constructed: ``__setattr__``
    rejects any later assignment to them, while the resource levels stay
    freely mutable.
    """

    x: int
    z: int
    water: float = 1.0
    nitrogen: float = 1.0
    phosphorus: float = 1.0
    potassium: float = 1.0

    def __setattr__(self, name: str, value: object) -> None:
        if name in ("x", "z") and name in self.__dict__:
            msg = f"SoilCell.{name} is immutable"
            raise AttributeError(msg)
        super().__setattr__(name, value)

    @property
    def nutrient_average(self) -> float:
        """Mean of the nitrogen, phosphorus and potassium levels."""
        return (self.nitrogen + self.phosphorus + self.potassium) / 3.0

    def levels(self) -> tuple[float, float, float, float]:
        """Return ``(water, nitrogen, phosphorus, potassium)``."""
        return (self.water, self.nitrogen, self.phosphorus, self.potassium)
