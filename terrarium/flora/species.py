"""Species — fixed physiological constants shared by a plant population.

A Species defines the energy-budget coefficients every plant carries
from construction, plus the ranges from which per-plant growth rate and
life span are drawn.
"""

from __future__ import annotations

from dataclasses import dataclass

from terrarium.exceptions import ConfigurationError


@dataclass(frozen=True)
class Species:
    """Physiological profile for a plant population.

    Attributes:
        photosynthetic_efficiency: Scales light x nutrient x water into
            energy production.
        base_maintenance: Fixed energy cost per frame.
        maintenance_per_size: Additional energy cost per unit of size.
        adsorption_efficiency: Fraction of resource demand actually
            drawn from the soil.
        growth_rate_range: ``[low, high)`` range for per-plant growth rate.
        max_age_range: ``[low, high)`` range for per-plant life span.
    """

    photosynthetic_efficiency: float = 1.0
    base_maintenance: float = 0.005
    maintenance_per_size: float = 0.005
    adsorption_efficiency: float = 0.8
    growth_rate_range: tuple[float, float] = (0.02, 0.03)
    max_age_range: tuple[float, float] = (80.0, 120.0)

    def __post_init__(self) -> None:
        """Reject constants that would break the energy budget.

        Raises:
            ConfigurationError: If a coefficient or range is out of bounds.
        """
        checks = [
            (
                self.photosynthetic_efficiency >= 0,
                "photosynthetic_efficiency must not be negative, "
                f"got {self.photosynthetic_efficiency}",
            ),
            (
                self.base_maintenance >= 0,
                f"base_maintenance must not be negative, got {self.base_maintenance}",
            ),
            (
                self.maintenance_per_size >= 0,
                "maintenance_per_size must not be negative, "
                f"got {self.maintenance_per_size}",
            ),
            (
                self.adsorption_efficiency >= 0,
                "adsorption_efficiency must not be negative, "
                f"got {self.adsorption_efficiency}",
            ),
        ]
        for ok, msg in checks:
            if not ok:
                raise ConfigurationError(msg)
        _check_range("growth_rate_range", self.growth_rate_range, positive=False)
        _check_range("max_age_range", self.max_age_range, positive=True)

    @classmethod
    def from_dict(cls, data: dict) -> Species:
        """Build a Species from a plain mapping, e.g. a YAML section.

        Unknown keys are ignored; missing keys keep their defaults.

        Raises:
            ConfigurationError: If ``data`` is not a mapping or a range is
                not a list of two numbers.
        """
        if not isinstance(data, dict):
            msg = f"species section must be a mapping, got {type(data).__name__}"
            raise ConfigurationError(msg)
        defaults = cls()
        return cls(
            photosynthetic_efficiency=data.get(
                "photosynthetic_efficiency",
                defaults.photosynthetic_efficiency,
            ),
            base_maintenance=data.get("base_maintenance", defaults.base_maintenance),
            maintenance_per_size=data.get(
                "maintenance_per_size",
                defaults.maintenance_per_size,
            ),
            adsorption_efficiency=data.get(
                "adsorption_efficiency",
                defaults.adsorption_efficiency,
            ),
            growth_rate_range=_as_pair(
                "growth_rate_range",
                data.get("growth_rate_range", defaults.growth_rate_range),
            ),
            max_age_range=_as_pair(
                "max_age_range",
                data.get("max_age_range", defaults.max_age_range),
            ),
        )


def _check_range(name: str, bounds: tuple[float, float], *, positive: bool) -> None:
    """Require a ``(low, high)`` pair with ``low <= high`` above the floor."""
    if len(bounds) != 2:
        msg = f"{name} must be a (low, high) pair, got {bounds!r}"
        raise ConfigurationError(msg)
    lo, hi = bounds
    if lo > hi:
        msg = f"{name} low end {lo} exceeds high end {hi}"
        raise ConfigurationError(msg)
    if positive and lo <= 0:
        msg = f"{name} must be positive, got {bounds!r}"
        raise ConfigurationError(msg)
    if not positive and lo < 0:
        msg = f"{name} must not be negative, got {bounds!r}"
        raise ConfigurationError(msg)


def _as_pair(name: str, value: object) -> tuple[float, float]:
    if not isinstance(value, (list, tuple)):
        msg = f"{name} must be a [low, high] list, got {value!r}"
        raise ConfigurationError(msg)
    return tuple(value)
