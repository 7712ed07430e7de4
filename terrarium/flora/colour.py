"""Plant colour as a pure function of age fraction and health.

Colour has no behavioural effect.  Display code asks for it on demand
rather than the plant storing it.
"""

from __future__ import annotations

_HEALTHY = (50, 150, 50)
_WILTED = (139, 110, 60)


def plant_colour(age_fraction: float, health: float) -> tuple[int, int, int, int]:
    """Return an RGBA colour for a plant.

    Hue blends from green towards brown as health drops.  Alpha stays
    opaque until 60% of the life span, then fades linearly to zero at
    the end of life; alpha is truncated, not rounded.

    Args:
        age_fraction: ``age / max_age``.
        health: Current health in [0, 1].

    Returns:
        ``(r, g, b, a)`` with each channel in 0..255.
    """
    h = min(1.0, max(0.0, health))
    r, g, b = (
        round(w + (c - w) * h) for c, w in zip(_HEALTHY, _WILTED, strict=True)
    )
    if age_fraction > 0.6:
        fade = 1.0 - (age_fraction - 0.6) / 0.4
        alpha = int(min(1.0, max(0.0, fade)) * 255)
    else:
        alpha = 255
    return (r, g, b, alpha)
