"""
Field presets.

Ready-made fields with the tuned defaults used when a user adds a field
to a running scene: a random placement near the center of the default
box and parameters strong enough to be visible at once.
"""

import math
from typing import Optional

import numpy as np

from . import ConeWindField, GlobalWindField, PointWindField, SpiralWindField
from windsim.core.vector import VectorLike

# Half-width of the region new fields are placed in
SPAWN_HALF_WIDTH = 15.0


def _spawn_position(rng: np.random.Generator) -> np.ndarray:
    return (rng.random(3) - 0.5) * (2.0 * SPAWN_HALF_WIDTH)


def default_global_field(direction: VectorLike = (1.0, 0.0, 0.0), strength: float = 1.0,
                         rng: Optional[np.random.Generator] = None) -> GlobalWindField:
    """Global wind with the default swing and turbulence settings."""
    return GlobalWindField(direction=direction, strength=strength, rng=rng)


def random_point_field(rng: Optional[np.random.Generator] = None) -> PointWindField:
    """Point source or sink (coin flip) near the center, range 12."""
    rng = rng if rng is not None else np.random.default_rng()
    field = PointWindField(
        position=_spawn_position(rng),
        strength=1.5,
        is_outward=bool(rng.random() > 0.5)
    )
    field.max_distance = 12.0
    return field


def random_cone_field(rng: Optional[np.random.Generator] = None) -> ConeWindField:
    """Cone pointing in a random direction, 36 degree half-angle, range 25."""
    rng = rng if rng is not None else np.random.default_rng()
    position = _spawn_position(rng)
    direction = rng.random(3) - 0.5
    field = ConeWindField(
        position=position,
        direction=direction,
        strength=20.0,
        angle=math.pi / 5
    )
    field.max_distance = 25.0
    return field


def random_spiral_field(rng: Optional[np.random.Generator] = None) -> SpiralWindField:
    """Upward spiral rooted near the floor of the default box, radius 8."""
    rng = rng if rng is not None else np.random.default_rng()
    x, _, z = _spawn_position(rng)
    return SpiralWindField(
        position=(x, -20.0, z),
        direction=(0.0, 1.0, 0.0),
        strength=2.0,
        radius=8.0,
        rotation_speed=1.0
    )


__all__ = [
    'SPAWN_HALF_WIDTH',
    'default_global_field',
    'random_point_field',
    'random_cone_field',
    'random_spiral_field',
]
