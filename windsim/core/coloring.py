"""
Coloring Module

Per-particle display color derived from speed. The renderer only reads
the result; the formula belongs to the simulation so that every
frontend brightens particles the same way.
"""

import numpy as np

# Color at rest and per-channel gain at full speed
BASE_COLOR = np.array([0.6, 0.7, 0.8], dtype=np.float32)
COLOR_GAIN = np.array([0.4, 0.3, 0.2], dtype=np.float32)


def speed_color(velocities: np.ndarray, max_speed: float, out: np.ndarray = None) -> np.ndarray:
    """
    Map velocities to RGB colors.

    speed_ratio = |v| / max_speed
    R = 0.6 + 0.4 * ratio
    G = 0.7 + 0.3 * ratio
    B = 0.8 + 0.2 * ratio

    Args:
        velocities: (N, 3) velocity array
        max_speed: Speed cap the ratio is measured against
        out: Optional (N, 3) array to write the colors into

    Returns:
        (N, 3) color array
    """
    velocities = np.asarray(velocities)
    speeds = np.linalg.norm(velocities, axis=1)
    ratio = speeds / max_speed if max_speed > 0 else np.zeros_like(speeds)

    colors = BASE_COLOR + ratio[:, None].astype(np.float32) * COLOR_GAIN
    if out is None:
        return colors
    out[...] = colors
    return out


def initial_colors(rng: np.random.Generator, count: int) -> np.ndarray:
    """
    Colors of freshly seeded particles: a random bluish white.

    R in [0.7, 1.0), G in [0.8, 1.0), B = 1.0
    """
    colors = np.empty((count, 3), dtype=np.float32)
    colors[:, 0] = 0.7 + rng.random(count) * 0.3
    colors[:, 1] = 0.8 + rng.random(count) * 0.2
    colors[:, 2] = 1.0
    return colors
