"""
windsim Test Suite

Tests for the wind fields, the field registry and the particle system.

Shared helpers used by several test modules live here.
"""

import numpy as np

from windsim.core import ParticleSystem, SystemConfig
from windsim.fields import GlobalWindField


def make_system(count: int = 1, seed: int = 42, **overrides) -> ParticleSystem:
    """Seeded particle system with default bounds."""
    return ParticleSystem(SystemConfig(count=count, seed=seed, **overrides))


def place_particles(system: ParticleSystem, positions, velocities=None):
    """Overwrite the ensemble state with known values."""
    positions = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
    system.resize(positions.shape[0])
    system.positions[...] = positions
    if velocities is None:
        system.velocities[...] = 0.0
    else:
        system.velocities[...] = np.asarray(velocities, dtype=np.float64).reshape(-1, 3)


def steady_global_field(direction=(1.0, 0.0, 0.0), strength: float = 1.0) -> GlobalWindField:
    """Global wind without periodic swing or turbulence."""
    return GlobalWindField(
        direction=direction,
        strength=strength,
        noise_scale=0.0,
        sin_amplitude=0.0,
        time_offset=0.0
    )
