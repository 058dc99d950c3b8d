"""
Particle System Module

Owns the particle ensemble and advances it through the wind fields.

The ensemble is stored as a structure of arrays: ``positions``,
``velocities`` and ``colors`` are parallel (count, 3) buffers, row i
being the full state of particle i. A step evaluates each enabled
field once over the whole ensemble, then integrates every particle:

    v <- 0.95 v
    v <- v + F * dt * speed_factor * 1.5
    |v| <= 12 * speed_factor
    x <- x + v dt          (toroidal wrap on the bounding box)
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import numpy as np

from .clock import SimulationClock
from .coloring import initial_colors, speed_color
from .registry import FieldRegistry
from .validation import check_scalar

logger = logging.getLogger(__name__)

# Velocity retained per step. Applied per step, not per second, so the
# effective drag depends on the frame rate.
DAMPING = 0.95

# Gain applied to the summed field force
FORCE_GAIN = 1.5

# Speed cap at speed_factor = 1
MAX_SPEED_BASE = 12.0

# Full width of the uniform spread of initial velocity components
INITIAL_VELOCITY_SPREAD = 0.1

BUFFER_DTYPE = np.float32


@dataclass
class SystemConfig:
    """Configuration for a particle system."""
    count: int = 5000                                         # Number of particles
    particle_size: float = 0.5                                # Point size read by the renderer
    speed_factor: float = 1.0                                 # Scales force response and speed cap
    bounds_min: Tuple[float, float, float] = (-50.0, -50.0, -50.0)
    bounds_max: Tuple[float, float, float] = (50.0, 50.0, 50.0)
    damping: float = DAMPING                                  # Velocity retained per step
    force_gain: float = FORCE_GAIN                            # Gain on the summed force
    max_speed_base: float = MAX_SPEED_BASE                    # Speed cap at speed_factor 1
    seed: Optional[int] = None                                # Seed for particle placement

    def __post_init__(self):
        """Validate configuration."""
        if self.count < 0:
            raise ValueError("Particle count must be non-negative")
        if self.particle_size <= 0:
            raise ValueError("Particle size must be positive")
        if self.speed_factor <= 0:
            raise ValueError("Speed factor must be positive")
        if len(self.bounds_min) != 3 or len(self.bounds_max) != 3:
            raise ValueError("Bounds must have 3 components")
        if any(lo >= hi for lo, hi in zip(self.bounds_min, self.bounds_max)):
            raise ValueError("Bounding box must have positive extent on every axis")
        if not 0.0 <= self.damping <= 1.0:
            raise ValueError("Damping must be in [0, 1]")
        if self.force_gain < 0:
            raise ValueError("Force gain must be non-negative")
        if self.max_speed_base <= 0:
            raise ValueError("Max speed must be positive")


class ParticleSystem:
    """
    Wind-driven particle ensemble.

    Attributes:
        positions: (count, 3) particle positions
        velocities: (count, 3) particle velocities
        colors: (count, 3) speed-derived RGB colors
        fields: Registry of the wind fields acting on the particles
        clock: Simulation clock handed to the force laws
    """

    def __init__(self, config: Optional[SystemConfig] = None,
                 fields: Optional[FieldRegistry] = None):
        """
        Initialize the particle system.

        Args:
            config: System configuration (optional)
            fields: Existing field registry to share (optional)
        """
        if config is None:
            config = SystemConfig()

        self.config = config
        self.fields = fields if fields is not None else FieldRegistry()
        self.clock = SimulationClock()
        self.rng = np.random.default_rng(config.seed)

        # Rounded through the buffer dtype so wrapped positions land exactly on a face
        self.bounds_min = np.array(config.bounds_min, dtype=BUFFER_DTYPE).astype(np.float64)
        self.bounds_max = np.array(config.bounds_max, dtype=BUFFER_DTYPE).astype(np.float64)

        self.particle_size = float(config.particle_size)
        self.speed_factor = float(config.speed_factor)
        self._disposed = False

        self.positions, self.velocities, self.colors = self._seed_particles(config.count)

        logger.info(f"ParticleSystem created with {config.count} particles "
                    f"in box {self.bounds_min.tolist()} .. {self.bounds_max.tolist()}")

    @property
    def count(self) -> int:
        """Number of particles."""
        return self.positions.shape[0]

    @property
    def max_speed(self) -> float:
        """Current speed cap."""
        return self.config.max_speed_base * self.speed_factor

    def _seed_particles(self, n: int) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Fresh state for n particles.

        Positions are uniform in the bounding box, velocities small and
        random, colors a random bluish white.
        """
        extent = self.bounds_max - self.bounds_min
        positions = (self.bounds_min + self.rng.random((n, 3)) * extent).astype(BUFFER_DTYPE)
        velocities = ((self.rng.random((n, 3)) - 0.5) * INITIAL_VELOCITY_SPREAD).astype(BUFFER_DTYPE)
        colors = initial_colors(self.rng, n)
        return positions, velocities, colors

    def _check_alive(self):
        if self._disposed:
            raise RuntimeError("ParticleSystem has been disposed")

    # -------------------------------------------------------------------------
    # Parameters
    # -------------------------------------------------------------------------

    def resize(self, new_count: int):
        """
        Change the number of particles.

        Particles below min(old, new) keep their state; new slots are
        freshly seeded; shrinking truncates.

        Raises:
            MemoryError: If the new buffers cannot be allocated. The
                current ensemble is left untouched.
        """
        self._check_alive()
        new_count = int(check_scalar('count', new_count, default=self.count, minimum=0))
        old_count = self.count
        if new_count == old_count:
            return

        keep = min(old_count, new_count)
        try:
            positions = np.empty((new_count, 3), dtype=BUFFER_DTYPE)
            velocities = np.empty((new_count, 3), dtype=BUFFER_DTYPE)
            colors = np.empty((new_count, 3), dtype=BUFFER_DTYPE)
            fresh = self._seed_particles(new_count - keep) if new_count > keep else None
        except MemoryError:
            logger.error(f"Could not allocate buffers for {new_count} particles")
            raise

        positions[:keep] = self.positions[:keep]
        velocities[:keep] = self.velocities[:keep]
        colors[:keep] = self.colors[:keep]

        if fresh is not None:
            positions[keep:], velocities[keep:], colors[keep:] = fresh

        self.positions, self.velocities, self.colors = positions, velocities, colors
        logger.info(f"Resized particle system from {old_count} to {new_count}")

    def set_count(self, new_count: int):
        """Alias of resize()."""
        self.resize(new_count)

    def set_particle_size(self, size: float):
        """Set the point size read by the renderer."""
        self.particle_size = check_scalar(
            'particle_size', size, default=self.particle_size,
            minimum=0.0, exclusive_minimum=True
        )

    def set_speed_factor(self, speed_factor: float):
        """Set the speed factor; takes effect on the next step."""
        self.speed_factor = check_scalar(
            'speed_factor', speed_factor, default=self.speed_factor,
            minimum=0.0, exclusive_minimum=True, floor=1e-3
        )

    def add_field(self, field):
        """Register a wind field. Returns the field."""
        return self.fields.add(field)

    def remove_field(self, field_id: str):
        """Unregister a wind field by id; unknown ids are ignored."""
        return self.fields.remove(field_id)

    # -------------------------------------------------------------------------
    # Simulation
    # -------------------------------------------------------------------------

    def compute_forces(self, positions: np.ndarray, time: float) -> np.ndarray:
        """
        Resultant force of all enabled fields at the given positions.

        Args:
            positions: (N, 3) positions
            time: Simulation clock value

        Returns:
            (N, 3) summed force vectors
        """
        resultant = np.zeros((positions.shape[0], 3))
        for field in self.fields.enabled_fields():
            resultant += field.force_at(positions, time)
        return resultant

    def step(self, delta_time: float):
        """
        Advance every particle by one integration step.

        Args:
            delta_time: Step length in seconds
        """
        self._check_alive()
        dt = check_scalar('delta_time', delta_time, default=0.0, minimum=0.0)
        time = self.clock.advance(dt)

        # Publish time-dependent field state (the global wind direction)
        self.fields.for_each_enabled(lambda field: field.advance(time))

        if self.count == 0:
            return

        positions = self.positions.astype(np.float64)
        velocities = self.velocities.astype(np.float64)

        resultant = self.compute_forces(positions, time)

        velocities *= self.config.damping
        velocities += resultant * (dt * self.speed_factor * self.config.force_gain)

        # Hard speed cap
        max_speed = self.max_speed
        speeds = np.linalg.norm(velocities, axis=1)
        too_fast = speeds > max_speed
        if np.any(too_fast):
            velocities[too_fast] *= (max_speed / speeds[too_fast])[:, None]

        positions += velocities * dt

        # Toroidal wrap: leaving through one face re-enters at the opposite one
        lo, hi = self.bounds_min, self.bounds_max
        positions = np.where(positions < lo, hi, np.where(positions > hi, lo, positions))

        self.positions[...] = positions
        self.velocities[...] = velocities
        speed_color(velocities, max_speed, out=self.colors)

        logger.debug(f"Step {self.clock.step_count}: dt={dt:.4f}, t={time:.3f}, "
                     f"max speed {np.max(np.linalg.norm(velocities, axis=1)):.3f}")

    def reset(self):
        """Re-seed every particle and rewind the clock."""
        self._check_alive()
        self.positions, self.velocities, self.colors = self._seed_particles(self.count)
        self.clock.reset()
        logger.info(f"Reset {self.count} particles")

    def statistics(self) -> Dict[str, Any]:
        """
        Summary of the current ensemble.

        Returns:
            Dictionary with particle count, speed statistics, field counts
            and elapsed simulation time
        """
        speeds = np.linalg.norm(self.velocities, axis=1) if self.count else np.zeros(1)
        return {
            'num_particles': self.count,
            'mean_speed': float(np.mean(speeds)),
            'max_speed': float(np.max(speeds)),
            'speed_cap': self.max_speed,
            'num_fields': len(self.fields),
            'num_enabled_fields': len(self.fields.enabled_fields()),
            'elapsed_time': self.clock.time,
            'steps': self.clock.step_count,
        }

    def dispose(self):
        """Release the particle buffers. The system cannot be stepped afterwards."""
        if self._disposed:
            return
        self.positions = np.empty((0, 3), dtype=BUFFER_DTYPE)
        self.velocities = np.empty((0, 3), dtype=BUFFER_DTYPE)
        self.colors = np.empty((0, 3), dtype=BUFFER_DTYPE)
        self._disposed = True
        logger.info("ParticleSystem disposed")

    def __repr__(self) -> str:
        return (f"ParticleSystem(count={self.count}, fields={len(self.fields)}, "
                f"speed_factor={self.speed_factor})")
