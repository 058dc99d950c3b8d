"""
Clock Module

Explicit simulation clock. The particle system advances it once per
step and hands the current value to every field's force law, so no
field keeps a hidden "last update time" of its own.
"""

from dataclasses import dataclass
import math


@dataclass
class SimulationClock:
    """
    Accumulates simulated time.

    Attributes:
        time: Total elapsed simulation time in seconds
        step_count: Number of advances so far
    """
    time: float = 0.0
    step_count: int = 0

    def advance(self, delta_time: float) -> float:
        """
        Advance the clock and return the new time.

        Non-finite or negative deltas do not move the clock.
        """
        if math.isfinite(delta_time) and delta_time > 0.0:
            self.time += delta_time
        self.step_count += 1
        return self.time

    def reset(self):
        """Rewind to zero."""
        self.time = 0.0
        self.step_count = 0
