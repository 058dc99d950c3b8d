"""
Wind Field Particle Simulator

Particles advected by the superposed forces of several wind fields.

This package includes:
- Wind field variants: global (with periodic swing and turbulence),
  point source/sink, directional cone and rotating spiral
- A field registry with per-field enable flags
- A vectorized particle system with damping, a hard speed cap and
  toroidal boundary wrap
- Speed-derived particle colors for renderers
- Randomized field presets

Rendering and user interface are left to the caller: the particle
system exposes plain numpy arrays and the fields plain attributes.
"""

from windsim.core import (
    ParticleSystem,
    SystemConfig,
    FieldRegistry,
    SimulationClock,
    ParameterError,
    set_strict,
    speed_color,
    vec3,
)
from windsim.fields import (
    FieldType,
    WindField,
    GlobalWindField,
    PointWindField,
    ConeWindField,
    SpiralWindField,
    create_field,
)
from windsim.logging_config import setup_logging

__version__ = '0.1.0'

__all__ = [
    # Core classes
    'ParticleSystem',
    'SystemConfig',
    'FieldRegistry',
    'SimulationClock',
    'ParameterError',
    'set_strict',
    'speed_color',
    'vec3',
    # Fields
    'FieldType',
    'WindField',
    'GlobalWindField',
    'PointWindField',
    'ConeWindField',
    'SpiralWindField',
    'create_field',
    'setup_logging',
]
