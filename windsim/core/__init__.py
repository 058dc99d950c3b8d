"""
windsim Core Module

This module contains the vector helpers, the simulation clock, the field
registry and the particle system that integrates particles through the
wind fields.
"""

from .vector import vec3, length, normalize, dot, cross
from .validation import ParameterError, set_strict, is_strict
from .clock import SimulationClock
from .registry import FieldRegistry
from .coloring import speed_color
from .particle_system import ParticleSystem, SystemConfig

__all__ = [
    'vec3',
    'length',
    'normalize',
    'dot',
    'cross',
    'ParameterError',
    'set_strict',
    'is_strict',
    'SimulationClock',
    'FieldRegistry',
    'speed_color',
    'ParticleSystem',
    'SystemConfig',
]
