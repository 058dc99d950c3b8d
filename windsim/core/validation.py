"""
Validation Module

Guards applied wherever field or system parameters are mutated.

By default an invalid value is clamped to a safe one and a warning is
logged, so a bad slider value can never push NaN/Inf into the
simulation. In strict mode the same checks raise ParameterError
instead. Strict mode is enabled with the WINDSIM_STRICT environment
variable or with set_strict().
"""

import logging
import math
import os
from typing import Optional

import numpy as np

from .vector import FALLBACK_DIRECTION, is_finite

logger = logging.getLogger(__name__)

_TRUTHY = {'1', 'true', 'yes', 'on'}

_strict = os.environ.get('WINDSIM_STRICT', '').strip().lower() in _TRUTHY


class ParameterError(ValueError):
    """Raised in strict mode when a parameter is out of its valid range."""

    def __init__(self, name: str, value, reason: str):
        self.name = name
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {name}={value!r}: {reason}")


def set_strict(enabled: bool) -> None:
    """Enable or disable strict (raising) validation."""
    global _strict
    _strict = bool(enabled)


def is_strict() -> bool:
    """Return True if invalid parameters raise instead of being clamped."""
    return _strict


def _reject(name: str, value, reason: str, replacement):
    if _strict:
        raise ParameterError(name, value, reason)
    logger.warning(f"Invalid {name}={value!r} ({reason}); using {replacement!r}")
    return replacement


def check_scalar(name: str, value, default: float,
                 minimum: Optional[float] = None,
                 maximum: Optional[float] = None,
                 exclusive_minimum: bool = False,
                 allow_inf: bool = False,
                 floor: Optional[float] = None) -> float:
    """
    Validate a scalar parameter.

    Args:
        name: Parameter name used in messages
        value: Incoming value
        default: Replacement for non-numeric or NaN values
        minimum: Lower bound (clamped to when violated)
        maximum: Upper bound (clamped to when violated)
        exclusive_minimum: Treat ``minimum`` as a strict bound
        allow_inf: Accept +inf (used for unbounded ranges)
        floor: Replacement when an exclusive minimum is violated
            (defaults to ``default``)

    Returns:
        The value itself, or its clamped replacement
    """
    try:
        value = float(value)
    except (TypeError, ValueError):
        return _reject(name, value, "not a number", default)

    if math.isnan(value) or (math.isinf(value) and not (allow_inf and value > 0)):
        return _reject(name, value, "not finite", default)

    if minimum is not None:
        if exclusive_minimum and value <= minimum:
            return _reject(name, value, f"must be > {minimum}",
                           default if floor is None else floor)
        if not exclusive_minimum and value < minimum:
            return _reject(name, value, f"must be >= {minimum}", minimum)

    if maximum is not None and value > maximum:
        return _reject(name, value, f"must be <= {maximum}", maximum)

    return value


def check_direction(name: str, value) -> np.ndarray:
    """
    Validate and normalize a direction vector.

    Zero-length or non-finite vectors fall back to (0, 1, 0).
    """
    try:
        v = np.array(value, dtype=np.float64).reshape(-1)
    except (TypeError, ValueError):
        return _reject(name, value, "not a vector", FALLBACK_DIRECTION.copy())

    if v.shape != (3,):
        return _reject(name, value, "expected 3 components", FALLBACK_DIRECTION.copy())

    n = np.linalg.norm(v)
    if not np.isfinite(n):
        return _reject(name, value, "not finite", FALLBACK_DIRECTION.copy())
    if n < 1e-12:
        return _reject(name, value, "zero length", FALLBACK_DIRECTION.copy())

    return v / n


def check_point(name: str, value) -> np.ndarray:
    """Validate a position vector; non-finite input falls back to the origin."""
    try:
        v = np.array(value, dtype=np.float64).reshape(-1)
    except (TypeError, ValueError):
        return _reject(name, value, "not a vector", np.zeros(3))

    if v.shape != (3,):
        return _reject(name, value, "expected 3 components", np.zeros(3))
    if not is_finite(v):
        return _reject(name, value, "not finite", np.zeros(3))

    return v
