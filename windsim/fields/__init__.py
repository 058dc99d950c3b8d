"""
Wind Fields Module

Spatial force generators that push particles around. Every variant
implements the same force law interface:

    force_at(positions, time) -> forces

evaluated over a whole (N, 3) batch of particle positions at once.
``time`` is the simulation clock; only the global field reads it.
"""

import itertools
import logging
import math
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Optional, Union

import numpy as np

from windsim.core.validation import check_direction, check_point, check_scalar
from windsim.core.vector import (
    VectorLike, as_batch, normalize, normalize_rows, orthonormal_basis, project_onto_plane
)

logger = logging.getLogger(__name__)

# Below this distance from a field's focus the force is zero, so that
# normalizing the offset never divides by (almost) zero.
MIN_DISTANCE = 0.1

# Tuned gain of the cone field
CONE_GAIN = 3.0

# Fraction of the spiral strength applied along its axis
SPIRAL_LIFT = 0.5

_id_counter = itertools.count(1)


class FieldType(Enum):
    """Tag identifying the shape of a wind field."""
    GLOBAL = "global"
    POINT = "point"
    CONE = "cone"
    SPIRAL = "spiral"


class WindField(ABC):
    """
    Abstract base class for wind fields.

    Attributes:
        id: Process-unique identifier, fixed at creation
        position: Origin of the field
        strength: Non-negative force multiplier
        enabled: Disabled fields contribute no force
        max_distance: Cutoff beyond which the field does nothing
    """

    field_type: FieldType
    DEFAULT_MAX_DISTANCE = 10.0
    UNBOUNDED = False

    def __init__(self, position: Optional[VectorLike] = None, strength: float = 1.0):
        """
        Initialize shared field state.

        Args:
            position: Field origin, defaults to the world origin
            strength: Force multiplier
        """
        self._id = f"{self.field_type.value}-{next(_id_counter)}"
        self._position = np.zeros(3)
        self._strength = 1.0
        self._max_distance = self.DEFAULT_MAX_DISTANCE
        self.enabled = True

        if position is not None:
            self.position = position
        self.strength = strength

    @property
    def id(self) -> str:
        """Identifier used by the registry and by UI bookkeeping."""
        return self._id

    @property
    def position(self) -> np.ndarray:
        return self._position.copy()

    @position.setter
    def position(self, value: VectorLike):
        self._position = check_point('position', value)

    @property
    def strength(self) -> float:
        return self._strength

    @strength.setter
    def strength(self, value: float):
        self._strength = check_scalar('strength', value, default=1.0, minimum=0.0)

    @property
    def max_distance(self) -> float:
        return self._max_distance

    @max_distance.setter
    def max_distance(self, value: float):
        self._max_distance = check_scalar(
            'max_distance', value,
            default=self.DEFAULT_MAX_DISTANCE,
            minimum=0.0,
            exclusive_minimum=True,
            allow_inf=self.UNBOUNDED,
            floor=MIN_DISTANCE
        )

    def distance_to(self, positions: VectorLike) -> Union[float, np.ndarray]:
        """Distance from the field origin to one point or to each row of a batch."""
        batch, single = as_batch(positions)
        d = np.linalg.norm(batch - self._position, axis=1)
        return float(d[0]) if single else d

    def attenuation(self, distance):
        """
        Linear falloff: 1 at the origin, 0 at max_distance and beyond.

        Works on scalars and arrays alike.
        """
        d = np.asarray(distance, dtype=np.float64)
        att = np.where(d >= self._max_distance, 0.0, 1.0 - d / self._max_distance)
        return float(att) if att.ndim == 0 else att

    def force_at(self, positions: VectorLike, time: float = 0.0) -> np.ndarray:
        """
        Force exerted on particles at the given positions.

        Args:
            positions: A single point (3,) or a batch (N, 3)
            time: Simulation clock value in seconds

        Returns:
            Force vectors with the same shape as ``positions``
        """
        batch, single = as_batch(positions)
        forces = self._forces(batch, time)
        return forces[0] if single else forces

    @abstractmethod
    def _forces(self, positions: np.ndarray, time: float) -> np.ndarray:
        """
        Compute forces for an (N, 3) batch of positions.

        Returns:
            (N, 3) array of force vectors
        """
        pass

    def advance(self, time: float):
        """Bring time-dependent public state up to ``time``. No-op by default."""
        pass

    def describe(self) -> Dict[str, Any]:
        """Public attributes as plain Python values."""
        return {
            'id': self._id,
            'type': self.field_type.value,
            'enabled': bool(self.enabled),
            'position': self._position.tolist(),
            'strength': self._strength,
            'max_distance': self._max_distance,
        }

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(id={self._id}, pos={self._position}, "
                f"strength={self._strength:.3f}, enabled={self.enabled})")


class DirectionalMixin:
    """Unit ``direction`` attribute, renormalized on every assignment."""

    _direction: np.ndarray

    @property
    def direction(self) -> np.ndarray:
        return self._direction.copy()

    @direction.setter
    def direction(self, value: VectorLike):
        self._direction = check_direction('direction', value)


class GlobalWindField(DirectionalMixin, WindField):
    """
    Uniform wind over the whole scene.

    The base direction wobbles periodically with three sinusoids of
    slightly different frequency. On top of that, each particle sees a
    spatially varying perturbation built from weighted sinusoids of its
    coordinates. Only the periodic part is published in ``direction``,
    so an indicator arrow follows the slow swing of the wind and not
    the per-particle turbulence.

    sin_time = (t + time_offset) * sin_frequency
    direction = normalize(base + sin_amplitude * (sin(s), sin(1.3 s), sin(0.7 s)))
    force = strength * normalize(direction + noise(p, t))
    """

    field_type = FieldType.GLOBAL
    DEFAULT_MAX_DISTANCE = math.inf
    UNBOUNDED = True

    def __init__(self, direction: VectorLike = (1.0, 0.0, 0.0), strength: float = 1.0,
                 noise_scale: float = 0.15, noise_space_scale: float = 0.05,
                 sin_amplitude: float = 0.2, sin_frequency: float = 0.5,
                 time_offset: Optional[float] = None,
                 rng: Optional[np.random.Generator] = None):
        """
        Initialize global wind.

        Args:
            direction: Base wind direction (normalized)
            strength: Force multiplier
            noise_scale: Amplitude of the per-particle turbulence (0 disables it)
            noise_space_scale: Spatial frequency of the turbulence
            sin_amplitude: Amplitude of the periodic direction swing
            sin_frequency: Frequency of the periodic swing in Hz
            time_offset: Phase offset in seconds, random in [0, 1000) if omitted
            rng: Random generator used for the phase offset
        """
        super().__init__(position=None, strength=strength)
        self._direction = np.array([1.0, 0.0, 0.0])
        self._base_direction = self._direction.copy()
        self.direction = direction

        self.noise_scale = noise_scale
        self.noise_space_scale = noise_space_scale
        self.sin_amplitude = sin_amplitude
        self.sin_frequency = sin_frequency

        if time_offset is None:
            rng = rng if rng is not None else np.random.default_rng()
            time_offset = rng.random() * 1000.0
        self.time_offset = float(time_offset)

    @DirectionalMixin.direction.setter
    def direction(self, value: VectorLike):
        # Setting the direction from outside resets the base the
        # modulation swings around.
        self._base_direction = check_direction('direction', value)
        self._direction = self._base_direction.copy()

    @property
    def base_direction(self) -> np.ndarray:
        return self._base_direction.copy()

    @base_direction.setter
    def base_direction(self, value: VectorLike):
        self._base_direction = check_direction('base_direction', value)

    @property
    def noise_scale(self) -> float:
        return self._noise_scale

    @noise_scale.setter
    def noise_scale(self, value: float):
        self._noise_scale = check_scalar('noise_scale', value, default=0.15, minimum=0.0)

    @property
    def noise_space_scale(self) -> float:
        return self._noise_space_scale

    @noise_space_scale.setter
    def noise_space_scale(self, value: float):
        self._noise_space_scale = check_scalar('noise_space_scale', value, default=0.05, minimum=0.0)

    @property
    def sin_amplitude(self) -> float:
        return self._sin_amplitude

    @sin_amplitude.setter
    def sin_amplitude(self, value: float):
        self._sin_amplitude = check_scalar('sin_amplitude', value, default=0.2, minimum=0.0)

    @property
    def sin_frequency(self) -> float:
        return self._sin_frequency

    @sin_frequency.setter
    def sin_frequency(self, value: float):
        self._sin_frequency = check_scalar('sin_frequency', value, default=0.5, minimum=0.0)

    def modulated_direction(self, time: float) -> np.ndarray:
        """Base direction plus the periodic swing at ``time``, normalized."""
        sin_time = (time + self.time_offset) * self._sin_frequency
        offset = self._sin_amplitude * np.array([
            np.sin(sin_time),
            np.sin(sin_time * 1.3),
            np.sin(sin_time * 0.7),
        ])
        return normalize(self._base_direction + offset, fallback=self._base_direction)

    def noise(self, positions: np.ndarray, time: float) -> np.ndarray:
        """
        Per-particle turbulence for an (N, 3) batch.

        Each axis is a weighted sum (0.5, 0.25, 0.25) of three sinusoids
        mixing two scaled coordinates and a slow time term.
        """
        p = np.asarray(positions, dtype=np.float64) * self._noise_space_scale
        px, py, pz = p[:, 0], p[:, 1], p[:, 2]
        t = time * 0.1

        nx = (np.sin(px * 1.7 + py * 2.3 + t * 0.5) * 0.5 +
              np.sin(py * 3.1 + pz * 1.9 + t * 0.7) * 0.25 +
              np.sin(pz * 2.5 + px * 1.3 + t * 0.9) * 0.25)

        ny = (np.sin(py * 2.3 + pz * 1.7 + t * 0.6) * 0.5 +
              np.sin(pz * 1.9 + px * 3.1 + t * 0.8) * 0.25 +
              np.sin(px * 2.5 + py * 1.3 + t * 1.0) * 0.25)

        nz = (np.sin(pz * 1.7 + px * 2.3 + t * 0.7) * 0.5 +
              np.sin(px * 3.1 + py * 1.9 + t * 0.9) * 0.25 +
              np.sin(py * 2.5 + pz * 1.3 + t * 1.1) * 0.25)

        return np.stack([nx, ny, nz], axis=1) * self._noise_scale

    def _forces(self, positions: np.ndarray, time: float) -> np.ndarray:
        direction = self.modulated_direction(time)

        if self._noise_scale <= 0:
            return np.tile(direction * self._strength, (positions.shape[0], 1))

        final = normalize_rows(direction + self.noise(positions, time))
        return final * self._strength

    def advance(self, time: float):
        """Publish the periodic component of the wind direction at ``time``."""
        self._direction = self.modulated_direction(time)

    def describe(self) -> Dict[str, Any]:
        info = super().describe()
        info.update({
            'direction': self._direction.tolist(),
            'base_direction': self._base_direction.tolist(),
            'noise_scale': self._noise_scale,
            'noise_space_scale': self._noise_space_scale,
            'sin_amplitude': self._sin_amplitude,
            'sin_frequency': self._sin_frequency,
        })
        return info


class PointWindField(WindField):
    """
    Radial source (outward) or sink (inward).

    F = ±(p - c)/|p - c| * strength * (1 - |p - c| / max_distance)

    for 0.1 <= |p - c| <= max_distance, zero elsewhere.
    """

    field_type = FieldType.POINT

    def __init__(self, position: Optional[VectorLike] = None, strength: float = 1.0,
                 is_outward: bool = True):
        """
        Initialize point wind.

        Args:
            position: Field center
            strength: Force multiplier
            is_outward: Push particles away (True) or pull them in (False)
        """
        super().__init__(position, strength)
        self.is_outward = bool(is_outward)

    def _forces(self, positions: np.ndarray, time: float) -> np.ndarray:
        offset = positions - self._position
        distance = np.linalg.norm(offset, axis=1)

        active = (distance >= MIN_DISTANCE) & (distance <= self._max_distance)
        safe = np.where(active, distance, 1.0)

        sign = 1.0 if self.is_outward else -1.0
        scale = sign * self._strength * self.attenuation(safe) / safe

        return np.where(active[:, None], offset * scale[:, None], 0.0)

    def describe(self) -> Dict[str, Any]:
        info = super().describe()
        info['is_outward'] = self.is_outward
        return info


class ConeWindField(DirectionalMixin, WindField):
    """
    Fan-like wind blowing along ``direction`` inside a cone.

    cone_att = (1 - offset_angle / angle)^2
    dist_att = 1 - (d / max_distance)^0.75
    F = direction * strength * dist_att * cone_att * 3.0
    """

    field_type = FieldType.CONE
    DEFAULT_MAX_DISTANCE = 15.0

    def __init__(self, position: Optional[VectorLike] = None,
                 direction: VectorLike = (1.0, 0.0, 0.0), strength: float = 1.0,
                 angle: float = math.pi / 4):
        """
        Initialize cone wind.

        Args:
            position: Apex of the cone
            direction: Cone axis (normalized)
            strength: Force multiplier
            angle: Half-angle in radians, in (0, pi/2]
        """
        super().__init__(position, strength)
        self.direction = direction
        self.angle = angle

    @property
    def angle(self) -> float:
        return self._angle

    @angle.setter
    def angle(self, value: float):
        self._angle = check_scalar(
            'angle', value,
            default=math.pi / 4,
            minimum=0.0,
            maximum=math.pi / 2,
            exclusive_minimum=True,
            floor=1e-3
        )

    def offset_angle(self, positions: VectorLike) -> Union[float, np.ndarray]:
        """Angle between the cone axis and the apex-to-point ray, in radians."""
        batch, single = as_batch(positions)
        rays = normalize_rows(batch - self._position)
        cos_angle = np.clip(rays @ self._direction, -1.0, 1.0)
        angles = np.arccos(cos_angle)
        return float(angles[0]) if single else angles

    def _forces(self, positions: np.ndarray, time: float) -> np.ndarray:
        distance = np.linalg.norm(positions - self._position, axis=1)
        offset_angle = self.offset_angle(positions)

        active = ((distance >= MIN_DISTANCE) &
                  (distance <= self._max_distance) &
                  (offset_angle <= self._angle))

        cone_attenuation = (1.0 - offset_angle / self._angle) ** 2
        ratio = np.clip(distance / self._max_distance, 0.0, 1.0)
        distance_attenuation = 1.0 - ratio ** 0.75

        magnitude = self._strength * distance_attenuation * cone_attenuation * CONE_GAIN
        magnitude = np.where(active, magnitude, 0.0)

        return magnitude[:, None] * self._direction

    def describe(self) -> Dict[str, Any]:
        info = super().describe()
        info.update({
            'direction': self._direction.tolist(),
            'angle': self._angle,
        })
        return info


class SpiralWindField(DirectionalMixin, WindField):
    """
    Tornado-like wind: lift along the axis plus a swirl around it.

    With r the distance of the particle from the axis:

        lift  = direction * strength * 0.5                  (r <= radius)
        swirl = tangent * (r / radius) * strength * speed   (0.1 < r <= radius)

    The swirl vanishes toward the axis, so there is no singular
    rotation at r = 0. The influence range is always the radius.
    """

    field_type = FieldType.SPIRAL
    DEFAULT_MAX_DISTANCE = 5.0

    def __init__(self, position: Optional[VectorLike] = None,
                 direction: VectorLike = (0.0, 1.0, 0.0), strength: float = 1.0,
                 radius: float = 5.0, rotation_speed: float = 1.0):
        """
        Initialize spiral wind.

        Args:
            position: A point on the spiral axis
            direction: Ascending axis (normalized)
            strength: Force multiplier
            radius: Radius of the swirl, also the influence range
            rotation_speed: Swirl gain
        """
        super().__init__(position, strength)
        self.direction = direction
        self.radius = radius
        self.rotation_speed = rotation_speed

    @property
    def radius(self) -> float:
        return self._max_distance

    @radius.setter
    def radius(self, value: float):
        self._max_distance = check_scalar(
            'radius', value,
            default=self.DEFAULT_MAX_DISTANCE,
            minimum=0.0,
            exclusive_minimum=True,
            floor=MIN_DISTANCE
        )

    @property
    def max_distance(self) -> float:
        return self._max_distance

    @max_distance.setter
    def max_distance(self, value: float):
        self.radius = value

    @property
    def rotation_speed(self) -> float:
        return self._rotation_speed

    @rotation_speed.setter
    def rotation_speed(self, value: float):
        self._rotation_speed = check_scalar('rotation_speed', value, default=1.0)

    def axial_distance(self, positions: VectorLike) -> Union[float, np.ndarray]:
        """Distance of each point from the spiral axis."""
        batch, single = as_batch(positions)
        planar = project_onto_plane(batch - self._position, self._direction)
        r = np.linalg.norm(planar, axis=1)
        return float(r[0]) if single else r

    def _forces(self, positions: np.ndarray, time: float) -> np.ndarray:
        # Planar offset in the (u, v) coordinates of the plane normal to the axis
        u, v = orthonormal_basis(self._direction)
        offset = positions - self._position
        a = offset @ u
        b = offset @ v
        planar = a[:, None] * u + b[:, None] * v
        r = np.hypot(a, b)
        radius = self._max_distance

        inside = r <= radius
        swirling = inside & (r > MIN_DISTANCE)

        lift = self._direction * (self._strength * SPIRAL_LIFT)

        safe_r = np.where(swirling, r, 1.0)
        tangent = np.cross(planar / safe_r[:, None], self._direction)
        swirl_strength = np.where(swirling, (r / radius) * self._strength * self._rotation_speed, 0.0)
        swirl = tangent * swirl_strength[:, None]

        return np.where(inside[:, None], lift + swirl, 0.0)

    def describe(self) -> Dict[str, Any]:
        info = super().describe()
        info.update({
            'direction': self._direction.tolist(),
            'radius': self.radius,
            'rotation_speed': self._rotation_speed,
        })
        return info


def create_field(kind: Union[str, FieldType], **kwargs) -> WindField:
    """
    Factory function to create wind fields.

    Args:
        kind: Field type name ('global', 'point', 'cone', 'spiral') or FieldType
        **kwargs: Constructor arguments of the chosen variant

    Returns:
        WindField instance
    """
    if isinstance(kind, FieldType):
        kind = kind.value
    kind = str(kind).lower()

    if kind == 'global':
        field = GlobalWindField(**kwargs)
    elif kind == 'point':
        field = PointWindField(**kwargs)
    elif kind == 'cone':
        field = ConeWindField(**kwargs)
    elif kind == 'spiral':
        field = SpiralWindField(**kwargs)
    else:
        raise ValueError(f"Unknown field type: {kind}")

    logger.debug(f"Created {field!r}")
    return field


__all__ = [
    'FieldType',
    'WindField',
    'GlobalWindField',
    'PointWindField',
    'ConeWindField',
    'SpiralWindField',
    'create_field',
    'MIN_DISTANCE',
]
