"""
Vector Module

Small 3D vector helpers on top of numpy. A Vector3 is simply a float64
array of shape (3,); batches of vectors are arrays of shape (N, 3).
"""

from typing import Sequence, Tuple, Union
import numpy as np

VectorLike = Union[np.ndarray, Sequence[float]]

FALLBACK_DIRECTION = np.array([0.0, 1.0, 0.0])


def vec3(x: Union[float, VectorLike] = 0.0, y: float = 0.0, z: float = 0.0) -> np.ndarray:
    """
    Build a Vector3.

    Accepts either three scalars or a single 3-element sequence. The
    result is always a fresh array, never a view of the input.
    """
    if np.ndim(x) > 0:
        arr = np.array(x, dtype=np.float64).reshape(-1)
        if arr.shape != (3,):
            raise ValueError(f"Expected 3 components, got {arr.shape[0]}")
        return arr
    return np.array([x, y, z], dtype=np.float64)


def length(v: np.ndarray) -> Union[float, np.ndarray]:
    """Euclidean length of a vector, or of each row of a batch."""
    v = np.asarray(v, dtype=np.float64)
    if v.ndim == 1:
        return float(np.linalg.norm(v))
    return np.linalg.norm(v, axis=-1)


def dot(a: np.ndarray, b: np.ndarray) -> Union[float, np.ndarray]:
    """Dot product, row-wise for batches."""
    return np.sum(np.asarray(a) * np.asarray(b), axis=-1)


def cross(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Cross product, row-wise for batches."""
    return np.cross(a, b)


def is_finite(v: np.ndarray) -> bool:
    """Check that every component is finite."""
    return bool(np.all(np.isfinite(v)))


def normalize(v: VectorLike, fallback: np.ndarray = FALLBACK_DIRECTION,
              eps: float = 1e-12) -> np.ndarray:
    """
    Return a unit vector in the direction of v.

    Zero-length or non-finite input yields a copy of ``fallback``
    instead of NaN.
    """
    v = np.array(v, dtype=np.float64)
    n = np.linalg.norm(v)
    if not np.isfinite(n) or n < eps:
        return np.array(fallback, dtype=np.float64)
    return v / n


def normalize_rows(v: np.ndarray, eps: float = 1e-12) -> np.ndarray:
    """
    Normalize every row of an (N, 3) batch.

    Rows with (near) zero length are returned as zero vectors.
    """
    v = np.asarray(v, dtype=np.float64)
    n = np.linalg.norm(v, axis=-1, keepdims=True)
    safe = np.where(n < eps, 1.0, n)
    return np.where(n < eps, 0.0, v / safe)


def project_onto_plane(v: np.ndarray, normal: np.ndarray) -> np.ndarray:
    """Remove the component of each row of v along the unit ``normal``."""
    v = np.asarray(v, dtype=np.float64)
    along = np.sum(v * normal, axis=-1, keepdims=True)
    return v - along * normal


def orthonormal_basis(axis: VectorLike) -> Tuple[np.ndarray, np.ndarray]:
    """
    Two unit vectors spanning the plane perpendicular to ``axis``.

    The triple (u, v, axis) is right-handed, so cross(u, v) == axis.
    A degenerate axis is replaced by the fallback direction first.
    """
    w = normalize(axis)
    helper = np.array([1.0, 0.0, 0.0]) if abs(w[0]) < 0.9 else np.array([0.0, 1.0, 0.0])
    u = normalize(np.cross(w, helper))
    v = np.cross(w, u)
    return u, v


def as_batch(positions: VectorLike) -> Tuple[np.ndarray, bool]:
    """
    View positions as an (N, 3) float64 batch.

    Returns:
        Tuple of (batch, was_single) so callers can undo the promotion
    """
    arr = np.asarray(positions, dtype=np.float64)
    if arr.ndim == 1:
        if arr.shape[0] != 3:
            raise ValueError(f"Expected 3 components, got {arr.shape[0]}")
        return arr.reshape(1, 3), True
    if arr.ndim != 2 or arr.shape[1] != 3:
        raise ValueError(f"Expected positions of shape (N, 3), got {arr.shape}")
    return arr, False
