"""
Tests for Vector Helpers and the Simulation Clock
"""

import math

import numpy as np
import pytest

from windsim.core.clock import SimulationClock
from windsim.core.vector import (
    as_batch,
    cross,
    dot,
    is_finite,
    length,
    normalize,
    normalize_rows,
    orthonormal_basis,
    project_onto_plane,
    vec3,
)


class TestVector:
    """Test suite for vector helpers."""

    def test_vec3_copies(self):
        """vec3 never aliases its input."""
        source = np.array([1.0, 2.0, 3.0])
        v = vec3(source)
        source[0] = 9.0

        np.testing.assert_array_equal(v, [1.0, 2.0, 3.0])
        np.testing.assert_array_equal(vec3(4, 5, 6), [4.0, 5.0, 6.0])

        with pytest.raises(ValueError):
            vec3([1.0, 2.0])

    def test_length_dot_cross(self):
        """Basic products on single vectors and batches."""
        assert length(vec3(3, 4, 0)) == pytest.approx(5.0)
        np.testing.assert_allclose(length(np.array([[3.0, 4.0, 0.0], [0.0, 0.0, 2.0]])), [5.0, 2.0])
        assert dot(vec3(1, 2, 3), vec3(4, 5, 6)) == pytest.approx(32.0)
        np.testing.assert_array_equal(cross(vec3(1, 0, 0), vec3(0, 1, 0)), [0.0, 0.0, 1.0])

    def test_normalize_fallback(self):
        """Zero and non-finite vectors normalize to the fallback."""
        np.testing.assert_allclose(normalize(vec3(0, 0, 5)), [0.0, 0.0, 1.0])
        np.testing.assert_array_equal(normalize(vec3(0, 0, 0)), [0.0, 1.0, 0.0])
        np.testing.assert_array_equal(normalize(vec3(math.inf, 0, 0)), [0.0, 1.0, 0.0])

    def test_normalize_rows(self):
        """Zero rows stay zero."""
        rows = normalize_rows(np.array([[0.0, 3.0, 4.0], [0.0, 0.0, 0.0]]))
        np.testing.assert_allclose(rows, [[0.0, 0.6, 0.8], [0.0, 0.0, 0.0]])

    def test_project_onto_plane(self):
        """Projection removes the normal component."""
        planar = project_onto_plane(np.array([[1.0, 2.0, 3.0]]), np.array([0.0, 1.0, 0.0]))
        np.testing.assert_allclose(planar, [[1.0, 0.0, 3.0]])

    @pytest.mark.parametrize("axis", [(0.0, 1.0, 0.0), (1.0, 0.0, 0.0), (1.0, -2.0, 0.5)])
    def test_orthonormal_basis(self, axis):
        """The basis vectors are unit, mutually orthogonal and right-handed with the axis."""
        w = normalize(np.array(axis))
        u, v = orthonormal_basis(axis)

        assert length(u) == pytest.approx(1.0)
        assert length(v) == pytest.approx(1.0)
        assert dot(u, v) == pytest.approx(0.0, abs=1e-12)
        assert dot(u, w) == pytest.approx(0.0, abs=1e-12)
        np.testing.assert_allclose(cross(u, v), w, atol=1e-12)

    def test_orthonormal_basis_degenerate_axis(self):
        """A zero axis uses the +y fallback."""
        u, v = orthonormal_basis((0.0, 0.0, 0.0))
        np.testing.assert_allclose(cross(u, v), [0.0, 1.0, 0.0], atol=1e-12)

    def test_is_finite(self):
        """Any NaN or infinite component fails the check."""
        assert is_finite(vec3(1, 2, 3))
        assert not is_finite(vec3(1, math.nan, 3))
        assert not is_finite(vec3(-math.inf, 0, 0))

    def test_as_batch(self):
        """Single points are promoted and flagged."""
        batch, single = as_batch([1.0, 2.0, 3.0])
        assert batch.shape == (1, 3) and single

        batch, single = as_batch(np.zeros((5, 3)))
        assert batch.shape == (5, 3) and not single

        with pytest.raises(ValueError):
            as_batch(np.zeros((2, 2)))


class TestSimulationClock:
    """Test suite for the simulation clock."""

    def test_advance(self):
        """Time accumulates the step deltas."""
        clock = SimulationClock()
        clock.advance(0.25)
        assert clock.advance(0.5) == pytest.approx(0.75)
        assert clock.step_count == 2

    def test_ignores_bad_deltas(self):
        """Negative and non-finite deltas leave the time unchanged."""
        clock = SimulationClock(time=1.0)
        clock.advance(-0.5)
        clock.advance(math.nan)
        clock.advance(math.inf)

        assert clock.time == 1.0
        assert clock.step_count == 3

    def test_reset(self):
        """Reset rewinds to zero."""
        clock = SimulationClock()
        clock.advance(3.0)
        clock.reset()

        assert clock.time == 0.0
        assert clock.step_count == 0
