"""
Tests for spectral vector kernels.
"""

import math

import numpy as np
import pytest

from incremental_layout.spectral.vectors import (
    cosine_distance,
    orthogonalize,
    rebound,
    repair_non_finite,
)


@pytest.fixture
def rng():
    return np.random.default_rng(42)


class TestOrthogonalize:
    """Tests for Gram-Schmidt deflation."""

    def test_result_is_orthogonal(self):
        """Projection onto base is removed."""
        value = np.array([3.0, 1.0, -2.0])
        base = np.array([1.0, 1.0, 1.0])

        orthogonalize(value, base)

        assert np.dot(value, base) == pytest.approx(0.0, abs=1e-12)
        assert np.allclose(value, [3.0 - 2 / 3, 1.0 - 2 / 3, -2.0 - 2 / 3])

    def test_in_place(self):
        """The input array itself is modified."""
        value = np.array([1.0, 0.0])
        result = orthogonalize(value, np.array([1.0, 1.0]))
        assert result is value
        assert np.allclose(value, [0.5, -0.5])

    def test_zero_base_is_noop(self):
        """A zero base leaves the vector unchanged."""
        value = np.array([1.0, 2.0])
        orthogonalize(value, np.zeros(2))
        assert np.array_equal(value, [1.0, 2.0])

    def test_parallel_vector_vanishes(self):
        """A vector parallel to base deflates to zero."""
        value = np.array([2.0, 4.0])
        orthogonalize(value, np.array([1.0, 2.0]))
        assert np.allclose(value, 0.0)


class TestRebound:
    """Tests for rescaling into bounds."""

    def test_peak_matches_bound(self, rng):
        """Largest magnitude equals the bound, proportions preserved."""
        values = np.array([0.5, -2.0, 1.0])
        rebound(values, 4.0, rng)
        assert np.allclose(values, [1.0, -4.0, 2.0])

    def test_small_values_scale_up(self, rng):
        """Vectors inside the bound are stretched out to it."""
        values = np.array([0.001, 0.002])
        rebound(values, 1.0, rng)
        assert np.max(np.abs(values)) == pytest.approx(1.0)
        assert values[0] == pytest.approx(0.5)

    def test_zero_vector_randomized(self, rng):
        """A zero vector is re-randomized then scaled."""
        values = np.zeros(5)
        rebound(values, 2.0, rng)
        assert np.all(np.isfinite(values))
        assert np.max(np.abs(values)) == pytest.approx(2.0)

    def test_empty_vector(self, rng):
        """Empty vectors are left alone."""
        values = np.zeros(0)
        rebound(values, 1.0, rng)
        assert values.size == 0


class TestRepairNonFinite:
    """Tests for replacing non-finite coordinates."""

    def test_replaces_only_bad_entries(self, rng):
        """NaN and inf are replaced, finite values kept."""
        values = np.array([0.25, math.nan, math.inf, -math.inf])
        repair_non_finite(values, 0.5, rng)

        assert values[0] == 0.25
        assert np.all(np.isfinite(values))
        assert np.all(np.abs(values) <= 0.5)

    def test_finite_vector_untouched(self, rng):
        """All-finite input is unchanged."""
        values = np.array([1.0, 2.0])
        repair_non_finite(values, 1.0, rng)
        assert np.array_equal(values, [1.0, 2.0])


class TestCosineDistance:
    """Tests for the convergence metric."""

    def test_same_direction(self):
        """Parallel vectors have zero distance regardless of scale."""
        assert cosine_distance(np.array([1.0, 2.0]), np.array([2.0, 4.0])) == pytest.approx(0.0)

    def test_orthogonal(self):
        """Orthogonal vectors have distance one."""
        assert cosine_distance(np.array([1.0, 0.0]), np.array([0.0, 3.0])) == pytest.approx(1.0)

    def test_opposite(self):
        """Opposite vectors have distance two."""
        assert cosine_distance(np.array([1.0, 1.0]), np.array([-1.0, -1.0])) == pytest.approx(2.0)

    def test_zero_vector(self):
        """Zero vectors never count as converged."""
        assert cosine_distance(np.zeros(2), np.array([1.0, 0.0])) == math.inf
