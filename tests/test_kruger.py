"""Tests for KrugerSpline (constrained cubic spline)."""

import numpy as np
import pytest

from pyknot import ConstrainedCubicSpline, KrugerSpline, PiecewisePolynomial

from conftest import (
    MONOTONE_POINTS,
    MONOTONE_VALUES,
    SINE_POINTS,
    SINE_VALUES,
    STEP_POINTS,
    STEP_VALUES,
    dense_grid,
)


def _slopes_from_left(sp):
    """First derivative of segment i-1 at knot i, for every interior knot."""
    a, b, c, d = sp.coefficients[:-1].T
    h = np.diff(sp.knots)[:-1]
    return b + 2.0 * c * h + 3.0 * d * h**2


# ---------------------------------------------------------------------------
# Interpolation
# ---------------------------------------------------------------------------

class TestInterpolation:
    def test_reproduces_sine_samples(self, kruger_sine):
        for x, y in zip(SINE_POINTS, SINE_VALUES):
            assert abs(kruger_sine.value(x) - y) <= 1e-9 * max(1.0, abs(y))

    def test_reproduces_monotone_samples(self, kruger_monotone):
        for x, y in zip(MONOTONE_POINTS, MONOTONE_VALUES):
            assert abs(kruger_monotone.value(x) - y) <= 1e-9 * max(1.0, abs(y))

    @pytest.mark.parametrize("seed", [0, 5, 42])
    def test_reproduces_random_samples(self, seed):
        rng = np.random.default_rng(seed)
        points = np.concatenate([[0.0], np.cumsum(rng.uniform(0.3, 0.8, 9))])
        values = rng.normal(size=10)
        sp = KrugerSpline(points, values)
        for x, y in zip(points, values):
            assert abs(sp.value(x) - y) <= 1e-9 * max(1.0, abs(y))

    def test_local_coordinates(self, kruger_sine):
        assert kruger_sine.local is True
        np.testing.assert_array_equal(kruger_sine.coefficients[:, 0], SINE_VALUES[:-1])

    def test_reproduces_samples_far_from_origin(self):
        """Knots near 1e6 keep full precision at every sample."""
        points = 1e6 + np.array([0.0, 1.0, 2.5, 3.0, 4.5])
        values = [0.0, 2.0, -1.0, 3.0, 1.0]
        sp = KrugerSpline(points, values)
        for x, y in zip(points, values):
            assert abs(sp.value(x) - y) <= 1e-9 * max(1.0, abs(y))

    def test_shift_invariance(self):
        """Translating the knots translates the curve."""
        points = np.array([0.0, 1.0, 2.5, 3.0, 4.5])
        values = [0.0, 2.0, -1.0, 3.0, 1.0]
        near = KrugerSpline(points, values)
        far = KrugerSpline(points + 1e6, values)
        xs = dense_grid(points, 301)
        np.testing.assert_allclose(
            far.value_batch(xs + 1e6), near.value_batch(xs), atol=1e-8
        )

    def test_absolute_coefficients(self, kruger_sine):
        """Global-coordinate quadruples describe the same curve."""
        absolute = PiecewisePolynomial(
            kruger_sine.knots, kruger_sine.absolute_coefficients, local=False
        )
        xs = dense_grid(SINE_POINTS, 501)
        np.testing.assert_allclose(
            absolute.value_batch(xs), kruger_sine.value_batch(xs), atol=1e-10
        )

    def test_single_interval(self):
        """With two knots the end slopes are 1.5*s and 0.75*s for secant s."""
        sp = KrugerSpline([0.0, 2.0], [0.0, 4.0])
        assert sp.value(0.0) == pytest.approx(0.0, abs=1e-12)
        assert sp.value(2.0) == pytest.approx(4.0)
        assert sp.value(0.0, derivative_order=1) == pytest.approx(3.0)
        assert sp.value(2.0, derivative_order=1) == pytest.approx(1.5)

    def test_alias(self):
        assert ConstrainedCubicSpline is KrugerSpline


# ---------------------------------------------------------------------------
# Shape preservation
# ---------------------------------------------------------------------------

class TestShapePreservation:
    def test_monotone_increasing(self, kruger_monotone):
        ys = kruger_monotone.value_batch(dense_grid(MONOTONE_POINTS, 4001))
        assert np.all(np.diff(ys) >= -1e-9)

    def test_monotone_decreasing(self):
        sp = KrugerSpline(MONOTONE_POINTS, -MONOTONE_VALUES)
        ys = sp.value_batch(dense_grid(MONOTONE_POINTS, 4001))
        assert np.all(np.diff(ys) <= 1e-9)

    def test_no_overshoot_on_step(self):
        """Flat data stays flat and the jump stays within the data range."""
        sp = KrugerSpline(STEP_POINTS, STEP_VALUES)
        xs = dense_grid(STEP_POINTS)
        ys = sp.value_batch(xs)
        assert ys.min() >= -1e-12
        assert ys.max() <= 1.0 + 1e-12
        np.testing.assert_allclose(ys[xs <= 2.0], 0.0, atol=1e-12)
        np.testing.assert_allclose(ys[xs >= 3.0], 1.0, atol=1e-12)

    def test_flat_at_local_extremum(self, kruger_sine):
        """sin peaks at knot 3 (pi/2): the secants change sign, slope is zero."""
        assert kruger_sine.value(SINE_POINTS[3], derivative_order=1) == pytest.approx(0.0, abs=1e-10)
        assert _slopes_from_left(kruger_sine)[2] == pytest.approx(0.0, abs=1e-10)

    def test_harmonic_mean_slope(self, kruger_monotone):
        """Interior slopes are the harmonic mean of the neighbouring secants."""
        secants = np.diff(MONOTONE_VALUES) / np.diff(MONOTONE_POINTS)
        expected = 2.0 / (1.0 / secants[:-1] + 1.0 / secants[1:])
        got = [
            kruger_monotone.value(x, derivative_order=1)
            for x in MONOTONE_POINTS[1:-1]
        ]
        np.testing.assert_allclose(got, expected, rtol=1e-9)


# ---------------------------------------------------------------------------
# Smoothness
# ---------------------------------------------------------------------------

class TestSmoothness:
    def test_c1_continuity_at_interior_knots(self, kruger_sine):
        right = [kruger_sine.value(x, derivative_order=1) for x in SINE_POINTS[1:-1]]
        np.testing.assert_allclose(_slopes_from_left(kruger_sine), right, atol=1e-9)

    def test_continuity_at_interior_knots(self, kruger_monotone):
        a, b, c, d = kruger_monotone.coefficients[:-1].T
        h = np.diff(MONOTONE_POINTS)[:-1]
        left = a + b * h + c * h**2 + d * h**3
        np.testing.assert_allclose(left, MONOTONE_VALUES[1:-1], atol=1e-9)

    def test_end_slopes(self, kruger_monotone):
        """End slopes extrapolate from the first and last secants."""
        secants = np.diff(MONOTONE_VALUES) / np.diff(MONOTONE_POINTS)
        inner_first = kruger_monotone.value(MONOTONE_POINTS[1], derivative_order=1)
        inner_last = _slopes_from_left(kruger_monotone)[-1]
        assert kruger_monotone.value(MONOTONE_POINTS[0], derivative_order=1) == pytest.approx(
            1.5 * secants[0] - inner_first / 2.0
        )
        assert kruger_monotone.value(MONOTONE_POINTS[-1], derivative_order=1) == pytest.approx(
            1.5 * secants[-1] - inner_last / 2.0
        )
