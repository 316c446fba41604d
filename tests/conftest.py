"""Shared test fixtures for PyKnot tests."""

import math

import numpy as np
import pytest

from pyknot import KrugerSpline, NaturalCubicSpline


# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------

SINE_POINTS = np.linspace(0.0, 2.0 * math.pi, 13)
SINE_VALUES = np.sin(SINE_POINTS)

# Irregular spacing, strictly increasing values
MONOTONE_POINTS = np.array([0.0, 0.5, 1.2, 2.0, 3.5, 4.0, 6.0])
MONOTONE_VALUES = np.array([0.0, 0.1, 2.0, 2.1, 5.0, 9.0, 9.5])

# Flat, then a unit jump, then flat
STEP_POINTS = np.array([0.0, 1.0, 2.0, 3.0, 4.0, 5.0])
STEP_VALUES = np.array([0.0, 0.0, 0.0, 1.0, 1.0, 1.0])


def dense_grid(points, num=2001):
    """Evaluation grid covering the whole knot range, endpoints included."""
    return np.linspace(points[0], points[-1], num)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def natural_sine():
    """Natural cubic spline through 13 samples of sin on [0, 2*pi]."""
    return NaturalCubicSpline(SINE_POINTS, SINE_VALUES)


@pytest.fixture
def kruger_sine():
    """Kruger spline through 13 samples of sin on [0, 2*pi]."""
    return KrugerSpline(SINE_POINTS, SINE_VALUES)


@pytest.fixture
def kruger_monotone():
    """Kruger spline through irregular, strictly increasing data."""
    return KrugerSpline(MONOTONE_POINTS, MONOTONE_VALUES)


@pytest.fixture
def counting():
    """Factory wrapping a function so its evaluations are counted."""

    class Counting:
        def __init__(self, f):
            self.f = f
            self.calls = 0

        def __call__(self, x):
            self.calls += 1
            return self.f(x)

    return Counting
