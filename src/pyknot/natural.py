"""Natural cubic spline interpolation.

Builds the unique C² piecewise cubic through the samples whose second
derivative vanishes at both end knots.  The interior curvatures solve a
tridiagonal, diagonally dominant system, eliminated with a single forward
sweep and back-substitution (Thomas algorithm); no pivoting is needed for
strictly increasing knots.

References
----------
- Burden & Faires, "Numerical Analysis", Algorithm 3.4 (Natural Cubic
  Spline).
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from pyknot.piecewise import PiecewisePolynomial, _validate_samples


class NaturalCubicSpline(PiecewisePolynomial):
    """Natural cubic spline through ``(points[i], values[i])``.

    Segment ``j`` is ``values[j] + b*t + c*t**2 + d*t**3`` with the local
    coordinate ``t = x - points[j]``.

    Parameters
    ----------
    points : sequence of float
        Strictly increasing knots, at least two.
    values : sequence of float
        Sample values, one per knot.

    Raises
    ------
    PreconditionError
        If there are fewer than two points, the lengths differ, any input
        is NaN/Inf, or the points are not strictly increasing.

    Examples
    --------
    >>> sp = NaturalCubicSpline([0.0, 1.0, 2.0], [0.0, 1.0, 0.0])
    >>> sp.value(0.5)
    0.6875
    >>> sp.value(2.0, derivative_order=2)
    0.0
    """

    def __init__(self, points: Sequence[float], values: Sequence[float]):
        points, values = _validate_samples(points, values)
        super().__init__(
            points, self._coefficients_from(points, values), local=True
        )
        values.flags.writeable = False
        self._values = values

    @property
    def values(self) -> np.ndarray:
        """Read-only sample values the spline was built from."""
        return self._values

    @staticmethod
    def _coefficients_from(points: np.ndarray, values: np.ndarray) -> np.ndarray:
        """Compute the ``(n, 4)`` local-coordinate coefficient table."""
        n = points.size - 1
        h = np.diff(points)

        # Forward elimination; mu[0] = z[0] = 0 encode S''(points[0]) = 0.
        mu = np.zeros(n)
        z = np.zeros(n + 1)
        for i in range(1, n):
            span = points[i + 1] - points[i - 1]
            g = 2.0 * span - h[i - 1] * mu[i - 1]
            mu[i] = h[i] / g
            z[i] = (
                3.0 * (values[i + 1] * h[i - 1]
                       - values[i] * span
                       + values[i - 1] * h[i])
                / (h[i - 1] * h[i])
                - h[i - 1] * z[i - 1]
            ) / g

        # Back-substitution; c[n] = 0 is the right-hand natural condition.
        b = np.zeros(n)
        c = np.zeros(n + 1)
        d = np.zeros(n)
        for j in range(n - 1, -1, -1):
            c[j] = z[j] - mu[j] * c[j + 1]
            b[j] = (values[j + 1] - values[j]) / h[j] - h[j] * (c[j + 1] + 2.0 * c[j]) / 3.0
            d[j] = (c[j + 1] - c[j]) / (3.0 * h[j])

        return np.column_stack([values[:n], b, c[:n], d])
