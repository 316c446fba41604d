"""Kruger's constrained cubic spline.

A cubic spline that trades C² continuity for shape preservation: the first
derivative at each interior knot is the harmonic mean of the neighbouring
secant slopes, or zero where the slopes change sign, so the curve never
overshoots the data at local extrema.  All coefficients follow in closed
form; there is no linear system to solve.

Segments are stored relative to their left knot (``local=True``) so the
constant term is the sample value itself and knots far from zero keep full
precision.  The global-coordinate quadruples of Kruger's paper are available
from :attr:`~pyknot.piecewise.PiecewisePolynomial.absolute_coefficients`.

References
----------
- C. J. C. Kruger, "Constrained Cubic Spline Interpolation for Chemical
  Engineering Applications", http://www.korf.co.uk/spline.pdf
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from pyknot.piecewise import PiecewisePolynomial, _validate_samples


def _knot_slopes(dx: np.ndarray, dy: np.ndarray) -> np.ndarray:
    """First-derivative estimates ``f1`` at every knot.

    Parameters
    ----------
    dx, dy : ndarray of shape (n,)
        Knot spacings and value differences.

    Returns
    -------
    ndarray of shape (n + 1,)
    """
    n = dx.size
    f1 = np.zeros(n + 1)
    for i in range(1, n):
        if dy[i - 1] * dy[i] > 0.0:
            f1[i] = 2.0 / (dx[i] / dy[i] + dx[i - 1] / dy[i - 1])
        else:
            # local extremum or flat neighbour
            f1[i] = 0.0
    # Order matters for n == 1: f1[0] sees f1[1] == 0, then f1[1] sees f1[0].
    f1[0] = 3.0 * dy[0] / (2.0 * dx[0]) - f1[1] / 2.0
    f1[n] = 3.0 * dy[n - 1] / (2.0 * dx[n - 1]) - f1[n - 1] / 2.0
    return f1


class KrugerSpline(PiecewisePolynomial):
    """Constrained cubic spline through ``(points[i], values[i])``.

    For strictly monotone data the interpolant is monotone on every
    segment.

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
    >>> sp = KrugerSpline([0.0, 1.0, 2.0], [0.0, 1.0, 0.0])
    >>> sp.value(0.5)
    0.6875
    >>> sp.value(1.0, derivative_order=1)
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
        dx = np.diff(points)
        dy = np.diff(values)
        f1 = _knot_slopes(dx, dy)

        coefficients = np.empty((n, 4))
        for i in range(1, n + 1):
            h = dx[i - 1]
            # second derivatives at the left and right end of the segment
            f2a = -2.0 * (f1[i] + 2.0 * f1[i - 1]) / h + 6.0 * dy[i - 1] / (h * h)
            f2b = 2.0 * (2.0 * f1[i] + f1[i - 1]) / h - 6.0 * dy[i - 1] / (h * h)
            coefficients[i - 1] = (
                values[i - 1],
                f1[i - 1],
                0.5 * f2a,
                (f2b - f2a) / (6.0 * h),
            )
        return coefficients


ConstrainedCubicSpline = KrugerSpline
