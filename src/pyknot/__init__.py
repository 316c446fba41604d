"""PyKnot: cubic spline interpolation and Brent–Dekker root finding.

Provides the :class:`PiecewisePolynomial` representation shared by the
:class:`NaturalCubicSpline` (C², zero end curvature) and
:class:`KrugerSpline` (constrained, overshoot-free) interpolators, and
:func:`find_root`, a bracketing Brent–Dekker solver for scalar functions.

Example
-------
>>> from pyknot import NaturalCubicSpline, find_root
>>> sp = NaturalCubicSpline([0.0, 1.0, 2.0, 3.0], [-1.0, 0.0, 3.0, 8.0])
>>> sp.value(1.0)
0.0
>>> round(find_root(0.0, 3.0, sp, 1e-12), 6)
1.0
"""

from pyknot._exceptions import DomainError, PreconditionError
from pyknot._version import __version__
from pyknot.kruger import ConstrainedCubicSpline, KrugerSpline
from pyknot.natural import NaturalCubicSpline
from pyknot.piecewise import PiecewisePolynomial
from pyknot.rootfinding import RootResult, ScalarFunction, find_root

__all__ = [
    "ConstrainedCubicSpline",
    "DomainError",
    "KrugerSpline",
    "NaturalCubicSpline",
    "PiecewisePolynomial",
    "PreconditionError",
    "RootResult",
    "ScalarFunction",
    "__version__",
    "find_root",
]
