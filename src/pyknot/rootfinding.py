"""Brent–Dekker root finding for scalar functions.

Combines inverse quadratic interpolation, the secant method and bisection.
An interpolated step is only taken when it stays safely inside the current
bracket, so the bracket shrinks on every iteration no matter how badly the
function behaves, while smooth functions converge superlinearly.

References
----------
- R. P. Brent, "Algorithms for Minimization without Derivatives",
  Prentice-Hall (1973), Chapter 4.
- P. L'Ecuyer et al., SSJ: Stochastic Simulation in Java,
  ``RootFinder.brentDekker``.
"""

from __future__ import annotations

import math
import warnings
from dataclasses import dataclass
from typing import Callable, Union

from pyknot._constants import BIG_INV, MAX_ITER, MIN_TOL, MIN_VAL
from pyknot._exceptions import PreconditionError

ScalarFunction = Callable[[float], float]
"""A pure real function of one real argument, ``f(x) -> float``."""


@dataclass
class RootResult:
    """Detailed outcome of :func:`find_root`.

    Attributes
    ----------
    root : float
        Best estimate of the root.
    iterations : int
        Number of Brent–Dekker iterations performed.
    function_calls : int
        Number of evaluations of ``f``.
    converged : bool
        False if the iteration cap was reached; ``root`` is then the last
        estimate, not a verified root.
    """

    root: float
    iterations: int
    function_calls: int
    converged: bool


def _sign(x: float) -> float:
    return float((x > 0.0) - (x < 0.0))


def _snap(x: float) -> float:
    """Report roots indistinguishable from zero as exactly 0.0."""
    return x if abs(x) > MIN_VAL else 0.0


def find_root(
    a: float,
    b: float,
    f: ScalarFunction,
    tol: float = 1e-7,
    *,
    full_output: bool = False,
) -> Union[float, RootResult]:
    """Find a root of ``f`` in ``[a, b]`` with the Brent–Dekker method.

    ``f(a)`` and ``f(b)`` must have opposite signs, unless one of them is
    already zero (``|f| <= MIN_VAL``), in which case that endpoint is
    returned straight away.

    Parameters
    ----------
    a, b : float
        Bracket endpoints, in either order.
    f : callable
        Continuous, pure function ``f(x) -> float``.  Any
        :class:`~pyknot.piecewise.PiecewisePolynomial` qualifies.
    tol : float, optional
        Absolute accuracy goal (default 1e-7).  A relative term
        ``4 * BIG_INV * |x|`` is added on every iteration.
    full_output : bool, optional
        If True, return a :class:`RootResult` instead of a float.

    Returns
    -------
    float or RootResult
        The root estimate.

    Raises
    ------
    PreconditionError
        If ``tol`` is NaN, an endpoint or its function value is not
        finite, or ``f(a)`` and ``f(b)`` have the same sign.

    Warns
    -----
    RuntimeWarning
        If the method has not converged after ``MAX_ITER`` (150)
        iterations.  This is not an error: the last estimate is returned
        and callers must not assume it is an exact root.

    Notes
    -----
    Two legacy conventions are kept on purpose and may surprise:

    * ``tol`` below ``MIN_TOL`` (about 5.2e-15) is silently raised to
      ``MIN_TOL``.
    * A converged root with ``|x| <= MIN_VAL`` is reported as exactly
      ``0.0`` rather than a subnormal number.

    Examples
    --------
    >>> root = find_root(0.0, 2.0, lambda x: x * x - 2.0, 1e-10)
    >>> round(root, 9)
    1.414213562
    >>> find_root(-1.0, 1.0, lambda x: x ** 3)
    0.0
    """
    a = float(a)
    b = float(b)
    if not (math.isfinite(a) and math.isfinite(b)):
        raise PreconditionError(
            f"Bracket endpoints must be finite, got [{a}, {b}]"
        )
    if b < a:
        a, b = b, a
    if math.isnan(tol):
        raise PreconditionError("tol must not be NaN")
    tol = max(tol, MIN_TOL)

    calls = 0

    def done(root: float, iterations: int, converged: bool = True):
        if full_output:
            return RootResult(root, iterations, calls, converged)
        return root

    fa = float(f(a))
    calls += 1
    if abs(fa) <= MIN_VAL:
        return done(a, 0)
    fb = float(f(b))
    calls += 1
    if abs(fb) <= MIN_VAL:
        return done(b, 0)

    if not (math.isfinite(fa) and math.isfinite(fb)):
        raise PreconditionError(
            f"f must be finite at the bracket endpoints, "
            f"got f({a})={fa}, f({b})={fb}"
        )
    if (fa > 0.0) == (fb > 0.0):
        raise PreconditionError(
            f"f(a) and f(b) must have opposite signs, "
            f"got f({a})={fa}, f({b})={fb}"
        )

    c, fc = a, fa
    e = d = b - a
    # b holds the best estimate
    if abs(fc) < abs(fb):
        a, b, c = b, c, b
        fa, fb, fc = fb, fc, fb

    for iteration in range(MAX_ITER):
        tol2 = tol + 4.0 * BIG_INV * abs(b)
        xm = 0.5 * (c - b)

        if abs(fb) <= MIN_VAL or abs(xm) <= tol2:
            return done(_snap(b), iteration)

        if abs(e) >= tol2 and abs(fa) > abs(fb):
            if a != c:
                # inverse quadratic interpolation
                q = fa / fc
                r = fb / fc
                s = fb / fa
                p = s * (2.0 * xm * q * (q - r) - (b - a) * (r - 1.0))
                q = (q - 1.0) * (r - 1.0) * (s - 1.0)
            else:
                # secant
                s = fb / fa
                p = 2.0 * xm * s
                q = 1.0 - s

            if p > 0.0:
                q = -q
            p = abs(p)

            if 2.0 * p >= 3.0 * xm * q - abs(tol2 * q) or p >= abs(0.5 * e * q):
                d = e = xm
            else:
                e = d
                d = p / q
        else:
            d = e = xm

        a, fa = b, fb
        if abs(d) > tol2:
            b += d
        elif xm < 0.0:
            b -= tol2
        else:
            b += tol2
        fb = float(f(b))
        calls += 1

        if fb * _sign(fc) > 0.0:
            # b and c on the same side: the previous estimate becomes the far end
            c, fc = a, fa
            d = e = b - a
        else:
            a, b, c = b, c, b
            fa, fb, fc = fb, fc, fb

    warnings.warn(
        f"find_root did not converge within {MAX_ITER} iterations; "
        f"returning the last estimate {b}",
        RuntimeWarning,
        stacklevel=2,
    )
    return done(b, MAX_ITER, converged=False)
