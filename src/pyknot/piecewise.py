"""Piecewise cubic polynomials over a strictly increasing knot sequence.

:class:`PiecewisePolynomial` is the representation shared by every spline
in PyKnot: ``n + 1`` knots and one coefficient quadruple ``(a, b, c, d)``
per interval, evaluated with Horner's scheme.  Builders such as
:class:`~pyknot.natural.NaturalCubicSpline` and
:class:`~pyknot.kruger.KrugerSpline` derive the coefficients from sample
data and then hand them to this class.
"""

from __future__ import annotations

import os
import pickle
import warnings
from typing import Sequence, Tuple

import numpy as np

from pyknot._exceptions import DomainError, PreconditionError

# Row k rescales the shifted coefficients of the k-th derivative:
# d/dt (a + b t + c t^2 + d t^3) = b + 2c t + 3d t^2, and so on.
_DERIVATIVE_FACTORS = np.array([
    [1.0, 1.0, 1.0, 1.0],
    [1.0, 2.0, 3.0, 0.0],
    [2.0, 6.0, 0.0, 0.0],
    [6.0, 0.0, 0.0, 0.0],
])


def _validate_knots(knots: Sequence[float]) -> np.ndarray:
    """Return *knots* as a fresh float array, checking it is a usable knot sequence.

    Raises
    ------
    PreconditionError
        If the sequence is not 1-D, has fewer than two entries, contains
        NaN/Inf, or is not strictly increasing.
    """
    knots = np.array(knots, dtype=float)
    if knots.ndim != 1:
        raise PreconditionError(
            f"Knots must be a 1-D sequence, got shape {knots.shape}"
        )
    if knots.size < 2:
        raise PreconditionError(
            f"At least 2 knots are required, got {knots.size}"
        )
    if not np.all(np.isfinite(knots)):
        raise PreconditionError("Knots must be finite (no NaN or Inf)")
    steps = np.diff(knots)
    if np.any(steps <= 0.0):
        i = int(np.argmax(steps <= 0.0))
        raise PreconditionError(
            f"Knots must be strictly increasing, but "
            f"knots[{i}]={knots[i]} >= knots[{i + 1}]={knots[i + 1]}"
        )
    return knots


def _validate_samples(
    points: Sequence[float], values: Sequence[float]
) -> Tuple[np.ndarray, np.ndarray]:
    """Validate a ``(points, values)`` sample pair for a spline builder.

    Parameters
    ----------
    points : sequence of float
        Knot positions, strictly increasing, at least two.
    values : sequence of float
        Sample values, one per knot.

    Returns
    -------
    points, values : ndarray
        Float copies of the inputs.

    Raises
    ------
    PreconditionError
        If the knots are malformed, the lengths differ or a value is
        NaN/Inf.
    """
    points = _validate_knots(points)
    values = np.array(values, dtype=float)
    if values.ndim != 1:
        raise PreconditionError(
            f"Values must be a 1-D sequence, got shape {values.shape}"
        )
    if values.size != points.size:
        raise PreconditionError(
            f"points and values must have the same length, "
            f"got {points.size} and {values.size}"
        )
    if not np.all(np.isfinite(values)):
        raise PreconditionError("Values must be finite (no NaN or Inf)")
    return points, values


def _differentiate(coefficients: np.ndarray, order: int) -> np.ndarray:
    """Coefficients of the *order*-th derivative of cubic quadruples ``(..., 4)``."""
    if order < 0:
        raise ValueError(f"derivative_order must be >= 0, got {order}")
    if order == 0:
        return coefficients
    if order > 3:
        return np.zeros_like(coefficients)
    shifted = np.zeros_like(coefficients)
    shifted[..., :4 - order] = coefficients[..., order:]
    return shifted * _DERIVATIVE_FACTORS[order]


def _horner(coefficients: np.ndarray, t):
    """Evaluate ``a + b t + c t^2 + d t^3`` as ``((d t + c) t + b) t + a``."""
    a = coefficients[..., 0]
    b = coefficients[..., 1]
    c = coefficients[..., 2]
    d = coefficients[..., 3]
    return ((d * t + c) * t + b) * t + a


class PiecewisePolynomial:
    """Piecewise cubic polynomial on ``[knots[0], knots[-1]]``.

    Segment ``i`` covers ``[knots[i], knots[i + 1])`` (the last segment
    also owns the final knot) and evaluates
    ``a + b*t + c*t**2 + d*t**3``.  With ``local=True`` the variable is
    ``t = x - knots[i]``; with ``local=False`` it is the absolute
    coordinate ``t = x``.

    Instances are immutable: the knot and coefficient arrays are stored
    read-only and evaluation never modifies the object, so one instance
    can be shared between threads without locking.

    Parameters
    ----------
    knots : sequence of float
        Strictly increasing knot positions, at least two.
    coefficients : array_like of shape (len(knots) - 1, 4)
        Per-segment ``(a, b, c, d)`` quadruples.
    local : bool, optional
        Coordinate convention of the coefficients (default True).

    Raises
    ------
    PreconditionError
        If the knots are malformed or ``coefficients`` has the wrong shape.

    Examples
    --------
    >>> pp = PiecewisePolynomial([0.0, 1.0, 2.0], [[0, 1, 0, 0], [1, 2, 0, 0]])
    >>> pp.value(0.5)
    0.5
    >>> pp.value(1.5)
    2.0
    """

    def __init__(
        self,
        knots: Sequence[float],
        coefficients,
        local: bool = True,
    ):
        knots = _validate_knots(knots)
        coefficients = np.array(coefficients, dtype=float)
        expected = (knots.size - 1, 4)
        if coefficients.shape != expected:
            raise PreconditionError(
                f"coefficients must have shape {expected}, "
                f"got {coefficients.shape}"
            )
        knots.flags.writeable = False
        coefficients.flags.writeable = False
        self._knots = knots
        self._coefficients = coefficients
        self._local = bool(local)

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def _segment_index(self, x: float) -> int:
        # side='right' puts an exact knot hit at the segment starting there;
        # the last knot has no such segment and falls back to the final one.
        i = int(np.searchsorted(self._knots, x, side="right")) - 1
        return min(i, self.num_segments - 1)

    def value(self, point: float, derivative_order: int = 0) -> float:
        """Evaluate the polynomial (or one of its derivatives) at a point.

        Parameters
        ----------
        point : float
            Evaluation point, within ``[knots[0], knots[-1]]``.
        derivative_order : int, optional
            0 for the value (default), 1-3 for derivatives of the active
            segment.  Orders above 3 give 0.0.

        Returns
        -------
        float
            Interpolated value or derivative.

        Raises
        ------
        DomainError
            If ``point`` is outside the knot range (or NaN).
        ValueError
            If ``derivative_order`` is negative.
        """
        x = float(point)
        lo, hi = self.domain
        if not (lo <= x <= hi):
            raise DomainError(f"point {x} out of range [{lo}, {hi}]")
        i = self._segment_index(x)
        t = x - self._knots[i] if self._local else x
        coeffs = _differentiate(self._coefficients[i], derivative_order)
        return float(_horner(coeffs, t))

    def value_batch(self, points, derivative_order: int = 0) -> np.ndarray:
        """Evaluate at many points at once.

        Segment lookup is vectorised with ``np.searchsorted`` and the
        Horner recurrence runs over whole arrays.

        Parameters
        ----------
        points : array_like of shape (N,)
            Evaluation points.
        derivative_order : int, optional
            Derivative order, as in :meth:`value`.

        Returns
        -------
        ndarray of shape (N,)
            Values or derivatives at each point.

        Raises
        ------
        DomainError
            If any point is outside the knot range.
        """
        x = np.atleast_1d(np.asarray(points, dtype=float))
        lo, hi = self.domain
        outside = ~((x >= lo) & (x <= hi))
        if np.any(outside):
            bad = x[outside][0]
            raise DomainError(f"point {bad} out of range [{lo}, {hi}]")
        idx = np.searchsorted(self._knots, x, side="right") - 1
        np.clip(idx, 0, self.num_segments - 1, out=idx)
        t = x - self._knots[idx] if self._local else x
        coeffs = _differentiate(self._coefficients[idx], derivative_order)
        return _horner(coeffs, t)

    def __call__(self, x: float) -> float:
        return self.value(x)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def knots(self) -> np.ndarray:
        """Read-only knot array."""
        return self._knots

    @property
    def coefficients(self) -> np.ndarray:
        """Read-only ``(num_segments, 4)`` array of ``(a, b, c, d)``."""
        return self._coefficients

    @property
    def domain(self) -> Tuple[float, float]:
        """``(min_knot, max_knot)``."""
        return float(self._knots[0]), float(self._knots[-1])

    @property
    def num_segments(self) -> int:
        return self._coefficients.shape[0]

    @property
    def local(self) -> bool:
        """True if segments use ``t = x - knots[i]``, False for ``t = x``."""
        return self._local

    @property
    def absolute_coefficients(self) -> np.ndarray:
        """Coefficients re-expanded in the global coordinate ``t = x``.

        For display and comparison only: expanding around a knot far from
        zero cancels badly, so evaluation always uses :attr:`coefficients`.
        """
        if not self._local:
            return self._coefficients.copy()
        a, b, c, d = self._coefficients.T
        x0 = self._knots[:-1]
        return np.column_stack([
            a - b * x0 + c * x0**2 - d * x0**3,
            b - 2.0 * c * x0 + 3.0 * d * x0**2,
            c - 3.0 * d * x0,
            d,
        ])

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def __getstate__(self) -> dict:
        """Return picklable state tagged with the package version."""
        from pyknot._version import __version__

        state = self.__dict__.copy()
        state["_pyknot_version"] = __version__
        return state

    def __setstate__(self, state: dict) -> None:
        """Restore state from a pickled dict."""
        from pyknot._version import __version__

        saved_version = state.pop("_pyknot_version", None)
        if saved_version is not None and saved_version != __version__:
            warnings.warn(
                f"This object was saved with pyknot {saved_version}, "
                f"but you are loading it with {__version__}. "
                f"Evaluation results may differ if internal data layout "
                f"changed.",
                UserWarning,
                stacklevel=2,
            )

        self.__dict__.update(state)
        for name in ("_knots", "_coefficients", "_values"):
            array = self.__dict__.get(name)
            if isinstance(array, np.ndarray):
                array.flags.writeable = False

    def save(self, path: str | os.PathLike) -> None:
        """Save the polynomial to a file.

        Parameters
        ----------
        path : str or path-like
            Destination file path.
        """
        with open(os.fspath(path), "wb") as f:
            pickle.dump(self, f, protocol=pickle.HIGHEST_PROTOCOL)

    @classmethod
    def load(cls, path: str | os.PathLike) -> "PiecewisePolynomial":
        """Load a polynomial previously written by :meth:`save`.

        Parameters
        ----------
        path : str or path-like
            Path to the saved file.

        Returns
        -------
        PiecewisePolynomial
            The restored object (same subclass it was saved as).

        Raises
        ------
        TypeError
            If the file does not contain an instance of ``cls``.

        Warns
        -----
        UserWarning
            If the file was saved with a different PyKnot version.

        .. warning::

            This method uses :mod:`pickle` internally.  Pickle can execute
            arbitrary code during deserialization.  **Only load files you
            trust.**
        """
        with open(os.fspath(path), "rb") as f:
            obj = pickle.load(f)  # noqa: S301
        if not isinstance(obj, cls):
            raise TypeError(
                f"Expected a {cls.__name__} instance, "
                f"got {type(obj).__name__}"
            )
        return obj

    # ------------------------------------------------------------------
    # Printing
    # ------------------------------------------------------------------

    def __repr__(self) -> str:
        lo, hi = self.domain
        return (
            f"{type(self).__name__}("
            f"segments={self.num_segments}, "
            f"domain=[{lo}, {hi}], "
            f"local={self._local})"
        )

    def __str__(self) -> str:
        lo, hi = self.domain
        max_display = 6
        if self._knots.size > max_display:
            knots_str = (
                "["
                + ", ".join(f"{k:g}" for k in self._knots[:max_display])
                + ", ...]"
            )
        else:
            knots_str = "[" + ", ".join(f"{k:g}" for k in self._knots) + "]"
        convention = "t = x - knot" if self._local else "t = x"
        lines = [
            f"{type(self).__name__} ({self.num_segments} cubic segments)",
            f"  Knots:       {knots_str}",
            f"  Domain:      [{lo}, {hi}]",
            f"  Coordinate:  {convention}",
        ]
        return "\n".join(lines)
