"""
Spline: tabulated cross section as a natural cubic interpolant.

Built from N (E, xsec) knots with strictly increasing E. Evaluation
reproduces the knot values exactly at the knot abscissas, interpolates
with a natural cubic spline in between, and returns 0 outside the knot
range (a tabulated cross section says nothing about energies it was
never computed at).

IMPORTANT: No unicode characters allowed (spline files are ISO-8859-1).
"""

import numpy as np
from scipy.interpolate import make_interp_spline


class Spline:
    """
    Natural cubic spline through (x, y) knots.

    Parameters
    ----------
    x : sequence of float
        Knot abscissas, strictly increasing, at least 2 values.
    y : sequence of float
        Knot values, same length as x. Passed through unchanged.

    Raises
    ------
    ValueError
        If the knots are not 1-D, lengths differ, fewer than 2 knots are
        given, or x is not strictly increasing.
    """

    def __init__(self, x, y):
        x = np.array(x, dtype=float)
        y = np.array(y, dtype=float)
        if x.ndim != 1:
            raise ValueError("Spline knots must be 1-D")
        if y.shape != x.shape:
            raise ValueError(
                "Spline knot length mismatch: {} x vs {} y".format(x.size, y.size))
        if x.size < 2:
            raise ValueError("Spline needs at least 2 knots, got {}".format(x.size))
        if np.any(x[1:] <= x[:-1]):
            raise ValueError("Spline knots must be strictly increasing")

        self._x = x
        self._y = y
        # Non-finite knot values are kept as given; they only poison the
        # interpolant between knots, never the stored knot values.
        self._cs = make_interp_spline(x, y, k=3, bc_type="natural",
                                      check_finite=False)

    @property
    def nknots(self):
        return self._x.size

    @property
    def x(self):
        """Knot abscissas (copy)."""
        return self._x.copy()

    @property
    def y(self):
        """Knot values (copy)."""
        return self._y.copy()

    @property
    def xmin(self):
        return float(self._x[0])

    @property
    def xmax(self):
        return float(self._x[-1])

    def knots(self):
        """Iterate (x, y) knot pairs in ascending x."""
        return zip(self._x.tolist(), self._y.tolist())

    def is_within_valid_range(self, x):
        return self.xmin <= x <= self.xmax

    def evaluate(self, x):
        """
        Spline value at x (scalar or array).

        Knot abscissas return the stored knot value exactly; points
        outside [xmin, xmax] return 0.
        """
        xs = np.asarray(x, dtype=float)
        scalar = xs.ndim == 0
        xs = np.atleast_1d(xs)

        out = np.zeros_like(xs)
        inside = (xs >= self._x[0]) & (xs <= self._x[-1])
        out[inside] = self._cs(xs[inside])

        idx = np.searchsorted(self._x, xs)
        idx = np.minimum(idx, self._x.size - 1)
        on_knot = self._x[idx] == xs
        out[on_knot] = self._y[idx[on_knot]]

        if scalar:
            return float(out[0])
        return out

    __call__ = evaluate

    def to_dict(self):
        """Serialize knots for API responses."""
        return {
            "nknots": self.nknots,
            "E": self._x.tolist(),
            "xsec": self._y.tolist(),
        }

    def __repr__(self):
        return "Spline(nknots={}, E=[{:g}, {:g}])".format(
            self.nknots, self.xmin, self.xmax)
