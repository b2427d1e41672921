"""Interpolations used by the term structures.

Only the natural cubic spline (zero second derivative at both ends) is
provided; a single knot degenerates into a constant.
"""

import numpy as np
from scipy.interpolate import CubicSpline

from .errors import ConfigurationError


def _check_knots(x, y, required_points):
    if x.ndim != 1 or x.shape != y.shape:
        raise ConfigurationError(
            f"mismatch between number of knot times ({x.size}) and values ({y.size})"
        )
    if x.size < required_points:
        raise ConfigurationError(
            f"interpolation requires at least {required_points} knots, {x.size} given"
        )
    if not (np.all(np.isfinite(x)) and np.all(np.isfinite(y))):
        raise ConfigurationError("knot times and values must be finite")
    if np.any(np.diff(x) <= 0.0):
        raise ConfigurationError(f"knot times must be strictly increasing: {x.tolist()}")


class NaturalCubicSpline:
    """Natural cubic spline through (x, y), extrapolated past both ends."""

    required_points = 4

    def __init__(self, x, y):
        self.x = np.asarray(x, dtype=float)
        self.y = np.asarray(y, dtype=float)
        _check_knots(self.x, self.y, self.required_points)
        self._spline = CubicSpline(self.x, self.y, bc_type="natural", extrapolate=True)

    def __call__(self, t):
        return float(self._spline(float(t)))


class FlatInterpolation:
    """Constant through a single knot."""

    required_points = 1

    def __init__(self, x, y):
        self.x = np.asarray(x, dtype=float)
        self.y = np.asarray(y, dtype=float)
        _check_knots(self.x, self.y, self.required_points)
        self._value = float(self.y[0])

    def __call__(self, t):
        return self._value


def make_interpolation(x, y):
    if len(x) == 1 and len(y) == 1:
        return FlatInterpolation(x, y)
    return NaturalCubicSpline(x, y)
