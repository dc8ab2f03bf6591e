"""
One-dimensional piecewise-linear interpolation with linear edge extrapolation.

Queries outside the knot range are extrapolated from the first or last
interval rather than clamped or rejected.
"""

import logging
from typing import Union

import numpy as np

from .error_handling import ConfigurationError, DomainError

logger = logging.getLogger(__name__)

ArrayLike = Union[np.ndarray, list, tuple]


class Interpolator:
    """Linear interpolator over a fixed set of knots.

    The knots are sorted once on construction (unless the caller asserts
    they already ascend in x), so repeated queries only pay for the binary
    search.
    """

    def __init__(self, x: ArrayLike, y: ArrayLike, monotonic: bool = False):
        """Initialize interpolator.

        Args:
            x: Knot x-values
            y: Knot y-values, one per x-value
            monotonic: True if x already ascends; skips the joint sort

        Raises:
            ConfigurationError: If the knots are not two equal-length 1-D
                sequences of at least two finite points
        """
        x = np.array(x, dtype=np.float64)
        y = np.array(y, dtype=np.float64)

        if x.ndim != 1 or y.ndim != 1:
            raise ConfigurationError("Interpolation knots must be 1-dimensional", "x")
        if x.size != y.size:
            raise ConfigurationError(
                f"Knot arrays differ in length: {x.size} x-values vs {y.size} y-values", "y"
            )
        if x.size < 2:
            raise ConfigurationError(
                f"Interpolation needs at least 2 knots, got {x.size}", "x"
            )
        for name, values in (("x", x), ("y", y)):
            if not np.all(np.isfinite(values)):
                raise ConfigurationError(f"Interpolation knot {name}-values must be finite", name)

        if not monotonic:
            order = np.argsort(x, kind="stable")
            x = x[order]
            y = y[order]

        self.x = x
        self.y = y

        logger.debug(f"Interpolator initialized with {x.size} knots over [{x[0]}, {x[-1]}]")

    @property
    def num_knots(self) -> int:
        return self.x.size

    def __call__(self, xi: ArrayLike) -> np.ndarray:
        """Evaluate the interpolant at every query value.

        Args:
            xi: Query x-values

        Returns:
            Interpolated values, same shape as ``xi``

        Raises:
            ConfigurationError: If a query value is NaN or infinite
            DomainError: If a query falls on an interval of zero width
        """
        xi = np.asarray(xi, dtype=np.float64)
        if not np.all(np.isfinite(xi)):
            raise ConfigurationError("Interpolation queries must be finite", "xi")

        # An exact hit on knot i selects the interval ending at that knot
        upper = np.searchsorted(self.x, xi, side="left")
        upper = np.clip(upper, 1, self.x.size - 1)
        lower = upper - 1

        x0 = self.x[lower]
        x2 = self.x[upper]
        y0 = self.y[lower]
        y2 = self.y[upper]

        width = x2 - x0
        if np.any(width == 0):
            duplicate = np.atleast_1d(x0)[np.atleast_1d(width == 0)][0]
            raise DomainError(
                f"Degenerate interpolation interval: duplicate knot at x={duplicate}",
                "linear_interpolation_1d",
            )

        return y0 + (y2 - y0) * (xi - x0) / width


def linear_interpolation_1d(
    x: ArrayLike, y: ArrayLike, xi: ArrayLike, monotonic: bool = False
) -> np.ndarray:
    """Interpolate ``y(x)`` linearly at the query points ``xi``.

    Knot pairs are treated as an unordered set of correspondences unless
    ``monotonic`` is set. The caller's arrays are never modified.

    Args:
        x: Knot x-values
        y: Knot y-values
        xi: Query x-values
        monotonic: True if x already ascends

    Returns:
        Array of interpolated values
    """
    return Interpolator(x, y, monotonic=monotonic)(xi)
