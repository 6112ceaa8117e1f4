"""Defines a single-pass accumulator of summary statistics."""

from __future__ import annotations

# Standard Library Imports
from math import inf, nan, sqrt


class StreamingStatistics:
    r"""Accumulate count, extrema, mean and variance of a stream of values in one pass.

    The running mean and the sum of squared deviations are updated with Welford's method:

    .. math::

        \delta &= x_{n} - \bar{x}_{n-1} \\
        \bar{x}_{n} &= \bar{x}_{n-1} + \frac{\delta}{n} \\
        M_{2,n} &= M_{2,n-1} + \delta \left(x_{n} - \bar{x}_{n}\right)

    so the sample variance is :math:`M_{2,n} / (n - 1)` without storing the values.
    """

    def __init__(self) -> None:
        """Create an empty accumulator."""
        self._count = 0
        self._min = inf
        self._max = -inf
        self._mean = 0.0
        self._m2 = 0.0

    def addValue(self, value: float) -> None:
        """Add one value to the accumulated statistics.

        Args:
            value (``float``): new sample.
        """
        value = float(value)
        self._count += 1
        self._min = min(self._min, value)
        self._max = max(self._max, value)
        delta = value - self._mean
        self._mean += delta / self._count
        self._m2 += delta * (value - self._mean)

    @property
    def count(self) -> int:
        """``int``: number of accumulated values."""
        return self._count

    @property
    def min(self) -> float:
        """``float``: smallest value, ``nan`` if empty."""
        return self._min if self._count else nan

    @property
    def max(self) -> float:
        """``float``: largest value, ``nan`` if empty."""
        return self._max if self._count else nan

    @property
    def mean(self) -> float:
        """``float``: arithmetic mean, ``nan`` if empty."""
        return self._mean if self._count else nan

    @property
    def variance(self) -> float:
        """``float``: bias-corrected (sample) variance."""
        if self._count == 0:
            return nan
        if self._count == 1:
            return 0.0
        return self._m2 / (self._count - 1)

    @property
    def standard_deviation(self) -> float:
        """``float``: bias-corrected (sample) standard deviation."""
        return sqrt(self.variance)

    @property
    def population_variance(self) -> float:
        """``float``: population variance, normalized by the number of values."""
        if self._count == 0:
            return nan
        return self._m2 / self._count

    @property
    def population_standard_deviation(self) -> float:
        """``float``: population standard deviation."""
        return sqrt(self.population_variance)
