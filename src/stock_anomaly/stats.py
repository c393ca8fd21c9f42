"""Numeric helpers shared by the detectors and metrics.

Every function is pure and guards against division by zero: degenerate input
produces a documented sentinel (usually ``0.0``) instead of NaN or infinity.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np


def mean(xs: Sequence[float]) -> float:
    """Arithmetic mean, ``0.0`` for empty input."""
    if len(xs) == 0:
        return 0.0
    return float(np.mean(np.asarray(xs, dtype=float)))


def stddev(xs: Sequence[float], mu: float | None = None) -> float:
    """Population standard deviation (divides by N).

    :param xs: Values.
    :param mu: Precomputed mean, computed from ``xs`` when omitted.
    :returns: Standard deviation, ``0.0`` for empty input.
    """
    if len(xs) == 0:
        return 0.0
    arr = np.asarray(xs, dtype=float)
    if mu is None:
        if arr.max() == arr.min():
            return 0.0
        mu = mean(xs)
    return float(np.sqrt(np.mean((arr - mu) ** 2)))


def variance(xs: Sequence[float]) -> float:
    """Population variance, ``0.0`` for empty input."""
    if len(xs) == 0:
        return 0.0
    arr = np.asarray(xs, dtype=float)
    if arr.max() == arr.min():
        return 0.0
    return float(np.var(arr))


def covariance(xs: Sequence[float], ys: Sequence[float]) -> float:
    """Population covariance over the overlapping prefix of both series."""
    n = min(len(xs), len(ys))
    if n == 0:
        return 0.0
    x = np.asarray(xs[:n], dtype=float)
    y = np.asarray(ys[:n], dtype=float)
    return float(np.mean((x - x.mean()) * (y - y.mean())))


def ema(xs: Sequence[float], period: int) -> list[float]:
    """Exponential moving average seeded with the first value.

    :param xs: Values.
    :param period: EMA period; the multiplier is ``2 / (period + 1)``.
    :returns: List with the same length as ``xs``.
    """
    if len(xs) == 0:
        return []
    k = 2.0 / (period + 1)
    result = [float(xs[0])]
    for x in xs[1:]:
        result.append(float(x) * k + result[-1] * (1 - k))
    return result


def moving_average(xs: Sequence[float], window: int) -> list[float]:
    """Trailing simple moving average.

    Entry ``j`` is the mean of ``xs[j : j + window]``, so the result has
    ``len(xs) - window + 1`` entries (empty when the window does not fit).
    """
    if window < 1 or window > len(xs):
        return []
    return [mean(xs[j : j + window]) for j in range(len(xs) - window + 1)]


def pearson_correlation(xs: Sequence[float], ys: Sequence[float]) -> float:
    """Product-moment correlation over the overlapping prefix.

    Returns ``0.0`` when either series is empty or either is constant.
    """
    n = min(len(xs), len(ys))
    if n == 0:
        return 0.0
    x = np.asarray(xs[:n], dtype=float)
    y = np.asarray(ys[:n], dtype=float)
    if np.ptp(x) == 0 or np.ptp(y) == 0:
        return 0.0

    dx = x - x.mean()
    dy = y - y.mean()
    denominator = math.sqrt(float(np.sum(dx * dx)) * float(np.sum(dy * dy)))
    if denominator == 0:
        return 0.0
    r = float(np.sum(dx * dy)) / denominator
    # Rounding can push |r| a hair past 1
    return max(-1.0, min(1.0, r))


def percentile(xs: Sequence[float], p: float) -> float:
    """Nearest-rank percentile without interpolation.

    Sorts ascending and returns the element at ``floor(p / 100 * n)``,
    clamped to the last element. ``0.0`` for empty input.
    """
    n = len(xs)
    if n == 0:
        return 0.0
    ordered = sorted(float(x) for x in xs)
    idx = int(math.floor(p / 100.0 * n))
    return ordered[max(0, min(idx, n - 1))]


def daily_returns(closes: Sequence[float]) -> list[float]:
    """Simple close-to-close returns; a zero previous close yields ``0.0``."""
    returns = []
    for prev, cur in zip(closes, closes[1:]):
        returns.append((cur - prev) / prev if prev != 0 else 0.0)
    return returns


__all__ = [
    "mean",
    "stddev",
    "variance",
    "covariance",
    "ema",
    "moving_average",
    "pearson_correlation",
    "percentile",
    "daily_returns",
]
