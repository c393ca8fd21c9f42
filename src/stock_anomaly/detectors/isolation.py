"""Isolation-score detector.

A distance-based stand-in for an isolation forest: each bar becomes a
feature vector and its score is the mean Euclidean distance to every other
bar. Bars scoring above the ``(1 - contamination)`` percentile are flagged.
Features are deliberately left unscaled, so volume-driven terms dominate.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from stock_anomaly import stats
from stock_anomaly.types import (
    AnomalyCandidate,
    AnomalyType,
    Bar,
    IsolationConfig,
    Severity,
)

logger = logging.getLogger(__name__)

NAME = "isolation"


def bar_features(bars: Sequence[Bar]) -> NDArray[np.float64]:
    """Build the ``(n, 5)`` feature matrix.

    Columns: close, volume, high - low, (close - open) / open, volume * close.
    """
    return np.array(
        [
            [
                bar.close,
                bar.volume,
                bar.high - bar.low,
                (bar.close - bar.open) / bar.open,
                bar.volume * bar.close,
            ]
            for bar in bars
        ],
        dtype=np.float64,
    )


def isolation_scores(features: NDArray[np.float64]) -> NDArray[np.float64]:
    """Mean distance from each row to all other rows (O(n^2))."""
    n = len(features)
    if n < 2:
        return np.zeros(n)
    diffs = features[:, None, :] - features[None, :, :]
    distances = np.sqrt(np.sum(diffs * diffs, axis=-1))
    return distances.sum(axis=1) / (n - 1)


def detect_isolation(
    bars: Sequence[Bar],
    config: IsolationConfig | None = None,
) -> list[AnomalyCandidate]:
    """Run the isolation-score detector over a series.

    The candidate score is the bar's isolation score divided by the
    threshold, so every flagged bar scores above 1. The anomaly type is
    whichever of close or volume deviates more, in standard deviations,
    from its series mean.

    :param bars: Chronologically ordered bars.
    :param config: Detector settings (defaults when omitted).
    :returns: Candidates for isolated bars.
    """
    config = config or IsolationConfig()
    if len(bars) < 2:
        return []

    scores = isolation_scores(bar_features(bars))
    threshold = stats.percentile(scores.tolist(), (1 - config.contamination) * 100)
    if threshold <= 0:
        return []

    closes = [bar.close for bar in bars]
    volumes = [bar.volume for bar in bars]
    close_mu, volume_mu = stats.mean(closes), stats.mean(volumes)
    close_sigma = stats.stddev(closes, close_mu)
    volume_sigma = stats.stddev(volumes, volume_mu)

    candidates = []
    for bar, score in zip(bars, scores):
        score = float(score)
        if score <= threshold:
            continue

        price_z = abs(bar.close - close_mu) / close_sigma if close_sigma else 0.0
        volume_z = abs(bar.volume - volume_mu) / volume_sigma if volume_sigma else 0.0
        if volume_z > price_z:
            kind, value = AnomalyType.VOLUME, bar.volume
        else:
            kind, value = AnomalyType.PRICE, bar.close

        ratio = score / threshold
        candidates.append(
            AnomalyCandidate(
                date=bar.date,
                value=value,
                score=ratio,
                type=kind,
                severity=Severity.from_cutoffs(
                    ratio, config.high_factor, config.medium_factor
                ),
                description=(
                    f"Isolation score outlier: {ratio:.2f}x the "
                    f"{(1 - config.contamination) * 100:.0f}th percentile"
                ),
                detector=NAME,
            )
        )

    logger.debug("isolation: %d candidates from %d bars", len(candidates), len(bars))
    return candidates
