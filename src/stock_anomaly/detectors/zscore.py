"""Z-Score detector.

Flags bars whose close or volume lies more than ``threshold`` population
standard deviations away from the series mean. Price and volume are tested
independently, so a single bar can produce two candidates.
"""

from __future__ import annotations

import logging
from typing import Sequence

from stock_anomaly import stats
from stock_anomaly.types import (
    AnomalyCandidate,
    AnomalyType,
    Bar,
    Severity,
    ZScoreConfig,
)

logger = logging.getLogger(__name__)

NAME = "zscore"


def detect_zscore(
    bars: Sequence[Bar],
    config: ZScoreConfig | None = None,
) -> list[AnomalyCandidate]:
    """Run the Z-Score detector over a series.

    Works on any length but is most meaningful with 20 or more bars.

    :param bars: Chronologically ordered bars.
    :param config: Detector settings (defaults when omitted).
    :returns: One candidate per flagged (bar, price/volume) pair.
    """
    config = config or ZScoreConfig()
    if not bars:
        return []

    closes = [bar.close for bar in bars]
    volumes = [bar.volume for bar in bars]

    candidates = _scan(
        bars, closes, AnomalyType.PRICE, config.threshold, config
    ) + _scan(bars, volumes, AnomalyType.VOLUME, config.volume_threshold, config)

    logger.debug("zscore: %d candidates from %d bars", len(candidates), len(bars))
    return candidates


def _scan(
    bars: Sequence[Bar],
    values: list[float],
    kind: AnomalyType,
    threshold: float,
    config: ZScoreConfig,
) -> list[AnomalyCandidate]:
    mu = stats.mean(values)
    sigma = stats.stddev(values, mu)
    if sigma == 0:
        return []

    found = []
    for bar, value in zip(bars, values):
        z = abs(value - mu) / sigma
        if z <= threshold:
            continue
        direction = "above" if value > mu else "below"
        if kind is AnomalyType.PRICE:
            shown = f"{value:.2f}"
        else:
            shown = f"{value:,.0f}"
        found.append(
            AnomalyCandidate(
                date=bar.date,
                value=value,
                score=z,
                type=kind,
                severity=Severity.from_cutoffs(
                    z, config.high_cutoff, config.medium_cutoff
                ),
                description=(
                    f"Z-Score {kind.value} anomaly: {shown} is {z:.2f} "
                    f"standard deviations {direction} the mean"
                ),
                detector=NAME,
            )
        )
    return found
