"""Bollinger Bands detector.

A close is anomalous when it breaches the envelope ``SMA ± k * sigma``
computed over the trailing ``period`` bars ending at (and including) it.
"""

from __future__ import annotations

import logging
from typing import Sequence

from stock_anomaly import stats
from stock_anomaly.types import (
    AnomalyCandidate,
    AnomalyType,
    Bar,
    BollingerConfig,
    Severity,
)

logger = logging.getLogger(__name__)

NAME = "bollinger"


def detect_bollinger(
    bars: Sequence[Bar],
    config: BollingerConfig | None = None,
) -> list[AnomalyCandidate]:
    """Run the Bollinger Bands detector over a series.

    The candidate score is the relative distance beyond the breached band,
    expressed in percent; severity uses the same distance as a fraction.

    :param bars: Chronologically ordered bars.
    :param config: Detector settings (defaults when omitted).
    :returns: Candidates for closes outside the bands.
    """
    config = config or BollingerConfig()
    period = config.period
    if len(bars) < period:
        return []

    closes = [bar.close for bar in bars]
    sma = stats.moving_average(closes, period)

    candidates = []
    for i in range(period - 1, len(bars)):
        window = closes[i - period + 1 : i + 1]
        middle = sma[i - period + 1]
        sigma = stats.stddev(window, middle)
        if sigma == 0:
            continue

        upper = middle + config.num_std * sigma
        lower = middle - config.num_std * sigma
        close = closes[i]

        if close > upper:
            deviation = (close - upper) / upper
            side, band = "above upper", upper
        elif close < lower:
            # lower > 0 here because close is positive
            deviation = (lower - close) / lower
            side, band = "below lower", lower
        else:
            continue

        candidates.append(
            AnomalyCandidate(
                date=bars[i].date,
                value=close,
                score=deviation * 100,
                type=AnomalyType.PRICE,
                severity=Severity.from_cutoffs(
                    deviation, config.high_cutoff, config.medium_cutoff
                ),
                description=(
                    f"Bollinger Band breach: close {close:.2f} {side} band "
                    f"{band:.2f} ({deviation * 100:.2f}% beyond band)"
                ),
                detector=NAME,
            )
        )

    logger.debug("bollinger: %d candidates from %d bars", len(candidates), len(bars))
    return candidates
