"""MACD divergence detector.

The MACD line is ``EMA(fast) - EMA(slow)`` of the closes, the signal line is
an EMA of the MACD line and the histogram is their difference. A bar is
flagged when the histogram jumps to more than ``jump_factor`` times its
previous magnitude while also exceeding ``min_histogram``.
"""

from __future__ import annotations

import logging
from typing import Sequence

from stock_anomaly import stats
from stock_anomaly.types import (
    AnomalyCandidate,
    AnomalyType,
    Bar,
    MACDConfig,
    Severity,
)

logger = logging.getLogger(__name__)

NAME = "macd"


def macd_histogram(closes: Sequence[float], config: MACDConfig) -> list[float]:
    """Compute the MACD histogram for a close series.

    :param closes: Close prices.
    :param config: Periods to use.
    :returns: Histogram values, same length as ``closes``.
    """
    fast = stats.ema(closes, config.fast_period)
    slow = stats.ema(closes, config.slow_period)
    macd_line = [f - s for f, s in zip(fast, slow)]
    signal = stats.ema(macd_line, config.signal_period)
    return [m - s for m, s in zip(macd_line, signal)]


def detect_macd(
    bars: Sequence[Bar],
    config: MACDConfig | None = None,
) -> list[AnomalyCandidate]:
    """Run the MACD divergence detector over a series.

    Requires at least ``slow_period + signal_period`` bars; only bars from
    that warm-up point onwards are evaluated.

    :param bars: Chronologically ordered bars.
    :param config: Detector settings (defaults when omitted).
    :returns: Candidates for sudden histogram expansions.
    """
    config = config or MACDConfig()
    warmup = config.slow_period + config.signal_period
    if len(bars) < warmup:
        return []

    closes = [bar.close for bar in bars]
    histogram = macd_histogram(closes, config)

    candidates = []
    for i in range(warmup - 1, len(bars)):
        current = abs(histogram[i])
        previous = abs(histogram[i - 1])
        if current <= config.min_histogram:
            continue
        if current <= config.jump_factor * previous:
            continue

        direction = "bullish" if histogram[i] > 0 else "bearish"
        candidates.append(
            AnomalyCandidate(
                date=bars[i].date,
                value=closes[i],
                score=current,
                type=AnomalyType.PRICE,
                severity=Severity.from_cutoffs(
                    current, config.high_cutoff, config.medium_cutoff
                ),
                description=(
                    f"MACD {direction} divergence: histogram {histogram[i]:+.3f} "
                    f"(previous {histogram[i - 1]:+.3f})"
                ),
                detector=NAME,
            )
        )

    logger.debug("macd: %d candidates from %d bars", len(candidates), len(bars))
    return candidates
