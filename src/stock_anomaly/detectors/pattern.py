"""Pump-and-dump pattern detector.

Slides a ``±window`` neighbourhood over the closes. A centre bar that is the
highest close of its neighbourhood is a pump-and-dump peak when the price
rose sharply into it, fell sharply after it, and its volume spiked.
"""

from __future__ import annotations

import logging
from typing import Sequence

from stock_anomaly import stats
from stock_anomaly.types import (
    AnomalyCandidate,
    AnomalyType,
    Bar,
    PatternConfig,
    Severity,
)

logger = logging.getLogger(__name__)

NAME = "pattern"

MAX_CONFIDENCE = 0.9


def detect_pattern(
    bars: Sequence[Bar],
    config: PatternConfig | None = None,
) -> list[AnomalyCandidate]:
    """Run the pump-and-dump detector over a series.

    :param bars: Chronologically ordered bars.
    :param config: Detector settings (defaults when omitted).
    :returns: One candidate per detected peak, scored by confidence.
    """
    config = config or PatternConfig()
    if len(bars) < config.min_length:
        return []

    w = config.window
    closes = [bar.close for bar in bars]
    volumes = [bar.volume for bar in bars]

    candidates = []
    for i in range(w, len(bars) - w):
        peak = closes[i]
        if peak < max(closes[i - w : i + w + 1]):
            continue

        pre_price = closes[i - w]
        post_price = closes[i + w]
        avg_volume = stats.mean(volumes[i - w : i + w + 1])
        if avg_volume == 0:
            continue

        pump = (peak - pre_price) / pre_price
        dump = (peak - post_price) / peak
        spike = volumes[i] / avg_volume
        if (
            pump <= config.pump_threshold
            or dump <= config.dump_threshold
            or spike <= config.volume_spike
        ):
            continue

        confidence = min(MAX_CONFIDENCE, (pump + dump) * spike * 0.1)
        candidates.append(
            AnomalyCandidate(
                date=bars[i].date,
                value=peak,
                score=confidence,
                type=AnomalyType.PRICE,
                severity=Severity.from_cutoffs(
                    confidence, config.high_cutoff, config.medium_cutoff
                ),
                description=(
                    f"Possible pump-and-dump: +{pump * 100:.1f}% run-up, "
                    f"-{dump * 100:.1f}% decline, {spike:.1f}x volume "
                    f"(confidence {confidence:.2f})"
                ),
                detector=NAME,
            )
        )

    logger.debug("pattern: %d candidates from %d bars", len(candidates), len(bars))
    return candidates
