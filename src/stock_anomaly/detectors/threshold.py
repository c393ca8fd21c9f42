"""Day-over-day threshold detector used as a fallback for short series."""

from __future__ import annotations

import logging
from typing import Sequence

from stock_anomaly.types import (
    AnomalyCandidate,
    AnomalyType,
    Bar,
    Severity,
    ThresholdConfig,
)

logger = logging.getLogger(__name__)

NAME = "threshold"


def detect_threshold(
    bars: Sequence[Bar],
    config: ThresholdConfig | None = None,
) -> list[AnomalyCandidate]:
    """Flag large single-day close or volume moves.

    Only active for series shorter than ``config.min_length``; longer series
    are left to the statistical detectors. Scores are the move divided by
    its threshold.

    :param bars: Chronologically ordered bars.
    :param config: Detector settings (defaults when omitted).
    :returns: Candidates for oversized day-over-day moves.
    """
    config = config or ThresholdConfig()
    if len(bars) < 2 or len(bars) >= config.min_length:
        return []

    logger.debug("threshold fallback active for %d bars", len(bars))

    candidates = []
    for prev, bar in zip(bars, bars[1:]):
        price_move = abs(bar.close - prev.close) / prev.close
        if price_move > config.price_change:
            candidates.append(
                _candidate(bar, AnomalyType.PRICE, bar.close, price_move, config.price_change)
            )

        if prev.volume > 0:
            volume_move = abs(bar.volume - prev.volume) / prev.volume
            if volume_move > config.volume_change:
                candidates.append(
                    _candidate(
                        bar, AnomalyType.VOLUME, bar.volume, volume_move, config.volume_change
                    )
                )

    return candidates


def _candidate(
    bar: Bar,
    kind: AnomalyType,
    value: float,
    move: float,
    limit: float,
) -> AnomalyCandidate:
    ratio = move / limit
    return AnomalyCandidate(
        date=bar.date,
        value=value,
        score=ratio,
        type=kind,
        severity=Severity.from_cutoffs(ratio, 3.0, 2.0),
        description=f"Day-over-day {kind.value} move of {move * 100:.1f}%",
        detector=NAME,
    )
