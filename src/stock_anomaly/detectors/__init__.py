"""Anomaly detectors.

Each detector is a pure function ``detect_x(bars, config)`` returning a list
of :class:`~stock_anomaly.types.AnomalyCandidate`. ``DETECTORS`` maps the
detector name (also the attribute name on ``DetectionConfig``) to its
function, in evaluation order.
"""

from __future__ import annotations

from typing import Callable, Sequence

from stock_anomaly.detectors.bollinger import detect_bollinger
from stock_anomaly.detectors.isolation import detect_isolation
from stock_anomaly.detectors.macd import detect_macd
from stock_anomaly.detectors.pattern import detect_pattern
from stock_anomaly.detectors.threshold import detect_threshold
from stock_anomaly.detectors.zscore import detect_zscore
from stock_anomaly.types import AnomalyCandidate, Bar

DetectorFn = Callable[[Sequence[Bar], object], list[AnomalyCandidate]]

DETECTORS: dict[str, DetectorFn] = {
    "zscore": detect_zscore,
    "bollinger": detect_bollinger,
    "macd": detect_macd,
    "isolation": detect_isolation,
    "pattern": detect_pattern,
    "threshold": detect_threshold,
}

# Human-readable names used in explanations and CLI output
DETECTOR_LABELS = {
    "zscore": "Z-Score",
    "bollinger": "Bollinger Bands",
    "macd": "MACD Divergence",
    "isolation": "Isolation Score",
    "pattern": "Pump-and-Dump Pattern",
    "threshold": "Day-over-Day Threshold",
}

__all__ = [
    "DETECTORS",
    "DETECTOR_LABELS",
    "DetectorFn",
    "detect_zscore",
    "detect_bollinger",
    "detect_macd",
    "detect_isolation",
    "detect_pattern",
    "detect_threshold",
]
