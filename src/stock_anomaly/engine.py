"""Detection engine: runs every enabled detector and merges the results.

Example usage::

    from stock_anomaly import detect_anomalies
    from stock_anomaly.data import CSVDataSource

    bars = list(CSVDataSource({"file_path": "aapl.csv"}).fetch_bars(["AAPL"]))
    for record in detect_anomalies(bars):
        print(record.date, record.severity.value, record.description)

The engine is stateless: every call validates the input, fans out to the
detectors, applies per-detector weights and hands the candidates to the
aggregator.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Sequence

from pydantic import ValidationError

from stock_anomaly.aggregator import aggregate
from stock_anomaly.detectors import DETECTORS
from stock_anomaly.exceptions import DataValidationError
from stock_anomaly.types import (
    AnomalyCandidate,
    AnomalyRecord,
    Bar,
    DetectionConfig,
    DetectorConfig,
)

logger = logging.getLogger(__name__)


def validate_series(bars: Sequence[Bar] | Sequence[dict[str, Any]] | None) -> list[Bar]:
    """Check that a series is usable and return it as a list of bars.

    Dicts are converted to :class:`Bar`. Malformed bars are rejected rather
    than clamped.

    :param bars: Bars (or bar dicts), oldest first. ``None`` is treated as empty.
    :returns: The bars as a list.
    :raises DataValidationError: If a bar is malformed, dates are not strictly
        increasing, or the series mixes symbols.
    """
    if not bars:
        return []

    series: list[Bar] = []
    for i, bar in enumerate(bars):
        if isinstance(bar, dict):
            try:
                bar = Bar(**bar)
            except ValidationError as e:
                raise DataValidationError(f"Malformed bar at index {i}: {e}") from e
        series.append(bar)

    symbol = series[0].symbol
    for prev, bar in zip(series, series[1:]):
        if bar.symbol != symbol:
            raise DataValidationError(
                f"Series mixes symbols '{symbol}' and '{bar.symbol}'"
            )
        if bar.date <= prev.date:
            raise DataValidationError(
                f"Dates must be strictly increasing: {bar.date} follows {prev.date}"
            )
    return series


def _run_detector(
    name: str,
    bars: list[Bar],
    config: DetectorConfig,
) -> list[AnomalyCandidate]:
    candidates = DETECTORS[name](bars, config)
    if config.weight == 1.0:
        return candidates
    return [
        c.model_copy(update={"score": c.score * config.weight}) for c in candidates
    ]


def detect_anomalies(
    bars: Sequence[Bar] | Sequence[dict[str, Any]] | None,
    config: DetectionConfig | None = None,
    *,
    max_workers: int | None = None,
) -> list[AnomalyRecord]:
    """Detect anomalies in a price/volume series.

    :param bars: Bars for one symbol, oldest first. Empty or ``None`` yields
        an empty list.
    :param config: Per-detector settings; defaults when omitted.
    :param max_workers: When greater than 1, detectors run on a thread pool of
        this size. The result is the same either way.
    :returns: Merged anomaly records sorted by descending score.
    :raises DataValidationError: If the series is malformed.
    """
    series = validate_series(bars)
    if not series:
        return []

    config = config or DetectionConfig()
    enabled = [
        (name, getattr(config, name))
        for name in DETECTORS
        if getattr(config, name).enabled
    ]

    candidates: list[AnomalyCandidate] = []
    if max_workers is not None and max_workers > 1 and len(enabled) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [
                executor.submit(_run_detector, name, series, detector_config)
                for name, detector_config in enabled
            ]
            for future in futures:
                candidates.extend(future.result())
    else:
        for name, detector_config in enabled:
            candidates.extend(_run_detector(name, series, detector_config))

    records = aggregate(candidates)
    logger.info(
        "%s: %d bars, %d candidates, %d anomalies",
        series[0].symbol,
        len(series),
        len(candidates),
        len(records),
    )
    return records


__all__ = ["detect_anomalies", "validate_series"]
