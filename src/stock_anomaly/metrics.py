"""Per-symbol dashboard metrics.

Everything is recomputed from the supplied bars on each call.
"""

from __future__ import annotations

import math
from typing import Sequence

from stock_anomaly import stats
from stock_anomaly.types import AnomalyRecord, Bar, StockMetrics

VOLUME_WINDOW = 20
RSI_WINDOW = 15  # 15 closes -> 14 changes
TRADING_DAYS = 252


def compute_rsi(closes: Sequence[float]) -> float:
    """Relative Strength Index over all close-to-close changes given.

    :param closes: Closes, oldest first.
    :returns: RSI in [0, 100]; 50 with fewer than two closes, 100 when there
        are no losses.
    """
    if len(closes) < 2:
        return 50.0

    gains = 0.0
    losses = 0.0
    for prev, cur in zip(closes, closes[1:]):
        change = cur - prev
        if change > 0:
            gains += change
        else:
            losses -= change

    periods = len(closes) - 1
    avg_gain = gains / periods
    avg_loss = losses / periods
    if avg_loss == 0:
        return 100.0

    rs = avg_gain / avg_loss
    return 100 - (100 / (1 + rs))


def annualized_volatility(closes: Sequence[float]) -> float:
    """Population stddev of daily returns, annualized, in percent."""
    returns = stats.daily_returns(closes)
    if not returns:
        return 0.0
    return stats.stddev(returns) * math.sqrt(TRADING_DAYS) * 100


def compute_metrics(
    bars: Sequence[Bar] | None,
    anomalies: Sequence[AnomalyRecord] | None = None,
) -> StockMetrics:
    """Compute summary metrics for a series.

    :param bars: Bars for one symbol, oldest first.
    :param anomalies: Anomalies already detected for the series; only their
        count is used.
    :returns: Metrics; the zeroed default for an empty series.
    """
    if not bars:
        return StockMetrics.empty()

    latest = bars[-1]
    if len(bars) > 1:
        reference = bars[-2].close
    else:
        reference = latest.open

    daily_change = latest.close - reference
    daily_change_percent = daily_change / reference * 100 if reference else 0.0

    recent = bars[-VOLUME_WINDOW:]
    average_volume = stats.mean([bar.volume for bar in recent])
    volatility = annualized_volatility([bar.close for bar in recent])
    rsi = compute_rsi([bar.close for bar in bars[-RSI_WINDOW:]])

    return StockMetrics(
        symbol=str(latest.symbol),
        current_price=latest.close,
        daily_change=daily_change,
        daily_change_percent=daily_change_percent,
        average_volume=average_volume,
        anomaly_count=len(anomalies) if anomalies else 0,
        volatility=volatility,
        rsi=rsi,
    )


__all__ = ["compute_metrics", "compute_rsi", "annualized_volatility"]
