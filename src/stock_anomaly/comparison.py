"""Performance of individual stocks against a market index."""

from __future__ import annotations

from typing import Sequence

from stock_anomaly import stats
from stock_anomaly.metrics import annualized_volatility
from stock_anomaly.types import AnomalyRecord, Bar, ComparisonMetrics

MIN_ANOMALY_RATIO = 0.001


def total_return(bars: Sequence[Bar]) -> float:
    """Return from first to last close in percent (0 with fewer than 2 bars)."""
    if len(bars) < 2:
        return 0.0
    start = bars[0].close
    return (bars[-1].close - start) / start * 100


def beta(stock: Sequence[Bar], market: Sequence[Bar]) -> float:
    """Beta of stock returns against market returns on their shared prefix.

    Returns 1.0 when either series has fewer than 2 bars or the market
    returns have no variance.
    """
    if len(stock) < 2 or len(market) < 2:
        return 1.0
    n = min(len(stock), len(market))
    stock_returns = stats.daily_returns([b.close for b in stock[:n]])
    market_returns = stats.daily_returns([b.close for b in market[:n]])

    market_variance = stats.variance(market_returns)
    if market_variance == 0:
        return 1.0
    return stats.covariance(stock_returns, market_returns) / market_variance


def market_correlation(stock: Sequence[Bar], market: Sequence[Bar]) -> float:
    """Pearson correlation of closes on the shared prefix (0 below 2 bars)."""
    if len(stock) < 2 or len(market) < 2:
        return 0.0
    return stats.pearson_correlation(
        [b.close for b in stock], [b.close for b in market]
    )


def normalized_performance(bars: Sequence[Bar]) -> list[float]:
    """Cumulative percent change of each close relative to the first."""
    if not bars:
        return []
    start = bars[0].close
    return [(bar.close - start) / start * 100 for bar in bars]


def compare_to_index(
    symbol: str,
    bars: Sequence[Bar],
    anomalies: Sequence[AnomalyRecord],
    index_bars: Sequence[Bar],
    index_anomalies: Sequence[AnomalyRecord],
    sector: str = "Other",
) -> ComparisonMetrics:
    """Compare one stock with a market index.

    :param symbol: Stock symbol.
    :param bars: Stock bars, oldest first.
    :param anomalies: Anomalies detected for the stock.
    :param index_bars: Index bars, oldest first.
    :param index_anomalies: Anomalies detected for the index.
    :param sector: Sector label.
    :returns: Comparison metrics.
    """
    stock_return = total_return(bars)
    index_return = total_return(index_bars)
    stock_beta = beta(bars, index_bars)

    anomaly_ratio = len(anomalies) / max(len(bars), 1)
    index_ratio = len(index_anomalies) / max(len(index_bars), 1)

    return ComparisonMetrics(
        symbol=symbol,
        sector=sector,
        total_return=stock_return,
        volatility=annualized_volatility([b.close for b in bars]),
        beta=stock_beta,
        alpha=stock_return - index_return * stock_beta,
        outperformance=stock_return - index_return,
        anomaly_ratio=anomaly_ratio,
        relative_anomaly_risk=anomaly_ratio / max(index_ratio, MIN_ANOMALY_RATIO),
        market_correlation=market_correlation(bars, index_bars),
    )


__all__ = [
    "total_return",
    "beta",
    "market_correlation",
    "normalized_performance",
    "compare_to_index",
]
