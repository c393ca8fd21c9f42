"""Portfolio-level summaries built from per-symbol series and anomalies."""

from __future__ import annotations

from collections import defaultdict
from itertools import combinations
from typing import Mapping, Sequence

from stock_anomaly import stats
from stock_anomaly.types import (
    AnomalyRecord,
    Bar,
    CorrelationPair,
    PortfolioRisk,
    SectorSummary,
    Severity,
    StockMetrics,
    TimelineEntry,
)


def correlation_strength(correlation: float) -> str:
    """Label a correlation as Strong, Moderate or Weak by magnitude."""
    magnitude = abs(correlation)
    if magnitude > 0.7:
        return "Strong"
    if magnitude > 0.4:
        return "Moderate"
    return "Weak"


def correlation_pairs(
    series_by_symbol: Mapping[str, Sequence[Bar]],
) -> list[CorrelationPair]:
    """Pairwise close-price correlations across holdings.

    :param series_by_symbol: Bars keyed by symbol, in portfolio order.
    :returns: One entry per pair with data on both sides, strongest first.
    """
    pairs = []
    for (sym1, bars1), (sym2, bars2) in combinations(series_by_symbol.items(), 2):
        if not bars1 or not bars2:
            continue
        r = stats.pearson_correlation(
            [b.close for b in bars1], [b.close for b in bars2]
        )
        pairs.append(
            CorrelationPair(
                stock1=sym1,
                stock2=sym2,
                correlation=r,
                strength=correlation_strength(r),
            )
        )
    # sorted() is stable, so equal magnitudes keep portfolio order
    return sorted(pairs, key=lambda p: -abs(p.correlation))


def risk_level(score: float) -> str:
    """Map a risk score to "High" (>60), "Medium" (>30) or "Low"."""
    if score > 60:
        return "High"
    if score > 30:
        return "Medium"
    return "Low"


def portfolio_risk(
    anomalies_by_symbol: Mapping[str, Sequence[AnomalyRecord]],
) -> PortfolioRisk:
    """Score portfolio risk from the severity mix of each holding's anomalies.

    A holding is high risk with any high-severity anomaly and medium risk
    with more than two medium ones (high takes precedence).

    :param anomalies_by_symbol: Anomalies keyed by symbol.
    :returns: Risk assessment; score 0 for an empty portfolio.
    """
    total = len(anomalies_by_symbol)
    high = 0
    medium = 0
    for anomalies in anomalies_by_symbol.values():
        if any(a.severity is Severity.HIGH for a in anomalies):
            high += 1
        elif sum(1 for a in anomalies if a.severity is Severity.MEDIUM) > 2:
            medium += 1

    score = (high * 3 + medium * 1.5) / total * 100 if total else 0.0
    return PortfolioRisk(
        risk_score=score,
        level=risk_level(score),
        high_risk_stocks=high,
        medium_risk_stocks=medium,
        low_risk_stocks=total - high - medium,
    )


def anomaly_timeline(
    anomalies_by_symbol: Mapping[str, Sequence[AnomalyRecord]],
) -> list[TimelineEntry]:
    """Count anomalies per date across all holdings, oldest date first."""
    counts: dict = defaultdict(lambda: {s.value: 0 for s in Severity})
    for anomalies in anomalies_by_symbol.values():
        for anomaly in anomalies:
            counts[anomaly.date][anomaly.severity.value] += 1

    return [
        TimelineEntry(date=date, count=sum(sev.values()), severity=dict(sev))
        for date, sev in sorted(counts.items())
    ]


def sector_summary(
    metrics_by_symbol: Mapping[str, StockMetrics],
    anomalies_by_symbol: Mapping[str, Sequence[AnomalyRecord]],
    sectors: Mapping[str, str],
) -> list[SectorSummary]:
    """Average holding metrics per sector.

    :param metrics_by_symbol: Metrics keyed by symbol.
    :param anomalies_by_symbol: Anomalies keyed by symbol.
    :param sectors: Sector of each symbol; unknown symbols go to "Other".
    :returns: One summary per sector, in first-seen order.
    """
    grouped: dict[str, list[str]] = {}
    for symbol in metrics_by_symbol:
        grouped.setdefault(sectors.get(symbol, "Other"), []).append(symbol)

    summaries = []
    for sector, symbols in grouped.items():
        metrics = [metrics_by_symbol[s] for s in symbols]
        summaries.append(
            SectorSummary(
                sector=sector,
                stocks=symbols,
                avg_volatility=stats.mean([m.volatility for m in metrics]),
                total_anomalies=sum(
                    len(anomalies_by_symbol.get(s, ())) for s in symbols
                ),
                avg_rsi=stats.mean([m.rsi for m in metrics]),
                performance=stats.mean([m.daily_change_percent for m in metrics]),
            )
        )
    return summaries


__all__ = [
    "correlation_strength",
    "correlation_pairs",
    "risk_level",
    "portfolio_risk",
    "anomaly_timeline",
    "sector_summary",
]
