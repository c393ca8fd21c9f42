"""Shared fixtures and factories for the test suite."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from stock_anomaly.types import (AnomalyId, AnomalyRecord, AnomalyType, Bar,
                                 Severity, Symbol)


def make_bars(
    closes: list[float],
    volumes: list[float] | None = None,
    symbol: str = "TEST",
    start: date = date(2024, 1, 1),
) -> list[Bar]:
    """Create daily bars whose open equals close with a 1% high/low range."""
    volumes = volumes or [1_000_000.0] * len(closes)
    return [
        Bar(
            symbol=Symbol(symbol),
            date=start + timedelta(days=i),
            open=close,
            high=close * 1.01,
            low=close * 0.99,
            close=close,
            volume=volume,
        )
        for i, (close, volume) in enumerate(zip(closes, volumes))
    ]


def make_record(
    severity: Severity = Severity.LOW,
    day: date = date(2024, 1, 1),
    kind: AnomalyType = AnomalyType.PRICE,
    score: float = 1.0,
) -> AnomalyRecord:
    """Create a single-indicator anomaly record."""
    return AnomalyRecord(
        id=AnomalyId(f"{day.isoformat()}-{kind.value}-{severity.value}"),
        date=day,
        value=100.0,
        type=kind,
        severity=severity,
        score=score,
        description="test anomaly",
        detectors=["zscore"],
    )


@pytest.fixture
def sample_csv(tmp_path):
    """Write a 30-day CSV for symbol TEST with a price spike on day 25."""
    path = tmp_path / "bars.csv"
    lines = ["date,symbol,open,high,low,close,volume"]
    start = date(2024, 1, 1)
    for i in range(30):
        close = 150.0 if i == 25 else 100.0 + (i % 3)
        lines.append(
            f"{(start + timedelta(days=i)).isoformat()},TEST,"
            f"{close},{close * 1.01:.4f},{close * 0.99:.4f},{close},1000000"
        )
    path.write_text("\n".join(lines) + "\n")
    return path
