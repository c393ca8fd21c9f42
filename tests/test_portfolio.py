"""Tests for portfolio summaries."""

from datetime import date

import pytest
from conftest import make_bars, make_record

from stock_anomaly.portfolio import (anomaly_timeline, correlation_pairs,
                                     correlation_strength, portfolio_risk,
                                     risk_level, sector_summary)
from stock_anomaly.types import AnomalyType, Severity, StockMetrics


class TestCorrelations:
    """Tests for pairwise correlations."""

    @pytest.mark.parametrize(
        "value,expected",
        [(0.8, "Strong"), (-0.75, "Strong"), (0.5, "Moderate"), (0.4, "Weak"), (0.0, "Weak")],
    )
    def test_strength_labels(self, value: float, expected: str) -> None:
        """Labels depend on magnitude only."""
        assert correlation_strength(value) == expected

    def test_pairs_sorted_by_magnitude(self) -> None:
        """Strongest pairs come first; ties keep portfolio order."""
        series = {
            "AAA": make_bars([1.0, 2.0, 3.0, 4.0], symbol="AAA"),
            "BBB": make_bars([2.0, 4.0, 6.0, 8.0], symbol="BBB"),
            "CCC": make_bars([4.0, 1.0, 3.0, 2.0], symbol="CCC"),
        }

        pairs = correlation_pairs(series)

        assert [(p.stock1, p.stock2) for p in pairs] == [
            ("AAA", "BBB"),
            ("AAA", "CCC"),
            ("BBB", "CCC"),
        ]
        assert pairs[0].correlation == pytest.approx(1.0)
        assert pairs[0].strength == "Strong"
        assert pairs[1].correlation == pytest.approx(-0.4)
        assert pairs[1].strength == "Weak"

    def test_pairs_skip_empty_series(self) -> None:
        """Holdings without data are left out of every pair."""
        series = {
            "AAA": make_bars([1.0, 2.0, 3.0], symbol="AAA"),
            "BBB": [],
            "CCC": make_bars([3.0, 2.0, 1.0], symbol="CCC"),
        }

        pairs = correlation_pairs(series)

        assert len(pairs) == 1
        assert pairs[0].correlation == pytest.approx(-1.0)


class TestPortfolioRisk:
    """Tests for risk scoring."""

    def test_empty_portfolio(self) -> None:
        """No holdings scores 0."""
        risk = portfolio_risk({})
        assert risk.risk_score == 0.0
        assert risk.level == "Low"
        assert risk.low_risk_stocks == 0

    def test_mixed_portfolio(self) -> None:
        """High and medium holdings are weighted 3 and 1.5."""
        risk = portfolio_risk(
            {
                "AAA": [make_record(Severity.HIGH), make_record(Severity.MEDIUM)],
                "BBB": [make_record(Severity.MEDIUM) for _ in range(3)],
                "CCC": [make_record(Severity.LOW)],
                "DDD": [],
            }
        )

        assert risk.high_risk_stocks == 1
        assert risk.medium_risk_stocks == 1
        assert risk.low_risk_stocks == 2
        assert risk.risk_score == pytest.approx(112.5)
        assert risk.level == "High"

    def test_two_medium_anomalies_are_low_risk(self) -> None:
        """A holding needs more than two medium anomalies to count."""
        risk = portfolio_risk({"AAA": [make_record(Severity.MEDIUM)] * 2})
        assert risk.medium_risk_stocks == 0
        assert risk.risk_score == 0.0

    @pytest.mark.parametrize(
        "score,level", [(61.0, "High"), (60.0, "Medium"), (30.5, "Medium"), (30.0, "Low")]
    )
    def test_risk_levels(self, score: float, level: str) -> None:
        """Cutoffs are strict."""
        assert risk_level(score) == level


class TestTimeline:
    """Tests for the anomaly timeline."""

    def test_counts_per_date(self) -> None:
        """Anomalies from all holdings are counted per date, oldest first."""
        day1, day2 = date(2024, 1, 2), date(2024, 1, 5)
        timeline = anomaly_timeline(
            {
                "AAA": [make_record(Severity.HIGH, day2), make_record(Severity.LOW, day1)],
                "BBB": [
                    make_record(Severity.HIGH, day2, AnomalyType.VOLUME),
                    make_record(Severity.MEDIUM, day2),
                ],
            }
        )

        assert [entry.date for entry in timeline] == [day1, day2]
        assert timeline[0].count == 1
        assert timeline[0].severity == {"low": 1, "medium": 0, "high": 0}
        assert timeline[1].count == 3
        assert timeline[1].severity == {"low": 0, "medium": 1, "high": 2}

    def test_empty(self) -> None:
        """No anomalies, no entries."""
        assert anomaly_timeline({"AAA": []}) == []


class TestSectorSummary:
    """Tests for sector grouping."""

    def test_groups_and_averages(self) -> None:
        """Metrics are averaged per sector; unknown symbols go to Other."""
        metrics = {
            "AAA": StockMetrics(symbol="AAA", volatility=20.0, rsi=60.0, daily_change_percent=1.0),
            "BBB": StockMetrics(symbol="BBB", volatility=40.0, rsi=40.0, daily_change_percent=3.0),
            "CCC": StockMetrics(symbol="CCC", volatility=10.0, rsi=70.0),
        }
        anomalies = {"AAA": [make_record()], "BBB": [make_record(), make_record()]}

        summaries = sector_summary(metrics, anomalies, {"AAA": "Tech", "BBB": "Tech"})

        assert [s.sector for s in summaries] == ["Tech", "Other"]
        tech = summaries[0]
        assert tech.stocks == ["AAA", "BBB"]
        assert tech.avg_volatility == pytest.approx(30.0)
        assert tech.avg_rsi == pytest.approx(50.0)
        assert tech.performance == pytest.approx(2.0)
        assert tech.total_anomalies == 3
        assert summaries[1].total_anomalies == 0
