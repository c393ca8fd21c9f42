"""Tests for stock-versus-index comparison."""

import pytest
from conftest import make_bars, make_record

from stock_anomaly.comparison import (beta, compare_to_index,
                                      market_correlation,
                                      normalized_performance, total_return)


def closes_from_returns(returns: list[float], start: float = 100.0) -> list[float]:
    """Build a close series that realises the given daily returns."""
    closes = [start]
    for r in returns:
        closes.append(closes[-1] * (1 + r))
    return closes


class TestReturns:
    """Tests for return helpers."""

    def test_total_return(self) -> None:
        """Total return is first-to-last in percent."""
        assert total_return(make_bars([100.0, 90.0, 120.0])) == pytest.approx(20.0)

    def test_total_return_short_series(self) -> None:
        """Fewer than two bars returns 0."""
        assert total_return(make_bars([100.0])) == 0.0
        assert total_return([]) == 0.0

    def test_normalized_performance(self) -> None:
        """Each close is expressed relative to the first."""
        result = normalized_performance(make_bars([100.0, 110.0, 90.0]))
        assert result == pytest.approx([0.0, 10.0, -10.0])
        assert normalized_performance([]) == []


class TestBeta:
    """Tests for beta."""

    def test_twice_the_market(self) -> None:
        """Returns twice the market's give beta 2."""
        market_returns = [0.01, -0.02, 0.03, 0.01, -0.01]
        market = make_bars(closes_from_returns(market_returns), symbol="SPY")
        stock = make_bars(closes_from_returns([2 * r for r in market_returns]))

        assert beta(stock, market) == pytest.approx(2.0)

    def test_flat_market(self) -> None:
        """A market without variance gives the neutral beta 1."""
        market = make_bars([100.0] * 10, symbol="SPY")
        stock = make_bars([100.0 + i for i in range(10)])
        assert beta(stock, market) == 1.0

    def test_short_series(self) -> None:
        """Fewer than two bars gives beta 1."""
        assert beta(make_bars([100.0]), make_bars([100.0, 101.0])) == 1.0


class TestMarketCorrelation:
    """Tests for close-price correlation."""

    def test_identical_series(self) -> None:
        """A series is perfectly correlated with itself."""
        bars = make_bars([100.0, 102.0, 101.0, 105.0])
        assert market_correlation(bars, bars) == pytest.approx(1.0)

    def test_short_series(self) -> None:
        """Fewer than two bars gives 0."""
        assert market_correlation(make_bars([100.0]), make_bars([100.0])) == 0.0


class TestCompareToIndex:
    """Tests for the full comparison."""

    def test_comparison_fields(self) -> None:
        """Return, alpha and anomaly risk are derived from both series."""
        stock = make_bars([100.0, 120.0])
        index = make_bars([100.0, 110.0], symbol="SPY")

        result = compare_to_index("TEST", stock, [make_record()], index, [], "Tech")

        assert result.symbol == "TEST"
        assert result.sector == "Tech"
        assert result.total_return == pytest.approx(20.0)
        assert result.outperformance == pytest.approx(10.0)
        assert result.beta == 1.0
        assert result.alpha == pytest.approx(10.0)
        assert result.anomaly_ratio == pytest.approx(0.5)
        # index ratio 0 is floored at 0.001
        assert result.relative_anomaly_risk == pytest.approx(500.0)
        assert result.market_correlation == pytest.approx(1.0)
        assert result.volatility == 0.0

    def test_default_sector(self) -> None:
        """Sector defaults to Other."""
        bars = make_bars([100.0, 101.0])
        assert compare_to_index("TEST", bars, [], bars, []).sector == "Other"

    def test_empty_stock_series(self) -> None:
        """An empty stock series compares as zeros without failing."""
        index = make_bars([100.0, 110.0], symbol="SPY")
        result = compare_to_index("TEST", [], [], index, [])

        assert result.total_return == 0.0
        assert result.anomaly_ratio == 0.0
        assert result.beta == 1.0
