"""Tests for core types."""

from datetime import date

import pytest
from pydantic import ValidationError

from stock_anomaly.types import (AnomalyCandidate, AnomalyType, Bar,
                                 DetectionConfig, MACDConfig, Severity,
                                 StockMetrics, ZScoreConfig)


def bar_kwargs(**overrides) -> dict:
    values = {
        "symbol": "AAPL",
        "date": date(2024, 1, 2),
        "open": 100.0,
        "high": 105.0,
        "low": 95.0,
        "close": 102.0,
        "volume": 1_000_000.0,
    }
    values.update(overrides)
    return values


class TestBar:
    """Tests for Bar validation."""

    def test_valid_bar(self) -> None:
        """A consistent bar is accepted."""
        bar = Bar(**bar_kwargs())
        assert bar.close == 102.0
        assert bar.adj_close is None

    def test_bar_is_frozen(self) -> None:
        """Bars are immutable."""
        bar = Bar(**bar_kwargs())
        with pytest.raises(ValidationError):
            bar.close = 1.0

    def test_date_parsed_from_string(self) -> None:
        """ISO strings are accepted for the date."""
        assert Bar(**bar_kwargs(date="2024-03-01")).date == date(2024, 3, 1)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"high": 90.0},
            {"high": 101.0},
            {"low": 103.0},
            {"close": 0.0},
            {"open": -1.0},
            {"volume": -5.0},
        ],
    )
    def test_malformed_bar_rejected(self, overrides: dict) -> None:
        """Inconsistent or non-positive values raise."""
        with pytest.raises(ValidationError):
            Bar(**bar_kwargs(**overrides))

    @pytest.mark.parametrize("field", ["open", "high", "low", "close"])
    def test_nan_price_rejected(self, field: str) -> None:
        """NaN prices never make it into a bar."""
        with pytest.raises(ValidationError):
            Bar(**bar_kwargs(**{field: float("nan")}))

    def test_infinite_close_rejected(self) -> None:
        """A close of +inf is rejected even with a matching high."""
        with pytest.raises(ValidationError):
            Bar(**bar_kwargs(high=float("inf"), close=float("inf")))

    def test_fractional_volume_rejected(self) -> None:
        """Volume is a whole number of shares."""
        with pytest.raises(ValidationError):
            Bar(**bar_kwargs(volume=1000.5))

    def test_integral_float_volume_accepted(self) -> None:
        """Whole-valued floats from CSV or Yahoo are accepted as ints."""
        assert Bar(**bar_kwargs(volume=1200.0)).volume == 1200

    def test_zero_volume_allowed(self) -> None:
        """Zero volume is a valid (if quiet) day."""
        assert Bar(**bar_kwargs(volume=0)).volume == 0.0


class TestSeverity:
    """Tests for Severity helpers."""

    def test_rank_order(self) -> None:
        """Low < medium < high."""
        assert Severity.LOW.rank < Severity.MEDIUM.rank < Severity.HIGH.rank

    @pytest.mark.parametrize(
        "value,expected",
        [
            (3.5, Severity.HIGH),
            (3.0, Severity.MEDIUM),
            (2.6, Severity.MEDIUM),
            (2.5, Severity.LOW),
            (0.0, Severity.LOW),
        ],
    )
    def test_from_cutoffs_is_strict(self, value: float, expected: Severity) -> None:
        """Cutoffs compare with strict greater-than."""
        assert Severity.from_cutoffs(value, high=3.0, medium=2.5) == expected

    def test_string_values(self) -> None:
        """Enums serialise as lowercase strings."""
        assert Severity.HIGH.value == "high"
        assert AnomalyType.VOLUME.value == "volume"


class TestAnomalyCandidate:
    """Tests for AnomalyCandidate."""

    def test_json_dump(self) -> None:
        """Enum and date fields dump to plain JSON values."""
        candidate = AnomalyCandidate(
            date=date(2024, 1, 2),
            value=150.0,
            score=4.2,
            type=AnomalyType.PRICE,
            severity=Severity.HIGH,
            description="spike",
            detector="zscore",
        )
        dumped = candidate.model_dump(mode="json")
        assert dumped["date"] == "2024-01-02"
        assert dumped["type"] == "price"
        assert dumped["severity"] == "high"


class TestDetectionConfig:
    """Tests for configuration models."""

    def test_defaults(self) -> None:
        """Defaults match the documented detector settings."""
        config = DetectionConfig()

        assert config.zscore.threshold == 2.5
        assert config.bollinger.period == 20
        assert config.bollinger.num_std == 2.0
        assert (config.macd.fast_period, config.macd.slow_period, config.macd.signal_period) == (12, 26, 9)
        assert config.isolation.contamination == 0.1
        assert config.pattern.window == 3
        assert config.threshold.min_length == 20
        assert all(getattr(config, name).enabled for name in DetectionConfig.model_fields)
        assert all(getattr(config, name).weight == 1.0 for name in DetectionConfig.model_fields)

    def test_unknown_section_rejected(self) -> None:
        """Unknown detectors are an error."""
        with pytest.raises(ValidationError):
            DetectionConfig.model_validate({"lstm": {}})

    def test_unknown_key_rejected(self) -> None:
        """Typos inside a section are an error."""
        with pytest.raises(ValidationError):
            ZScoreConfig(treshold=3.0)

    def test_negative_weight_rejected(self) -> None:
        """Weights cannot be negative."""
        with pytest.raises(ValidationError):
            ZScoreConfig(weight=-1.0)

    def test_macd_periods_ordered(self) -> None:
        """The fast EMA must be shorter than the slow EMA."""
        with pytest.raises(ValidationError):
            MACDConfig(fast_period=26, slow_period=12)


class TestStockMetrics:
    """Tests for StockMetrics defaults."""

    def test_empty(self) -> None:
        """The empty metrics are zeroed with a neutral RSI."""
        metrics = StockMetrics.empty("AAPL")
        assert metrics.symbol == "AAPL"
        assert metrics.current_price == 0.0
        assert metrics.anomaly_count == 0
        assert metrics.rsi == 50.0
