"""Core type definitions for the anomaly engine.

All data models use Pydantic BaseModel for automatic validation, JSON
serialization, and better error messages.
"""

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import NewType

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Type aliases for domain-specific identifiers
Symbol = NewType("Symbol", str)
AnomalyId = NewType("AnomalyId", str)


# ---------------------------------------------------------------------------
# Base Configuration
# ---------------------------------------------------------------------------


class FrozenModel(BaseModel):
    """Base model with frozen (immutable) configuration."""

    model_config = ConfigDict(frozen=True)


class StrictFrozenModel(BaseModel):
    """Frozen model that rejects unknown fields (used for configuration)."""

    model_config = ConfigDict(frozen=True, extra="forbid")


# ---------------------------------------------------------------------------
# Date/Time Types
# ---------------------------------------------------------------------------


class DateRange(FrozenModel):
    """Inclusive start, exclusive end range for time-bounded queries.

    :param start: Start of the range (inclusive).
    :param end: End of the range (exclusive).
    """

    start: dt.date
    end: dt.date


# ---------------------------------------------------------------------------
# Market Data Types
# ---------------------------------------------------------------------------


class Bar(FrozenModel):
    """One daily OHLCV observation for a symbol.

    Malformed bars are rejected at construction time: every price must be
    finite and positive, volume must be a non-negative whole number and
    ``high``/``low`` must bracket both ``open`` and ``close``.

    :param symbol: Market symbol for this bar.
    :param date: Trading date of this bar.
    :param open: Opening price.
    :param high: Highest price during the bar period.
    :param low: Lowest price during the bar period.
    :param close: Closing price.
    :param volume: Trading volume during the bar period.
    :param adj_close: Split/dividend adjusted close, if the source provides it.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    symbol: Symbol
    date: dt.date
    open: float = Field(gt=0)
    high: float = Field(gt=0)
    low: float = Field(gt=0)
    close: float = Field(gt=0)
    volume: int = Field(ge=0)
    adj_close: float | None = None

    @model_validator(mode="after")
    def _check_price_range(self) -> Bar:
        if self.high < self.low:
            raise ValueError(f"high {self.high} is below low {self.low}")
        if self.high < max(self.open, self.close):
            raise ValueError(f"high {self.high} is below open/close")
        if self.low > min(self.open, self.close):
            raise ValueError(f"low {self.low} is above open/close")
        return self


# ---------------------------------------------------------------------------
# Anomaly Types
# ---------------------------------------------------------------------------


class AnomalyType(str, Enum):
    """Which observation an anomaly refers to."""

    PRICE = "price"
    VOLUME = "volume"


class Severity(str, Enum):
    """Severity of a detected anomaly."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        """Ordering key: low < medium < high."""
        return _SEVERITY_RANK[self]

    @classmethod
    def from_cutoffs(cls, value: float, high: float, medium: float) -> Severity:
        """Map a value onto a severity using strict ``>`` cutoffs."""
        if value > high:
            return cls.HIGH
        if value > medium:
            return cls.MEDIUM
        return cls.LOW


_SEVERITY_RANK = {Severity.LOW: 0, Severity.MEDIUM: 1, Severity.HIGH: 2}


class AnomalyCandidate(FrozenModel):
    """Raw detection produced by a single detector.

    :param date: Date of the bar that triggered the detection.
    :param value: Price or volume that triggered it.
    :param score: Detector-specific score.
    :param type: Whether the anomaly concerns price or volume.
    :param severity: Detector-assigned severity.
    :param description: Human-readable explanation.
    :param detector: Name of the originating detector.
    """

    date: dt.date
    value: float
    score: float
    type: AnomalyType
    severity: Severity
    description: str
    detector: str


class AnomalyRecord(FrozenModel):
    """Final anomaly event after merging candidates sharing (date, type).

    :param id: Identifier, unique within one detection run.
    :param date: Date of the anomaly.
    :param value: Price or volume of the first contributing candidate.
    :param type: Whether the anomaly concerns price or volume.
    :param severity: Highest severity among contributing candidates.
    :param score: Sum of contributing (weighted) scores.
    :param description: Merged description.
    :param detectors: Names of contributing detectors.
    :param indicator_count: Number of merged candidates.
    """

    id: AnomalyId
    date: dt.date
    value: float
    type: AnomalyType
    severity: Severity
    score: float
    description: str
    detectors: list[str] = Field(default_factory=list)
    indicator_count: int = 1


# ---------------------------------------------------------------------------
# Metrics Types
# ---------------------------------------------------------------------------


class StockMetrics(FrozenModel):
    """Summary statistics for one symbol, recomputed on every request.

    :param symbol: Market symbol.
    :param current_price: Last close.
    :param daily_change: Change vs the previous close.
    :param daily_change_percent: Daily change in percent.
    :param average_volume: Mean volume over the trailing window.
    :param anomaly_count: Number of anomalies supplied by the caller.
    :param volatility: Annualized volatility in percent.
    :param rsi: Relative Strength Index (0-100).
    """

    symbol: str = ""
    current_price: float = 0.0
    daily_change: float = 0.0
    daily_change_percent: float = 0.0
    average_volume: float = 0.0
    anomaly_count: int = 0
    volatility: float = 0.0
    rsi: float = 50.0

    @classmethod
    def empty(cls, symbol: str = "") -> StockMetrics:
        """Zeroed record returned for an empty series."""
        return cls(symbol=symbol)


class ComparisonMetrics(FrozenModel):
    """Performance of one stock relative to a market index.

    :param symbol: Stock symbol.
    :param sector: Sector label ("Other" when unknown).
    :param total_return: Total return in percent.
    :param volatility: Annualized volatility in percent.
    :param beta: Sensitivity to index returns.
    :param alpha: Return in excess of ``index_return * beta``.
    :param outperformance: Stock return minus index return.
    :param anomaly_ratio: Anomalies per bar.
    :param relative_anomaly_risk: Anomaly ratio relative to the index's.
    :param market_correlation: Pearson correlation of closes with the index.
    """

    symbol: str
    sector: str = "Other"
    total_return: float
    volatility: float
    beta: float
    alpha: float
    outperformance: float
    anomaly_ratio: float
    relative_anomaly_risk: float
    market_correlation: float


class CorrelationPair(FrozenModel):
    """Price correlation between two portfolio holdings."""

    stock1: str
    stock2: str
    correlation: float
    strength: str


class PortfolioRisk(FrozenModel):
    """Anomaly-based portfolio risk assessment.

    :param risk_score: Weighted share of risky holdings, in percent.
    :param level: "High", "Medium" or "Low".
    :param high_risk_stocks: Holdings with at least one high anomaly.
    :param medium_risk_stocks: Holdings with more than two medium anomalies.
    :param low_risk_stocks: Remaining holdings.
    """

    risk_score: float
    level: str
    high_risk_stocks: int
    medium_risk_stocks: int
    low_risk_stocks: int


class TimelineEntry(FrozenModel):
    """Anomaly counts across the portfolio for one date."""

    date: dt.date
    count: int
    severity: dict[str, int] = Field(default_factory=dict)


class SectorSummary(FrozenModel):
    """Averaged metrics for the holdings of one sector."""

    sector: str
    stocks: list[str] = Field(default_factory=list)
    avg_volatility: float
    total_anomalies: int
    avg_rsi: float
    performance: float


class ModelExplanation(FrozenModel):
    """Static methodology text shown next to detection results."""

    short_description: str
    methodology: list[str] = Field(default_factory=list)
    accuracy: str
    limitations: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Configuration Types
# ---------------------------------------------------------------------------


class DetectorConfig(StrictFrozenModel):
    """Settings shared by every detector.

    :param enabled: Whether the detector runs.
    :param weight: Multiplier applied to each candidate score before merging.
    """

    enabled: bool = True
    weight: float = Field(default=1.0, ge=0)


class ZScoreConfig(DetectorConfig):
    """Z-Score detector settings.

    :param threshold: Minimum close z-score to flag.
    :param volume_threshold: Minimum volume z-score to flag.
    :param high_cutoff: z above which severity is high.
    :param medium_cutoff: z above which severity is medium.
    """

    threshold: float = Field(default=2.5, gt=0)
    volume_threshold: float = Field(default=2.5, gt=0)
    high_cutoff: float = 3.0
    medium_cutoff: float = 2.5


class BollingerConfig(DetectorConfig):
    """Bollinger Bands detector settings.

    :param period: SMA window length.
    :param num_std: Band width in standard deviations.
    :param high_cutoff: Relative deviation above which severity is high.
    :param medium_cutoff: Relative deviation above which severity is medium.
    """

    period: int = Field(default=20, ge=2)
    num_std: float = Field(default=2.0, gt=0)
    high_cutoff: float = 0.05
    medium_cutoff: float = 0.02


class MACDConfig(DetectorConfig):
    """MACD divergence detector settings.

    :param fast_period: Fast EMA period.
    :param slow_period: Slow EMA period.
    :param signal_period: Signal line EMA period.
    :param jump_factor: Histogram must exceed this multiple of the previous one.
    :param min_histogram: Minimum absolute histogram value to flag.
    :param high_cutoff: Histogram magnitude above which severity is high.
    :param medium_cutoff: Histogram magnitude above which severity is medium.
    """

    fast_period: int = Field(default=12, ge=1)
    slow_period: int = Field(default=26, ge=1)
    signal_period: int = Field(default=9, ge=1)
    jump_factor: float = Field(default=2.0, gt=0)
    min_histogram: float = Field(default=0.5, ge=0)
    high_cutoff: float = 2.0
    medium_cutoff: float = 1.0

    @model_validator(mode="after")
    def _check_periods(self) -> MACDConfig:
        if self.fast_period >= self.slow_period:
            raise ValueError("fast_period must be shorter than slow_period")
        return self


class IsolationConfig(DetectorConfig):
    """Isolation-score detector settings.

    :param contamination: Expected share of anomalous bars.
    :param high_factor: Multiple of the threshold for high severity.
    :param medium_factor: Multiple of the threshold for medium severity.
    """

    contamination: float = Field(default=0.1, gt=0, lt=1)
    high_factor: float = 1.5
    medium_factor: float = 1.2


class PatternConfig(DetectorConfig):
    """Pump-and-dump pattern detector settings.

    :param window: Bars on each side of the centre bar.
    :param min_length: Minimum series length.
    :param pump_threshold: Minimum rise from the pre-window close.
    :param dump_threshold: Minimum fall from the peak to the post-window close.
    :param volume_spike: Minimum peak volume relative to the window average.
    :param high_cutoff: Confidence above which severity is high.
    :param medium_cutoff: Confidence above which severity is medium.
    """

    window: int = Field(default=3, ge=1)
    min_length: int = Field(default=6, ge=2)
    pump_threshold: float = 0.10
    dump_threshold: float = 0.08
    volume_spike: float = 2.0
    high_cutoff: float = 0.8
    medium_cutoff: float = 0.6


class ThresholdConfig(DetectorConfig):
    """Day-over-day fallback detector settings.

    :param min_length: The fallback runs only for series shorter than this.
    :param price_change: Minimum absolute close-to-close move (fraction).
    :param volume_change: Minimum absolute volume move (fraction).
    """

    min_length: int = Field(default=20, ge=2)
    price_change: float = Field(default=0.05, gt=0)
    volume_change: float = Field(default=1.0, gt=0)


class DetectionConfig(StrictFrozenModel):
    """Per-detector configuration for a detection run."""

    zscore: ZScoreConfig = Field(default_factory=ZScoreConfig)
    bollinger: BollingerConfig = Field(default_factory=BollingerConfig)
    macd: MACDConfig = Field(default_factory=MACDConfig)
    isolation: IsolationConfig = Field(default_factory=IsolationConfig)
    pattern: PatternConfig = Field(default_factory=PatternConfig)
    threshold: ThresholdConfig = Field(default_factory=ThresholdConfig)


# ---------------------------------------------------------------------------
# Exports
# ---------------------------------------------------------------------------

__all__ = [
    # Type aliases
    "Symbol",
    "AnomalyId",
    # Base models
    "FrozenModel",
    "StrictFrozenModel",
    # Date/Time
    "DateRange",
    # Market data
    "Bar",
    # Anomalies
    "AnomalyType",
    "Severity",
    "AnomalyCandidate",
    "AnomalyRecord",
    # Metrics and analysis
    "StockMetrics",
    "ComparisonMetrics",
    "CorrelationPair",
    "PortfolioRisk",
    "TimelineEntry",
    "SectorSummary",
    "ModelExplanation",
    # Configuration
    "DetectorConfig",
    "ZScoreConfig",
    "BollingerConfig",
    "MACDConfig",
    "IsolationConfig",
    "PatternConfig",
    "ThresholdConfig",
    "DetectionConfig",
]
