"""Stock anomaly detection engine."""

from stock_anomaly.engine import detect_anomalies, validate_series
from stock_anomaly.exceptions import (
    AnomalyError,
    ConfigError,
    DataSourceError,
    DataValidationError,
)
from stock_anomaly.explain import get_model_explanation
from stock_anomaly.metrics import compute_metrics

__all__ = [
    "detect_anomalies",
    "validate_series",
    "compute_metrics",
    "get_model_explanation",
    "AnomalyError",
    "ConfigError",
    "DataSourceError",
    "DataValidationError",
]
