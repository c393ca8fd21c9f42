"""Data ingestion and source management module."""

from stock_anomaly.data.sources import (
    CSVDataSource,
    DataSource,
    YahooDataSource,
    resolve_data_source,
)

__all__ = [
    "DataSource",
    "CSVDataSource",
    "YahooDataSource",
    "resolve_data_source",
]
