"""Data source implementations for loading daily price series.

This module provides an abstract interface for data sources and concrete
implementations for CSV files and Yahoo Finance. Sources only produce bars;
detection never performs I/O.
"""

from __future__ import annotations

import csv
from abc import ABC, abstractmethod
from datetime import date, datetime
from pathlib import Path
from typing import Any, Iterator

from stock_anomaly.exceptions import DataSourceError
from stock_anomaly.types import Bar, DateRange, Symbol


class DataSource(ABC):
    """Abstract base class for data sources.

    All data source implementations must inherit from this class and implement
    the `fetch_bars` method.
    """

    @abstractmethod
    def fetch_bars(
        self,
        symbols: list[Symbol],
        date_range: DateRange | None = None,
    ) -> Iterator[Bar]:
        """Fetch daily bars for the given symbols.

        :param symbols: List of symbols to fetch (empty = all available).
        :param date_range: Optional range (inclusive start, exclusive end).
        :returns: Iterator of Bar objects in chronological order per symbol.
        :raises DataSourceError: If fetching fails.
        """
        ...


def _in_range(day: date, date_range: DateRange | None) -> bool:
    if date_range is None:
        return True
    return date_range.start <= day < date_range.end


class CSVDataSource(DataSource):
    """Data source that reads daily bars from a CSV file.

    Expected CSV format (default columns):
    - symbol: Stock symbol
    - date: ISO date (``YYYY-MM-DD``) or ISO datetime
    - open, high, low, close: Prices
    - volume: Trading volume
    - adj_close: Optional adjusted close

    :param source_params: Required parameters:
        - file_path: Path to the CSV file.
        Optional parameters:
        - symbol: Symbol to assign when the file has no symbol column
        - symbol_col: Column name for symbol (default: "symbol")
        - date_col: Column name for date (default: "date")
        - open_col, high_col, low_col, close_col, volume_col: Price columns
        - adj_close_col: Column name for adjusted close (default: "adj_close")
        - delimiter: CSV delimiter (default: ",")
        - date_format: strptime format for dates (default: ISO format)
    """

    def __init__(self, source_params: dict[str, Any] | None = None) -> None:
        """Initialize CSV data source.

        :param source_params: Configuration with file_path and optional column mappings.
        :raises DataSourceError: If file_path is not provided.
        """
        self.params = source_params or {}
        self.file_path = self.params.get("file_path")
        if not self.file_path:
            raise DataSourceError("CSVDataSource requires 'file_path' in source_params")

        # Column name mappings with defaults
        self.default_symbol = self.params.get("symbol")
        self.symbol_col = self.params.get("symbol_col", "symbol")
        self.date_col = self.params.get("date_col", "date")
        self.open_col = self.params.get("open_col", "open")
        self.high_col = self.params.get("high_col", "high")
        self.low_col = self.params.get("low_col", "low")
        self.close_col = self.params.get("close_col", "close")
        self.volume_col = self.params.get("volume_col", "volume")
        self.adj_close_col = self.params.get("adj_close_col", "adj_close")
        self.delimiter = self.params.get("delimiter", ",")
        self.date_format = self.params.get("date_format")

    def _parse_date(self, value: str) -> date:
        try:
            if self.date_format:
                return datetime.strptime(value, self.date_format).date()
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        except ValueError as e:
            raise DataSourceError(f"Failed to parse date '{value}': {e}") from e

    def fetch_bars(
        self,
        symbols: list[Symbol],
        date_range: DateRange | None = None,
    ) -> Iterator[Bar]:
        """Read bars from the CSV file.

        :param symbols: List of symbols to filter (empty = all symbols).
        :param date_range: Optional range to filter.
        :returns: Iterator of Bar objects in file order.
        :raises DataSourceError: If reading fails or a row is malformed.
        """
        path = Path(self.file_path)
        if not path.exists():
            raise DataSourceError(f"CSV file not found: {self.file_path}")

        # Convert symbols to set for fast lookup
        symbol_set = set(str(s) for s in symbols) if symbols else None

        try:
            with open(path, newline="", encoding="utf-8") as f:
                reader = csv.DictReader(f, delimiter=self.delimiter)

                for row in reader:
                    bar_symbol = row.get(self.symbol_col) or self.default_symbol
                    if not bar_symbol:
                        continue  # Skip rows without symbol

                    if symbol_set and bar_symbol not in symbol_set:
                        continue

                    date_str = row.get(self.date_col)
                    if not date_str:
                        continue
                    day = self._parse_date(date_str)
                    if not _in_range(day, date_range):
                        continue

                    adj_close = row.get(self.adj_close_col)
                    try:
                        yield Bar(
                            symbol=Symbol(bar_symbol),
                            date=day,
                            open=float(row[self.open_col]),
                            high=float(row[self.high_col]),
                            low=float(row[self.low_col]),
                            close=float(row[self.close_col]),
                            volume=float(row[self.volume_col]),
                            adj_close=float(adj_close) if adj_close else None,
                        )
                    except (KeyError, ValueError) as e:
                        raise DataSourceError(f"Failed to parse row {row}: {e}") from e

        except csv.Error as e:
            raise DataSourceError(f"CSV parsing error: {e}") from e
        except OSError as e:
            raise DataSourceError(f"Failed to read CSV file: {e}") from e


class YahooDataSource(DataSource):
    """Data source that fetches daily bars from Yahoo Finance via yfinance.

    :param source_params: Optional parameters for configuring the source.
        - timeout: Request timeout in seconds (default: 30)
    """

    def __init__(self, source_params: dict[str, Any] | None = None) -> None:
        """Initialize Yahoo data source.

        :param source_params: Optional configuration parameters.
        """
        self.params = source_params or {}
        self.timeout = self.params.get("timeout", 30)

    def fetch_bars(
        self,
        symbols: list[Symbol],
        date_range: DateRange | None = None,
    ) -> Iterator[Bar]:
        """Fetch daily bars from Yahoo Finance.

        :param symbols: List of symbols to fetch.
        :param date_range: Range to fetch; required for this source.
        :returns: Iterator of Bar objects.
        :raises DataSourceError: If fetching fails.
        """
        if date_range is None:
            raise DataSourceError("YahooDataSource requires a date range")

        try:
            import yfinance as yf
        except ImportError as e:
            raise DataSourceError(
                "yfinance is not installed. Install it with: pip install yfinance"
            ) from e

        start_str = date_range.start.strftime("%Y-%m-%d")
        end_str = date_range.end.strftime("%Y-%m-%d")

        for symbol in symbols:
            try:
                ticker = yf.Ticker(str(symbol))
                df = ticker.history(
                    start=start_str,
                    end=end_str,
                    interval="1d",
                    timeout=self.timeout,
                )

                if df.empty:
                    # No data for this symbol, continue with the rest
                    continue

                for timestamp, row in df.iterrows():
                    yield Bar(
                        symbol=symbol,
                        date=timestamp.date(),
                        open=float(row["Open"]),
                        high=float(row["High"]),
                        low=float(row["Low"]),
                        close=float(row["Close"]),
                        volume=float(row["Volume"]),
                    )

            except Exception as e:
                raise DataSourceError(
                    f"Failed to fetch data for symbol '{symbol}': {e}"
                ) from e


def resolve_data_source(
    source_type: str,
    source_params: dict[str, Any] | None = None,
) -> DataSource:
    """Construct a data source by name.

    :param source_type: "csv" or "yahoo".
    :param source_params: Source-specific parameters.
    :returns: DataSource instance for the specified type.
    :raises DataSourceError: If the source type is unrecognized.
    """
    source = source_type.lower()

    if source == "csv":
        return CSVDataSource(source_params)
    elif source == "yahoo":
        return YahooDataSource(source_params)
    else:
        raise DataSourceError(
            f"Unrecognized data source type: '{source_type}'. "
            f"Supported types: csv, yahoo"
        )
