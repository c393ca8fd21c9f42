#!/usr/bin/env python3
"""Command-line interface for the stock anomaly engine."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime


def parse_date(date_str: str):
    """Parse date string to date."""
    return datetime.strptime(date_str, "%Y-%m-%d").date()


def _load_bars(args: argparse.Namespace, source_arg: str | None, symbol: str | None):
    """Load one symbol's bars from a CSV file or Yahoo Finance."""
    from stock_anomaly.data import resolve_data_source
    from stock_anomaly.engine import validate_series
    from stock_anomaly.types import DateRange, Symbol

    if bool(args.start) != bool(args.end):
        raise ValueError("--start and --end must be given together")

    date_range = None
    if args.start and args.end:
        date_range = DateRange(start=parse_date(args.start), end=parse_date(args.end))

    if args.yahoo:
        if not symbol:
            raise ValueError("--symbol is required with --yahoo")
        if date_range is None:
            raise ValueError("--start and --end are required with --yahoo")
        source = resolve_data_source("yahoo")
    else:
        if not source_arg:
            raise ValueError("a CSV file is required unless --yahoo is given")
        params = {"file_path": source_arg}
        if symbol:
            params["symbol"] = symbol
        source = resolve_data_source("csv", params)

    symbols = [Symbol(symbol)] if symbol else []
    return validate_series(list(source.fetch_bars(symbols, date_range)))


def cmd_detect(args: argparse.Namespace) -> int:
    """Detect anomalies in a series."""
    from stock_anomaly.commands import load_detection_config
    from stock_anomaly.engine import detect_anomalies
    from stock_anomaly.exceptions import AnomalyError

    try:
        config = load_detection_config(args.config) if args.config else None
        bars = _load_bars(args, args.source, args.symbol)
    except (AnomalyError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    if not bars:
        print("Error: No data loaded. Check the file, symbol and date range.")
        return 1

    records = detect_anomalies(bars, config, max_workers=args.workers)

    if args.json:
        print(json.dumps([r.model_dump(mode="json") for r in records], indent=2))
        return 0

    print("=" * 60)
    print("ANOMALIES")
    print("=" * 60)
    print(f"Symbol:    {bars[0].symbol}")
    print(f"Period:    {bars[0].date} to {bars[-1].date} ({len(bars)} bars)")
    print(f"Found:     {len(records)}")

    if records:
        print()
        print(f"{'Date':<12} {'Type':<7} {'Severity':<9} {'Score':>8}  Description")
        print("-" * 60)
        for record in records[: args.limit]:
            print(
                f"{record.date.isoformat():<12} {record.type.value:<7} "
                f"{record.severity.value:<9} {record.score:>8.2f}  {record.description}"
            )
        if len(records) > args.limit:
            print(f"   ... and {len(records) - args.limit} more anomalies")

    return 0


def cmd_metrics(args: argparse.Namespace) -> int:
    """Show dashboard metrics for a series."""
    from stock_anomaly.engine import detect_anomalies
    from stock_anomaly.exceptions import AnomalyError
    from stock_anomaly.metrics import compute_metrics

    try:
        bars = _load_bars(args, args.source, args.symbol)
    except (AnomalyError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    metrics = compute_metrics(bars, detect_anomalies(bars))

    print("=" * 60)
    print("METRICS")
    print("=" * 60)
    print(f"Symbol:        {metrics.symbol or '-'}")
    print(f"Price:         ${metrics.current_price:,.2f}")
    print(
        f"Daily Change:  {metrics.daily_change:+,.2f} "
        f"({metrics.daily_change_percent:+.2f}%)"
    )
    print(f"Avg Volume:    {metrics.average_volume:,.0f}")
    print(f"Volatility:    {metrics.volatility:.2f}%")
    print(f"RSI:           {metrics.rsi:.2f}")
    print(f"Anomalies:     {metrics.anomaly_count}")
    return 0


def cmd_compare(args: argparse.Namespace) -> int:
    """Compare a stock with a market index."""
    from stock_anomaly.comparison import compare_to_index
    from stock_anomaly.engine import detect_anomalies
    from stock_anomaly.exceptions import AnomalyError

    try:
        bars = _load_bars(args, args.source, args.symbol)
        index_bars = _load_bars(args, args.index_csv, args.index_symbol)
    except (AnomalyError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    if not bars or not index_bars:
        print("Error: No data loaded for the stock or the index.")
        return 1

    result = compare_to_index(
        str(bars[0].symbol),
        bars,
        detect_anomalies(bars),
        index_bars,
        detect_anomalies(index_bars),
        sector=args.sector,
    )

    print("=" * 60)
    print(f"{result.symbol} vs {index_bars[0].symbol}")
    print("=" * 60)
    print(f"Return:          {result.total_return:+.2f}%")
    print(f"Outperformance:  {result.outperformance:+.2f}%")
    print(f"Volatility:      {result.volatility:.2f}%")
    print(f"Beta:            {result.beta:.2f}")
    print(f"Alpha:           {result.alpha:+.2f}")
    print(f"Correlation:     {result.market_correlation:.2f}")
    print(f"Anomaly Ratio:   {result.anomaly_ratio:.3f}")
    print(f"Relative Risk:   {result.relative_anomaly_risk:.2f}x")
    return 0


def cmd_explain(args: argparse.Namespace) -> int:
    """Print the detection methodology."""
    from stock_anomaly.explain import get_model_explanation

    info = get_model_explanation()
    print(info.short_description)
    print("\nMethodology:")
    for item in info.methodology:
        print(f"  - {item}")
    print(f"\nAccuracy: {info.accuracy}")
    print("\nLimitations:")
    for item in info.limitations:
        print(f"  - {item}")
    return 0


def _add_source_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("source", nargs="?", help="CSV file with daily bars")
    parser.add_argument("-s", "--symbol", help="Symbol to select (or assign)")
    parser.add_argument(
        "--yahoo", action="store_true", help="Fetch from Yahoo Finance instead of CSV"
    )
    parser.add_argument("--start", help="Start date (YYYY-MM-DD)")
    parser.add_argument("--end", help="End date (YYYY-MM-DD, exclusive)")


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Stock anomaly detection CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Detect command
    detect_parser = subparsers.add_parser("detect", help="Detect anomalies")
    _add_source_args(detect_parser)
    detect_parser.add_argument("-c", "--config", help="Path to YAML detector config")
    detect_parser.add_argument(
        "-w", "--workers", type=int, default=None, help="Run detectors on N threads"
    )
    detect_parser.add_argument(
        "-n", "--limit", type=int, default=20, help="Max anomalies to print"
    )
    detect_parser.add_argument("--json", action="store_true", help="Emit JSON")

    # Metrics command
    metrics_parser = subparsers.add_parser("metrics", help="Show summary metrics")
    _add_source_args(metrics_parser)

    # Compare command
    compare_parser = subparsers.add_parser(
        "compare", help="Compare a stock with a market index"
    )
    _add_source_args(compare_parser)
    compare_parser.add_argument("--index-csv", help="CSV file with index bars")
    compare_parser.add_argument(
        "--index-symbol", default=None, help="Index symbol (e.g., SPY)"
    )
    compare_parser.add_argument("--sector", default="Other", help="Sector label")

    # Explain command
    subparsers.add_parser("explain", help="Describe the detection methodology")

    args = parser.parse_args(argv)

    from stock_anomaly.log import setup_logging

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "detect":
        return cmd_detect(args)
    elif args.command == "metrics":
        return cmd_metrics(args)
    elif args.command == "compare":
        return cmd_compare(args)
    elif args.command == "explain":
        return cmd_explain(args)

    return 0


if __name__ == "__main__":
    sys.exit(main())
