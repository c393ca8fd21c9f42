#!/usr/bin/env python3
"""
Portfolio Anomaly Scan
======================

This script scans a small demo portfolio for price and volume anomalies over
the last year of daily data and summarises the results at portfolio level.

What This Script Does
---------------------
1. **Data Fetching**: Downloads one year of daily bars for each holding and SPY
2. **Detection**: Runs every detector over each holding (threaded per symbol)
3. **Market Comparison**: Return, beta, alpha and relative anomaly risk vs SPY
4. **Portfolio Summary**:
   - Risk score from the severity mix of each holding's anomalies
   - Strongest pairwise price correlations
   - Anomaly timeline (busiest days)
   - Per-sector averages

Usage
-----
    pip install -e ".[yahoo]"
    python scripts/scan_portfolio.py
"""

from datetime import date, timedelta

from stock_anomaly import compute_metrics, detect_anomalies
from stock_anomaly.comparison import compare_to_index
from stock_anomaly.data import YahooDataSource
from stock_anomaly.exceptions import AnomalyError
from stock_anomaly.log import setup_logging
from stock_anomaly.portfolio import (
    anomaly_timeline,
    correlation_pairs,
    portfolio_risk,
    sector_summary,
)
from stock_anomaly.types import DateRange, Symbol

HOLDINGS = {
    "AAPL": "Technology",
    "MSFT": "Technology",
    "NVDA": "Technology",
    "JPM": "Financial",
    "XOM": "Energy",
    "JNJ": "Healthcare",
}
INDEX_SYMBOL = "SPY"


def main() -> None:
    """Run the portfolio anomaly scan."""
    setup_logging("WARNING")

    print("=" * 70)
    print("PORTFOLIO ANOMALY SCAN")
    print("=" * 70)
    print()

    # -------------------------------------------------------------------------
    # Step 1: Fetch data
    # -------------------------------------------------------------------------
    end_date = date.today()
    date_range = DateRange(start=end_date - timedelta(days=365), end=end_date)
    source = YahooDataSource()

    print(f"📅 Date Range: {date_range.start} to {date_range.end}")
    print(f"🔄 Fetching {len(HOLDINGS)} holdings and {INDEX_SYMBOL}...")

    series = {}
    for symbol in [*HOLDINGS, INDEX_SYMBOL]:
        try:
            series[symbol] = list(source.fetch_bars([Symbol(symbol)], date_range))
        except AnomalyError as e:
            print(f"   ⚠️  {symbol}: {e}")
            series[symbol] = []

    index_bars = series.pop(INDEX_SYMBOL)
    print(f"✅ Fetched {sum(len(b) for b in series.values()):,} bars")
    print()

    # -------------------------------------------------------------------------
    # Step 2: Detect anomalies
    # -------------------------------------------------------------------------
    print("🚀 Detecting anomalies...")
    anomalies = {
        symbol: detect_anomalies(bars, max_workers=4) for symbol, bars in series.items()
    }
    index_anomalies = detect_anomalies(index_bars)
    metrics = {
        symbol: compute_metrics(bars, anomalies[symbol]) for symbol, bars in series.items()
    }

    print(f"\n{'Symbol':<8} {'Price':>10} {'RSI':>7} {'Vol%':>8} {'Anom':>6} {'Beta':>6} {'vs SPY':>9}")
    print("-" * 70)
    for symbol, bars in series.items():
        if not bars:
            print(f"{symbol:<8} {'N/A':>10}")
            continue
        m = metrics[symbol]
        cmp = compare_to_index(
            symbol, bars, anomalies[symbol], index_bars, index_anomalies, HOLDINGS[symbol]
        )
        print(
            f"{symbol:<8} "
            f"${m.current_price:>9,.2f} "
            f"{m.rsi:>7.1f} "
            f"{m.volatility:>8.1f} "
            f"{m.anomaly_count:>6} "
            f"{cmp.beta:>6.2f} "
            f"{cmp.outperformance:>+8.1f}%"
        )
    print("-" * 70)

    # -------------------------------------------------------------------------
    # Step 3: Portfolio summary
    # -------------------------------------------------------------------------
    risk = portfolio_risk(anomalies)
    print(f"\n🛡️  Portfolio Risk: {risk.level} ({risk.risk_score:.1f})")
    print(
        f"   High: {risk.high_risk_stocks}  "
        f"Medium: {risk.medium_risk_stocks}  "
        f"Low: {risk.low_risk_stocks}"
    )

    print("\n🔗 Strongest Correlations:")
    for pair in correlation_pairs(series)[:5]:
        print(f"   {pair.stock1}/{pair.stock2}: {pair.correlation:+.2f} ({pair.strength})")

    print("\n📆 Busiest Days:")
    timeline = sorted(anomaly_timeline(anomalies), key=lambda e: -e.count)
    for entry in timeline[:5]:
        print(f"   {entry.date}: {entry.count} anomalies (high: {entry.severity['high']})")

    print(f"\n{'Sector':<14} {'Stocks':>7} {'Avg Vol%':>9} {'Avg RSI':>8} {'Anomalies':>10}")
    print("-" * 50)
    for summary in sector_summary(metrics, anomalies, HOLDINGS):
        print(
            f"{summary.sector:<14} "
            f"{len(summary.stocks):>7} "
            f"{summary.avg_volatility:>9.1f} "
            f"{summary.avg_rsi:>8.1f} "
            f"{summary.total_anomalies:>10}"
        )

    print()
    print("=" * 70)
    print("✅ Scan complete! Results are for demonstration only.")
    print("=" * 70)


if __name__ == "__main__":
    main()
