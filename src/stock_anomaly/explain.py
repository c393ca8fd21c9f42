"""Static description of the detection methodology for display."""

from __future__ import annotations

from stock_anomaly.types import ModelExplanation

_EXPLANATION = ModelExplanation(
    short_description=(
        "Anomalies are found by running several lightweight statistical "
        "detectors over the daily price and volume series and merging "
        "detections that fall on the same day."
    ),
    methodology=[
        "Z-Score: flags closes or volumes more than 2.5 standard deviations "
        "from the series mean.",
        "Bollinger Bands: flags closes outside a 20-day moving average "
        "plus or minus two standard deviations.",
        "MACD Divergence: flags sudden expansions of the MACD histogram "
        "(12/26/9 EMAs).",
        "Isolation Score: flags days whose price/volume feature vector lies "
        "far from all other days, approximating an isolation forest.",
        "Pump-and-Dump Pattern: flags sharp run-ups followed by sharp "
        "declines on a volume spike.",
        "Day-over-Day Threshold: for short histories, flags moves above 5% "
        "in price or 100% in volume.",
        "Signals on the same day and type are merged; their scores add up "
        "and the highest severity wins.",
    ],
    accuracy=(
        "Results are for demonstration purposes only and should not be used "
        "for actual trading decisions."
    ),
    limitations=[
        "Scores from different detectors are on different scales and are "
        "summed without normalization.",
        "The isolation score is a distance heuristic, not a trained model.",
        "Statistics are computed over the supplied window only; short "
        "histories make every detector less reliable.",
        "No fundamental, news or market-wide context is taken into account.",
    ],
)


def get_model_explanation() -> ModelExplanation:
    """Return the methodology text shown alongside detection results."""
    return _EXPLANATION


__all__ = ["get_model_explanation"]
