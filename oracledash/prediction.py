"""
Prediction evaluator.

Derives the 5 minute prediction label from a single record. Pure: the
result depends only on (price_e8, prediction_5m) of that record.
"""

import math

from .types import (
    Direction,
    InsufficientData,
    MalformedPrediction,
    PredictionLabel,
    PriceRecord,
)

# Text the oracle sends while it lacks history to predict
INSUFFICIENT_DATA_SENTINEL = "Not enough data yet"

WAITING_TEXT = "Waiting for more data..."


def parse_predicted_price(text: str) -> float:
    """
    Parse a predicted price with plain decimal rules.

    Raises:
        ValueError: if the text is not a finite decimal number
    """
    if "_" in text or not text.isascii():
        raise ValueError(f"Not a decimal number: {text!r}")
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"Not a finite number: {text!r}")
    return value


def evaluate_prediction(record: PriceRecord) -> PredictionLabel:
    """
    Evaluate a record's prediction against its current price.

    A predicted price equal to the current price counts as down; only a
    strictly higher prediction is up.
    """
    raw = record.prediction_5m
    if raw is None or not raw.strip() or raw == INSUFFICIENT_DATA_SENTINEL:
        return InsufficientData()

    try:
        predicted = parse_predicted_price(raw)
    except ValueError:
        return MalformedPrediction(raw=raw)

    return Direction(predicted_price=predicted, is_up=predicted > record.price)


def shows_direction(label: PredictionLabel) -> bool:
    """True if the label should be displayed with a price and arrow."""
    return isinstance(label, Direction)


def prediction_text(label: PredictionLabel) -> str:
    """Display text, e.g. "3050.00 ↑" or the waiting message."""
    if isinstance(label, Direction):
        return f"{label.display_predicted_price} {label.arrow}"
    return WAITING_TEXT
