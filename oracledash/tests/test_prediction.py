"""Tests for prediction.py - 5 minute prediction labels."""

import pytest

from oracledash.prediction import (
    INSUFFICIENT_DATA_SENTINEL,
    WAITING_TEXT,
    evaluate_prediction,
    parse_predicted_price,
    prediction_text,
    shows_direction,
)
from oracledash.types import (
    Direction,
    InsufficientData,
    MalformedPrediction,
    PriceRecord,
)


def rec(prediction, price_e8=300000000000):
    return PriceRecord("ETH", "USD", price_e8, 9800, 1000, prediction_5m=prediction)


class TestEvaluatePrediction:
    """Tests for evaluate_prediction."""

    def test_up(self):
        label = evaluate_prediction(rec("3050.00"))
        assert label == Direction(predicted_price=3050.0, is_up=True)

    def test_down(self):
        label = evaluate_prediction(rec("2999.99"))
        assert label == Direction(predicted_price=2999.99, is_up=False)

    def test_tie_is_down(self):
        """Test a prediction equal to the current price is not up."""
        label = evaluate_prediction(rec("3000.00"))
        assert isinstance(label, Direction)
        assert label.is_up is False
        assert label.arrow == "↓"

    def test_tie_with_fractional_price(self):
        label = evaluate_prediction(rec("1234.56789", price_e8=123456789000))
        assert label.is_up is False

    def test_sentinel(self):
        assert evaluate_prediction(rec(INSUFFICIENT_DATA_SENTINEL)) == InsufficientData()

    def test_absent(self):
        assert evaluate_prediction(rec(None)) == InsufficientData()

    def test_empty_string(self):
        assert evaluate_prediction(rec("")) == InsufficientData()

    @pytest.mark.parametrize(
        "raw", ["abc", "3,050.00", "nan", "inf", "-Infinity", "1_000", "٣٠٥٠", "３０５０"]
    )
    def test_malformed(self, raw):
        """Test unparsable or non-finite text never raises."""
        label = evaluate_prediction(rec(raw))
        assert label == MalformedPrediction(raw=raw)
        assert not shows_direction(label)

    def test_whitespace_is_tolerated(self):
        label = evaluate_prediction(rec(" 3050 "))
        assert label == Direction(3050.0, True)

    def test_idempotent(self):
        """Test repeated evaluation of the same record gives the same label."""
        record = rec("3050.00")
        results = {evaluate_prediction(record) for _ in range(5)}
        assert len(results) == 1


class TestPredictionText:
    """Tests for prediction display text."""

    def test_direction_text(self):
        assert prediction_text(Direction(3050.0, True)) == "3050.00 ↑"
        assert prediction_text(Direction(2990.126, False)) == "2990.13 ↓"

    def test_malformed_displays_like_insufficient(self):
        assert prediction_text(MalformedPrediction("abc")) == WAITING_TEXT
        assert prediction_text(InsufficientData()) == WAITING_TEXT


class TestParsePredictedPrice:
    """Tests for parse_predicted_price."""

    def test_plain_decimal(self):
        assert parse_predicted_price("3050.25") == 3050.25

    def test_exponent(self):
        assert parse_predicted_price("3.05e3") == 3050.0

    def test_rejects_nan(self):
        with pytest.raises(ValueError):
            parse_predicted_price("NaN")
