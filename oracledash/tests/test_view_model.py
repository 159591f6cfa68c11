"""Tests for view_model.py - per-pair view models and ViewState."""

from datetime import timezone

from oracledash.types import (
    Absent,
    Direction,
    InsufficientData,
    Present,
    PriceRecord,
    TrackedPair,
)
from oracledash.view_model import (
    build_pair_view,
    build_view_state,
    last_updated_ts,
    tx_link,
)

ETH_USD = TrackedPair("ETH", "USD")
BTC_USD = TrackedPair("BTC", "USD")
EXPLORER = "https://explorer.example/tx/"


def eth_record(**overrides):
    fields = dict(
        base="ETH",
        quote="USD",
        price_e8=300000000000,
        confidence_bp=9800,
        timestamp=1000,
        prediction_5m="3050.00",
    )
    fields.update(overrides)
    return PriceRecord(**fields)


class TestTxLink:
    """Tests for tx_link."""

    def test_concatenates(self):
        assert tx_link(EXPLORER, "0xdead") == "https://explorer.example/tx/0xdead"

    def test_no_validation(self):
        assert tx_link(EXPLORER, "not a hash") == EXPLORER + "not a hash"

    def test_absent_hash(self):
        assert tx_link(EXPLORER, None) is None
        assert tx_link(EXPLORER, "") is None


class TestBuildPairView:
    """Tests for build_pair_view."""

    def test_present_display_values(self):
        """Test the ETH/USD example: price, confidence and prediction."""
        view = build_pair_view((eth_record(),), ETH_USD, EXPLORER, timezone.utc)

        assert isinstance(view, Present)
        assert view.display_price == "3000.00"
        assert view.display_confidence == "98.00"
        assert view.display_time == "00:16:40"
        assert view.prediction == Direction(3050.0, True)
        assert view.tx_url is None

    def test_absent(self):
        view = build_pair_view((eth_record(),), BTC_USD, EXPLORER, timezone.utc)
        assert view == Absent(BTC_USD)

    def test_tx_url(self):
        view = build_pair_view((eth_record(tx_hash="0x1"),), ETH_USD, EXPLORER, timezone.utc)
        assert view.tx_url == EXPLORER + "0x1"

    def test_sentinel_prediction(self):
        record = eth_record(prediction_5m="Not enough data yet")
        view = build_pair_view((record,), ETH_USD, EXPLORER, timezone.utc)
        assert view.prediction == InsufficientData()

    def test_small_price_two_decimals(self):
        record = eth_record(price_e8=123456, confidence_bp=5)
        view = build_pair_view((record,), ETH_USD, EXPLORER, timezone.utc)
        assert view.display_price == "0.00"
        assert view.display_confidence == "0.05"


class TestBuildViewState:
    """Tests for build_view_state."""

    def test_example_scenario(self):
        """Test tracked ETH/USD + BTC/USD with only ETH/USD returned."""
        snapshot = (eth_record(),)
        state = build_view_state(snapshot, [ETH_USD, BTC_USD], EXPLORER, timezone.utc)

        assert state.snapshot == snapshot
        assert [v.pair for v in state.views] == [ETH_USD, BTC_USD]
        assert isinstance(state.view_for(ETH_USD), Present)
        assert state.view_for(BTC_USD) == Absent(BTC_USD)

    def test_last_updated_is_max_record_timestamp(self):
        """Test last updated comes from record timestamps, not order or wall clock."""
        snapshot = (
            eth_record(timestamp=1700000300),
            eth_record(base="BTC", timestamp=1700000900),
            eth_record(quote="BNB", timestamp=1700000100),
        )
        state = build_view_state(snapshot, [ETH_USD], EXPLORER, timezone.utc)

        assert state.last_updated_ts == 1700000900
        assert state.last_updated == "22:28:20"

    def test_last_updated_counts_untracked_records(self):
        snapshot = (eth_record(timestamp=10), eth_record(base="SOL", timestamp=20))
        assert build_view_state(snapshot, [ETH_USD]).last_updated_ts == 20

    def test_empty_snapshot(self):
        state = build_view_state((), [ETH_USD], EXPLORER, timezone.utc)
        assert state.views == (Absent(ETH_USD),)
        assert state.last_updated_ts is None
        assert state.last_updated is None

    def test_view_for_untracked_pair(self):
        state = build_view_state((eth_record(),), [ETH_USD])
        assert state.view_for(TrackedPair("SOL", "USD")) is None


def test_last_updated_ts_helper():
    assert last_updated_ts(()) is None
    assert last_updated_ts((eth_record(timestamp=7), eth_record(timestamp=3))) == 7
