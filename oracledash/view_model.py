"""
View-model builder.

Combines resolver and evaluator output into the per-pair view models and
the ViewState the store publishes. Everything here is synchronous and
side-effect free.
"""

from datetime import tzinfo
from typing import Iterable, Optional

from .prediction import evaluate_prediction
from .resolver import resolve_pair
from .types import (
    Absent,
    PairView,
    Present,
    PriceRecord,
    Snapshot,
    TrackedPair,
    ViewState,
)
from .util import format_2dp, format_clock


def tx_link(explorer_base_url: str, tx_hash: Optional[str]) -> Optional[str]:
    """Explorer URL for a transaction hash (plain concatenation)."""
    if not tx_hash:
        return None
    return f"{explorer_base_url}{tx_hash}"


def present(
    pair: TrackedPair,
    record: PriceRecord,
    explorer_base_url: str = "",
    tz: Optional[tzinfo] = None,
) -> Present:
    """Build display values for a resolved record."""
    return Present(
        pair=pair,
        record=record,
        display_price=format_2dp(record.price),
        display_confidence=format_2dp(record.confidence_pct),
        display_time=format_clock(record.timestamp, tz),
        prediction=evaluate_prediction(record),
        tx_url=tx_link(explorer_base_url, record.tx_hash),
    )


def build_pair_view(
    snapshot: Snapshot,
    pair: TrackedPair,
    explorer_base_url: str = "",
    tz: Optional[tzinfo] = None,
) -> PairView:
    record = resolve_pair(snapshot, pair)
    if record is None:
        return Absent(pair=pair)
    return present(pair, record, explorer_base_url, tz)


def last_updated_ts(snapshot: Snapshot) -> Optional[int]:
    """Newest record timestamp in the snapshot (None if empty)."""
    if not snapshot:
        return None
    return max(record.timestamp for record in snapshot)


def build_view_state(
    snapshot: Snapshot,
    pairs: Iterable[TrackedPair],
    explorer_base_url: str = "",
    tz: Optional[tzinfo] = None,
) -> ViewState:
    """
    Derive the full ViewState for one snapshot.

    Args:
        snapshot: Normalized records from one fetch
        pairs: Tracked pairs, in display order
        explorer_base_url: Prefix for transaction links
        tz: Display zone for times (local time if None)
    """
    views = tuple(
        build_pair_view(snapshot, pair, explorer_base_url, tz) for pair in pairs
    )
    newest = last_updated_ts(snapshot)
    return ViewState(
        snapshot=snapshot,
        views=views,
        last_updated_ts=newest,
        last_updated=format_clock(newest, tz) if newest is not None else None,
    )
