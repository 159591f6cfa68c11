"""Pair resolver: tracked pair -> latest matching record."""

from typing import Iterable, Optional

from .types import PriceRecord, Snapshot, TrackedPair


def resolve_pair(snapshot: Snapshot, pair: TrackedPair) -> Optional[PriceRecord]:
    """
    Find the record for a tracked pair.

    Matching is exact and case-sensitive on both base and quote. When the
    oracle sends several records for one pair, the last one wins.

    Returns:
        Matching PriceRecord, or None if the pair is absent
    """
    for record in reversed(snapshot):
        if record.base == pair.base and record.quote == pair.quote:
            return record
    return None


def resolve_pairs(
    snapshot: Snapshot,
    pairs: Iterable[TrackedPair],
) -> dict[TrackedPair, Optional[PriceRecord]]:
    """Resolve every tracked pair, keeping the configured order."""
    return {pair: resolve_pair(snapshot, pair) for pair in pairs}
