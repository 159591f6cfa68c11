"""
Record normalizer.

Turns a decoded oracle payload into a Snapshot of typed PriceRecords.
The payload as a whole must be a list; individual records are checked
leniently so one bad element never costs the rest of the batch.
"""

import logging
from collections.abc import Mapping
from typing import Any, Optional

from .errors import MalformedPayload
from .types import PriceRecord, Snapshot

logger = logging.getLogger(__name__)

# Timestamps convertible to a datetime under any UTC offset (0001-01-02 .. 9999-12-30)
MIN_TIMESTAMP = -62135510400
MAX_TIMESTAMP = 253402214399


def _as_int(value: Any) -> Optional[int]:
    """Integer field value, or None if missing/invalid."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _as_symbol(value: Any) -> Optional[str]:
    if isinstance(value, str) and value:
        return value
    return None


def _as_prediction(value: Any) -> Optional[str]:
    """
    Keep prediction5m as text.

    Numbers are accepted and converted to their text form; the
    evaluator decides whether the text is usable.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return repr(value)
    return None


def parse_record(item: Any) -> Optional[PriceRecord]:
    """
    Parse one payload element.

    Returns:
        PriceRecord, or None if a required field is missing or invalid
    """
    if not isinstance(item, Mapping):
        return None

    base = _as_symbol(item.get("base"))
    quote = _as_symbol(item.get("quote"))
    price_e8 = _as_int(item.get("priceE8"))
    confidence_bp = _as_int(item.get("confidenceBP"))
    timestamp = _as_int(item.get("timestamp"))

    if base is None or quote is None:
        return None
    if price_e8 is None or price_e8 < 0:
        return None
    if confidence_bp is None or timestamp is None:
        return None
    if not MIN_TIMESTAMP <= timestamp <= MAX_TIMESTAMP:
        return None

    tx_hash = item.get("txHash")
    if not isinstance(tx_hash, str) or not tx_hash:
        tx_hash = None

    return PriceRecord(
        base=base,
        quote=quote,
        price_e8=price_e8,
        confidence_bp=confidence_bp,
        timestamp=timestamp,
        prediction_5m=_as_prediction(item.get("prediction5m")),
        tx_hash=tx_hash,
    )


def normalize_payload(payload: Any) -> Snapshot:
    """
    Normalize a decoded payload into a Snapshot.

    Args:
        payload: Decoded JSON body from the oracle

    Returns:
        Tuple of valid PriceRecords in payload order

    Raises:
        MalformedPayload: if the payload is not a list of records
    """
    if not isinstance(payload, (list, tuple)):
        raise MalformedPayload(
            f"Expected a JSON array of records, got {type(payload).__name__}"
        )

    records = []
    for index, item in enumerate(payload):
        record = parse_record(item)
        if record is None:
            logger.debug(f"Dropping incomplete record at index {index}: {item!r}")
            continue
        records.append(record)

    return tuple(records)
