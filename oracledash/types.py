"""
Type definitions for the oracle dashboard.

Records as delivered by the oracle, the static pair configuration,
prediction labels and the per-pair view models handed to the renderer.
All values are immutable so a published state can be shared freely.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Union

PRICE_SCALE = 100_000_000  # priceE8 fixed-point scale
BASIS_POINTS_PER_PERCENT = 100


@dataclass(frozen=True, slots=True)
class TrackedPair:
    """A (base, quote) pair the dashboard always displays."""
    base: str
    quote: str

    @property
    def label(self) -> str:
        """Display label, e.g. "ETH/USD"."""
        return f"{self.base}/{self.quote}"

    @classmethod
    def parse(cls, text: str) -> "TrackedPair":
        """Parse a "BASE/QUOTE" configuration string."""
        base, sep, quote = text.strip().partition("/")
        base, quote = base.strip(), quote.strip()
        if not sep or not base or not quote or "/" in quote:
            raise ValueError(f"Invalid pair {text!r}, expected BASE/QUOTE")
        return cls(base=base, quote=quote)


@dataclass(frozen=True, slots=True)
class PriceRecord:
    """
    One oracle record for a pair.

    Wire fields: base, quote, priceE8, confidenceBP, timestamp,
    prediction5m (optional), txHash (optional).
    """
    base: str
    quote: str
    price_e8: int  # Price * 1e8, non-negative
    confidence_bp: int  # Basis points, nominally 0-10000 (not clamped)
    timestamp: int  # Unix seconds
    prediction_5m: Optional[str] = None  # Predicted price text or sentinel
    tx_hash: Optional[str] = None

    @property
    def pair(self) -> TrackedPair:
        return TrackedPair(self.base, self.quote)

    @property
    def price(self) -> float:
        """Display price (priceE8 / 1e8)."""
        return self.price_e8 / PRICE_SCALE

    @property
    def confidence_pct(self) -> float:
        """Confidence in percent (confidenceBP / 100)."""
        return self.confidence_bp / BASIS_POINTS_PER_PERCENT


# One fetch cycle's records, in payload order
Snapshot = tuple[PriceRecord, ...]


@dataclass(frozen=True, slots=True)
class InsufficientData:
    """Upstream has not enough history to predict (or sent nothing)."""
    pass


@dataclass(frozen=True, slots=True)
class Direction:
    """Parsed 5 minute prediction relative to the current price."""
    predicted_price: float
    is_up: bool

    @property
    def arrow(self) -> str:
        return "↑" if self.is_up else "↓"

    @property
    def display_predicted_price(self) -> str:
        return f"{self.predicted_price:.2f}"


@dataclass(frozen=True, slots=True)
class MalformedPrediction:
    """
    prediction5m was present but not a finite number.

    Displayed exactly like InsufficientData.
    """
    raw: str


PredictionLabel = Union[InsufficientData, Direction, MalformedPrediction]


@dataclass(frozen=True, slots=True)
class Absent:
    """No record for this pair in the current snapshot."""
    pair: TrackedPair


@dataclass(frozen=True, slots=True)
class Present:
    """Display-ready values for a pair that has a record."""
    pair: TrackedPair
    record: PriceRecord
    display_price: str  # Two decimals
    display_confidence: str  # Two decimals, percent without the sign
    display_time: str  # HH:MM:SS of the record timestamp
    prediction: PredictionLabel
    tx_url: Optional[str] = None


PairView = Union[Absent, Present]


@dataclass(frozen=True, slots=True)
class ViewState:
    """
    Everything the renderer needs, derived from one snapshot.

    Published as a single object so readers never see a mix of
    two fetch cycles.
    """
    snapshot: Snapshot
    views: tuple[PairView, ...]  # One per tracked pair, configured order
    last_updated_ts: Optional[int] = None  # Max record timestamp
    last_updated: Optional[str] = None  # Formatted last_updated_ts

    def view_for(self, pair: TrackedPair) -> Optional[PairView]:
        """Look up the view model for a tracked pair."""
        for view in self.views:
            if view.pair == pair:
                return view
        return None


class ControllerState(Enum):
    """RefreshController lifecycle."""
    IDLE = auto()
    RUNNING = auto()
    STOPPED = auto()


@dataclass(slots=True)
class RefreshStats:
    """Counters kept by the refresh controller."""
    poll_count: int = 0
    success_count: int = 0
    error_count: int = 0
    skipped_ticks: int = 0
    discarded_count: int = 0
    last_error: Optional[str] = None
