"""
Oracle Dashboard - live view of AI price oracle records.

Polls the oracle for price/prediction records, derives display values per
tracked pair, and publishes them atomically for rendering.
"""

__version__ = "0.1.0"

# Core types
from .types import (
    TrackedPair,
    PriceRecord,
    Snapshot,
    # Prediction labels
    InsufficientData,
    Direction,
    MalformedPrediction,
    PredictionLabel,
    # View models
    Absent,
    Present,
    PairView,
    ViewState,
    ControllerState,
)

# Errors
from .errors import (
    OracleDashError,
    TransportFailure,
    MalformedPayload,
    ConfigurationError,
)

# Derivation
from .normalizer import normalize_payload, parse_record
from .resolver import resolve_pair, resolve_pairs
from .prediction import INSUFFICIENT_DATA_SENTINEL, evaluate_prediction
from .view_model import build_view_state, tx_link

# Runtime components
from .snapshot_store import ViewStateStore
from .oracle_client import OracleClient
from .refresh import RefreshController, RefreshHandle
from .config import DashboardConfig

__all__ = [
    "__version__",
    # Types
    "TrackedPair",
    "PriceRecord",
    "Snapshot",
    "InsufficientData",
    "Direction",
    "MalformedPrediction",
    "PredictionLabel",
    "Absent",
    "Present",
    "PairView",
    "ViewState",
    "ControllerState",
    # Errors
    "OracleDashError",
    "TransportFailure",
    "MalformedPayload",
    "ConfigurationError",
    # Derivation
    "normalize_payload",
    "parse_record",
    "resolve_pair",
    "resolve_pairs",
    "INSUFFICIENT_DATA_SENTINEL",
    "evaluate_prediction",
    "build_view_state",
    "tx_link",
    # Runtime
    "ViewStateStore",
    "OracleClient",
    "RefreshController",
    "RefreshHandle",
    "DashboardConfig",
]
