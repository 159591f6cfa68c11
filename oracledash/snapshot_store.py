"""
View state store.

Holds the single current ViewState as a replace-only cell.
Single writer (the refresh controller), any number of readers.
"""

import logging
from typing import Optional

from .types import ViewState

logger = logging.getLogger(__name__)


class ViewStateStore:
    """
    Replace-only holder for the latest ViewState.

    - None until the first successful fetch ("no data yet")
    - Each publish swaps in a complete, immutable ViewState
    - No merging: a new state fully replaces the previous one

    All access happens on one event loop, and a publish is a single
    reference assignment, so no lock is taken.
    """

    def __init__(self):
        self._current: Optional[ViewState] = None
        self._seq: int = 0

    def publish(self, state: ViewState) -> int:
        """
        Atomically replace the current state.

        Args:
            state: Fully derived ViewState

        Returns:
            New sequence number
        """
        self._current = state
        self._seq += 1
        return self._seq

    def read_latest(self) -> tuple[Optional[ViewState], int]:
        """
        Read latest state and its sequence number.

        Returns:
            Tuple of (state, sequence_number).
            State is None if nothing published yet.
        """
        return self._current, self._seq

    @property
    def current(self) -> Optional[ViewState]:
        """Current state (None if nothing published yet)."""
        return self._current

    def get_seq(self) -> int:
        """Number of publications so far."""
        return self._seq

    @property
    def has_data(self) -> bool:
        """Check if any state has been published."""
        return self._current is not None
