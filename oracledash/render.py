"""Plain-text console renderer for the dashboard view state."""

import sys
from typing import Iterable, Optional, TextIO

from .prediction import prediction_text
from .types import Absent, PairView, TrackedPair, ViewState

TITLE = "AI Oracle Dashboard"
FETCHING_TEXT = "⏳ Fetching latest prices..."
NO_DATA_TEXT = "No data yet"


def render_card(view: PairView) -> list[str]:
    """Lines for one pair card."""
    lines = [view.pair.label]
    if isinstance(view, Absent):
        lines.append(f"  {NO_DATA_TEXT}")
        return lines

    lines.append(f"  {view.display_price}")
    lines.append(f"  Confidence: {view.display_confidence}%")
    lines.append(f"  Time: {view.display_time}")
    lines.append(f"  ⏳ 5m Prediction: {prediction_text(view.prediction)}")
    if view.tx_url:
        lines.append(f"  Tx: {view.tx_url}")
    return lines


def render_dashboard(state: Optional[ViewState], pairs: Iterable[TrackedPair]) -> str:
    """
    Render the whole dashboard.

    Before the first successful fetch (state is None) every pair shows
    "No data yet" under a fetching banner.
    """
    lines = [TITLE, "=" * len(TITLE)]

    if state is None:
        lines.append(FETCHING_TEXT)
        views: Iterable[PairView] = [Absent(pair) for pair in pairs]
    else:
        views = state.views

    for view in views:
        lines.append("")
        lines.extend(render_card(view))

    if state is not None and state.last_updated:
        lines.append("")
        lines.append(f"Last updated: {state.last_updated}")

    return "\n".join(lines) + "\n"


class ConsoleRenderer:
    """Writes the dashboard to a text stream on every published state."""

    def __init__(self, pairs: Iterable[TrackedPair], stream: Optional[TextIO] = None):
        self._pairs = tuple(pairs)
        self._stream = stream or sys.stdout

    def render(self, state: Optional[ViewState]) -> None:
        self._stream.write(render_dashboard(state, self._pairs))
        self._stream.flush()

    def __call__(self, state: ViewState) -> None:
        self.render(state)
