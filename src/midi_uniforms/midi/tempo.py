"""
Tap tempo - derives BPM from the interval between sync button presses.
"""

import logging
from typing import Optional

logger = logging.getLogger(__name__)


class TempoEstimator:
    """
    Tap-tempo estimator for one deck.

    Each rising edge of the deck's sync button is compared against the
    previous one. The reference edge expires after `staleness_window`
    seconds so that an idle gap never produces a bogus BPM; the last
    computed BPM is kept until a new valid interval replaces it.
    """

    DEFAULT_STALENESS_WINDOW = 2.0
    DEFAULT_MIN_INTERVAL = 0.05  # 1200 BPM

    def __init__(self, deck: str = '',
                 staleness_window: float = DEFAULT_STALENESS_WINDOW,
                 min_interval: float = DEFAULT_MIN_INTERVAL):
        """
        Initialize tempo estimator.

        Args:
            deck: Deck name, used for logging only
            staleness_window: Max seconds between taps before the reference is dropped
            min_interval: Intervals shorter than this are discarded (seconds)
        """
        self.deck = deck
        self.staleness_window = staleness_window
        self.min_interval = min_interval

        self.last_edge_time: Optional[float] = None
        self.bpm: float = 0.0

    def on_sync_edge(self, now: float) -> float:
        """
        Register a sync button press.

        Args:
            now: Time of the press (seconds)

        Returns:
            Current BPM (updated if the interval was valid)
        """
        if self.last_edge_time is not None:
            interval = now - self.last_edge_time
            if self.min_interval <= interval <= self.staleness_window:
                self.bpm = 60.0 / interval
                logger.debug("%s tempo: %.2f BPM (interval %.3fs)", self.deck, self.bpm, interval)
            else:
                logger.debug("%s tempo: ignoring interval %.3fs", self.deck, interval)

        self.last_edge_time = now
        return self.bpm

    def sweep(self, now: float):
        """Drop the reference edge if it is older than the staleness window."""
        if self.last_edge_time is not None and now - self.last_edge_time > self.staleness_window:
            self.last_edge_time = None

    def reset(self):
        self.last_edge_time = None
        self.bpm = 0.0

    def __repr__(self) -> str:
        return f"TempoEstimator(deck={self.deck!r}, bpm={self.bpm:.2f})"
