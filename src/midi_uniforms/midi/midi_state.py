"""
Core MIDI state - per-index edge states and continuous values.

This is the single source of truth for everything a controller has sent.
Tables are indexed directly by MIDI note / control number and have a fixed
capacity; indices outside the table are ignored, never grown into.
"""

from typing import Optional

import numpy as np

TOGGLE_LATCH = 'latch'
TOGGLE_EDGE = 'edge'
TOGGLE_MODES = (TOGGLE_LATCH, TOGGLE_EDGE)


class ControllerState:
    """
    Holds pressed/toggled edge state and CC values for one controller.

    Notes drive the edge tables (pressed, toggled, pressed_at, toggled_at),
    control changes drive the value table. Only the polling thread touches
    an instance, so no locking is done here.
    """

    # Standard MIDI data byte range
    MIN_VALUE = 0
    MAX_VALUE = 127

    DEFAULT_TABLE_SIZE = 1024

    def __init__(self, table_size: int = DEFAULT_TABLE_SIZE, toggle_mode: str = TOGGLE_EDGE):
        """
        Initialize controller state.

        Args:
            table_size: Number of slots per table (default: 1024)
            toggle_mode: 'edge' flips toggled on both the press and the release,
                         'latch' flips it once per cycle, on the press
        """
        if table_size <= 0:
            raise ValueError(f"table_size must be positive, got {table_size}")
        if toggle_mode not in TOGGLE_MODES:
            raise ValueError(f"Invalid toggle_mode '{toggle_mode}'. Must be one of {TOGGLE_MODES}.")

        self.table_size = table_size
        self.toggle_mode = toggle_mode

        self.pressed = np.zeros(table_size, dtype=bool)
        self.toggled = np.zeros(table_size, dtype=bool)
        self.pressed_at = np.zeros(table_size, dtype=np.float64)
        self.toggled_at = np.zeros(table_size, dtype=np.float64)
        self.values = np.zeros(table_size, dtype=np.uint8)

    def in_bounds(self, index: int) -> bool:
        return 0 <= index < self.table_size

    def set_value(self, index: int, value: int) -> bool:
        """
        Store a control change value (last write wins).

        Args:
            index: Control number
            value: Control value (clamped to 0-127)

        Returns:
            True if stored, False if index is out of range
        """
        if not self.in_bounds(index):
            return False

        self.values[index] = max(self.MIN_VALUE, min(self.MAX_VALUE, value))
        return True

    def press(self, index: int, now: float) -> bool:
        """
        Mark a note as held.

        Args:
            index: Note number
            now: Host time of the current drain

        Returns:
            True on a rising edge, False if already held or out of range
        """
        if not self.in_bounds(index) or self.pressed[index]:
            return False

        self.pressed[index] = True
        self.pressed_at[index] = now
        self._flip(index, now)
        return True

    def release(self, index: int, now: float) -> bool:
        """
        Mark a note as released.

        Args:
            index: Note number
            now: Host time of the current drain

        Returns:
            True on a falling edge, False if not held or out of range
        """
        if not self.in_bounds(index) or not self.pressed[index]:
            return False

        self.pressed[index] = False
        if self.toggle_mode == TOGGLE_EDGE:
            self._flip(index, now)
        return True

    def _flip(self, index: int, now: float):
        self.toggled[index] = not self.toggled[index]
        self.toggled_at[index] = now

    def is_pressed(self, index: int) -> Optional[bool]:
        if not self.in_bounds(index):
            return None
        return bool(self.pressed[index])

    def is_toggled(self, index: int) -> Optional[bool]:
        if not self.in_bounds(index):
            return None
        return bool(self.toggled[index])

    def get_raw(self, index: int) -> Optional[int]:
        """Get the raw CC byte (0-127), or None if out of range."""
        if not self.in_bounds(index):
            return None
        return int(self.values[index])

    def get_normalized(self, index: int) -> Optional[float]:
        """
        Get CC value normalized to 0.0-1.0 range.

        Args:
            index: Control number

        Returns:
            Normalized value, or None if out of range
        """
        raw = self.get_raw(index)
        if raw is None:
            return None
        return raw / float(self.MAX_VALUE)

    def get_pressed_time(self, index: int) -> Optional[float]:
        if not self.in_bounds(index):
            return None
        return float(self.pressed_at[index])

    def get_toggled_time(self, index: int) -> Optional[float]:
        if not self.in_bounds(index):
            return None
        return float(self.toggled_at[index])

    def reset(self):
        """Clear every table back to its initial state."""
        self.pressed[:] = False
        self.toggled[:] = False
        self.pressed_at[:] = 0.0
        self.toggled_at[:] = 0.0
        self.values[:] = 0

    def __repr__(self) -> str:
        return (
            f"ControllerState(size={self.table_size}, mode={self.toggle_mode}, "
            f"held={np.flatnonzero(self.pressed).tolist()}, "
            f"toggled={np.flatnonzero(self.toggled).tolist()})"
        )
