"""
State reducer - folds buffered MIDI frames into controller state.
"""

import logging
from typing import Dict, Optional

from .channel import MessageChannel
from .decoder import CONTROL_CHANGE, NOTE_OFF, NOTE_ON, decode
from .midi_state import ControllerState
from .tempo import TempoEstimator

logger = logging.getLogger(__name__)


class StateReducer:
    """
    Drains a MessageChannel and applies each message to ControllerState.

    Runs on the polling thread only. Every frame drained in one call is
    stamped with the same `now`, the host time active at drain time.
    """

    def __init__(self, channel: MessageChannel, state: ControllerState,
                 tempos: Optional[Dict[str, TempoEstimator]] = None,
                 sync_notes: Optional[Dict[int, str]] = None,
                 name: str = 'midi'):
        """
        Initialize state reducer.

        Args:
            channel: Channel fed by the MIDI input thread
            state: Controller state to update
            tempos: Deck name -> tempo estimator
            sync_notes: Note number -> deck name for tap-tempo sync buttons
            name: Provider name (for logging)
        """
        self.channel = channel
        self.state = state
        self.tempos = tempos or {}
        self.sync_notes = sync_notes or {}
        self.name = name
        self.debug_enabled = False
        self._disconnect_logged = False

    def drain_and_apply(self, now: float) -> int:
        """
        Apply every frame currently buffered in the channel.

        Args:
            now: Host time for this poll cycle (seconds)

        Returns:
            Number of frames drained
        """
        for tempo in self.tempos.values():
            tempo.sweep(now)

        count = 0
        while True:
            frame = self.channel.try_recv()
            if frame is None:
                break
            count += 1
            self.apply_frame(frame, now)

        if self.channel.closed and not self._disconnect_logged:
            logger.info("MIDI source for '%s' disconnected, keeping last state", self.name)
            self._disconnect_logged = True

        return count

    def apply_frame(self, frame: bytes, now: float):
        """Decode and apply a single frame. Malformed frames are dropped."""
        message = decode(frame)
        if message is None:
            return

        if message.type == CONTROL_CHANGE:
            self.on_control_change(message.control, message.value)
        elif message.type == NOTE_ON:
            if message.velocity > 0:
                self.on_note_down(message.note, now)
            else:
                self.on_note_up(message.note, now)
        elif message.type == NOTE_OFF:
            self.on_note_up(message.note, now)
        elif self.debug_enabled:
            logger.debug("%s: ignoring %s", self.name, message)

    def on_control_change(self, control: int, value: int):
        stored = self.state.set_value(control, value)
        if self.debug_enabled:
            logger.debug("%s: cc %d = %d%s", self.name, control, value, '' if stored else ' (out of range)')

    def on_note_down(self, note: int, now: float):
        rising = self.state.press(note, now)
        if self.debug_enabled:
            logger.debug("%s: on %d%s", self.name, note, ' (edge)' if rising else '')

        if rising and note in self.sync_notes:
            tempo = self.tempos.get(self.sync_notes[note])
            if tempo is not None:
                tempo.on_sync_edge(now)

    def on_note_up(self, note: int, now: float):
        falling = self.state.release(note, now)
        if self.debug_enabled:
            logger.debug("%s: off %d%s", self.name, note, ' (edge)' if falling else '')
