"""
MIDI Keyboard Driver - maps laptop keys to MIDI messages.

Allows driving a MIDIUniformSource with the keyboard when no USB MIDI
device is available. Keys are turned into real MIDI frames and pushed into
the same channel a hardware port would feed.
"""

from typing import Dict, Optional, Set

from .channel import MessageChannel
from .decoder import encode


class MIDIKeyboardDriver:
    """
    Drives MIDI notes and CCs from keyboard input.

    Default key mappings:
    - 1-8: notes 36-43 (pads, held while the key is down)
    - space: note 35 (tap tempo on the dj_p8 left deck)
    - n/m: CC 68 down/up
    - ,/. : CC 70 down/up
    - [/] : CC 72 down/up
    """

    NOTE_KEYS = {
        '1': 36, '2': 37, '3': 38, '4': 39,
        '5': 40, '6': 41, '7': 42, '8': 43,
        'space': 35,
    }

    # key -> (cc_num, direction)
    CC_KEYS = {
        'n': (68, -1),
        'm': (68, +1),
        ',': (70, -1),
        '.': (70, +1),
        '[': (72, -1),
        ']': (72, +1),
    }

    def __init__(self, channel: MessageChannel,
                 note_keys: Optional[Dict[str, int]] = None,
                 cc_keys: Optional[Dict[str, tuple]] = None,
                 step_size: int = 5, midi_channel: int = 0):
        """
        Initialize MIDI keyboard driver.

        Args:
            channel: Message channel to send frames to
            note_keys: key -> note number (default: NOTE_KEYS)
            cc_keys: key -> (cc_num, direction) (default: CC_KEYS)
            step_size: How much to change a CC value per key press (default: 5)
            midi_channel: MIDI channel of the generated messages (0-15)
        """
        self.channel = channel
        self.note_keys = dict(self.NOTE_KEYS if note_keys is None else note_keys)
        self.cc_keys = dict(self.CC_KEYS if cc_keys is None else cc_keys)
        self.step_size = step_size
        self.midi_channel = midi_channel

        self.cc_values: Dict[int, int] = {}
        self.held: Set[str] = set()

    def handle_key_down(self, key: str) -> bool:
        """
        Send note on for a note key. Key repeat while held sends nothing.

        Returns:
            True if key is a note key, False otherwise
        """
        note = self.note_keys.get(key)
        if note is None:
            return False

        if key not in self.held:
            self.held.add(key)
            self.channel.send(encode('note_on', note=note, velocity=127, channel=self.midi_channel))
        return True

    def handle_key_up(self, key: str) -> bool:
        """
        Send note off for a held note key.

        Returns:
            True if key is a note key, False otherwise
        """
        note = self.note_keys.get(key)
        if note is None:
            return False

        if key in self.held:
            self.held.discard(key)
            self.channel.send(encode('note_off', note=note, velocity=0, channel=self.midi_channel))
        return True

    def handle_key(self, key: str) -> bool:
        """
        Nudge the CC bound to key and send the new value.

        Args:
            key: Key name (e.g., 'n', 'm', ',', etc.)

        Returns:
            True if key was handled (is a CC key), False otherwise
        """
        if key not in self.cc_keys:
            return False

        cc_num, direction = self.cc_keys[key]
        current = self.cc_values.get(cc_num, 0)
        value = max(0, min(127, current + direction * self.step_size))
        self.cc_values[cc_num] = value
        self.channel.send(encode('control_change', control=cc_num, value=value, channel=self.midi_channel))
        return True

    def release_all(self):
        """Send note off for every held key."""
        for key in list(self.held):
            self.handle_key_up(key)

    def get_key_binding_display(self) -> str:
        """
        Get formatted string showing key bindings.

        Returns:
            Human-readable key binding display
        """
        lines = ["MIDI Keyboard Controls:"]
        for key, note in self.note_keys.items():
            lines.append(f"  {key}: note {note}")
        for key, (cc_num, direction) in self.cc_keys.items():
            lines.append(f"  {key}: CC{cc_num} {'up' if direction > 0 else 'down'}")
        return "\n".join(lines)
