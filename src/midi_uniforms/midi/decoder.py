"""
MIDI frame decoding - thin adapter over mido's wire parser.

A frame is one complete MIDI message as delivered by the input port
(status byte followed by its data bytes). Anything mido cannot parse
is dropped here and never reaches the state tables.
"""

import logging
from typing import Optional

import mido

logger = logging.getLogger(__name__)

# Message kinds the reducer acts on
CONTROL_CHANGE = 'control_change'
NOTE_ON = 'note_on'
NOTE_OFF = 'note_off'


def decode(frame: bytes) -> Optional[mido.Message]:
    """
    Decode a raw MIDI frame.

    Args:
        frame: Raw MIDI bytes

    Returns:
        mido.Message, or None if the frame is empty or malformed
    """
    if not frame:
        return None

    # mido raises IndexError on truncated pitchwheel and system common frames
    try:
        return mido.Message.from_bytes(frame)
    except (ValueError, IndexError) as e:
        logger.debug("Dropping undecodable frame %s: %s", bytes(frame).hex(), e)
        return None


def encode(message_type: str, **fields) -> bytes:
    """
    Build the wire bytes for a channel message.

    Args:
        message_type: mido message type ('note_on', 'control_change', ...)
        **fields: Message fields (note, velocity, control, value, channel)

    Returns:
        Raw MIDI bytes
    """
    return bytes(mido.Message(message_type, **fields).bytes())
