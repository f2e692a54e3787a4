"""
MIDI controller input for uniform-driven renderers.

Raw MIDI frames arrive on a background thread, are buffered in a
MessageChannel, and are folded into per-note / per-CC state each time the
host polls. The host reads that state back through named uniforms.
"""

from .channel import MessageChannel
from .config_loader import (
    ControllerProfile,
    ProfileError,
    UniformAlias,
    load_builtin_profile,
    load_midi_config,
    load_profile,
    resolve_profile,
)
from .keyboard_driver import MIDIKeyboardDriver
from .midi_state import ControllerState
from .reducer import StateReducer
from .tempo import TempoEstimator
from .uniform_router import UniformRouter
from .uniform_source import MIDIUniformSource
from .usb_driver import DeviceNotFoundError, USBMIDIDriver

__all__ = [
    'MessageChannel',
    'ControllerProfile',
    'ProfileError',
    'UniformAlias',
    'load_builtin_profile',
    'load_midi_config',
    'load_profile',
    'resolve_profile',
    'MIDIKeyboardDriver',
    'ControllerState',
    'StateReducer',
    'TempoEstimator',
    'UniformRouter',
    'MIDIUniformSource',
    'DeviceNotFoundError',
    'USBMIDIDriver',
]
