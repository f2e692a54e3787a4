"""
MIDI Uniforms - MIDI controller state as renderer uniforms
==========================================================

Turns live MIDI controller input into named values (pressed/toggled
buttons, knob positions, tap-tempo BPM) that a renderer polls every frame.

Main Classes:
- MIDIUniformSource: UniformSource backed by one MIDI controller profile

Submodules:
- midi_uniforms.midi: Channel, state reducer, tempo, router, drivers
- midi_uniforms.uniform_sources: UniformSource interface
"""

from .uniform_sources import UniformSource
from .midi import MIDIUniformSource, load_builtin_profile, load_midi_config

__all__ = ['UniformSource', 'MIDIUniformSource', 'load_builtin_profile', 'load_midi_config', 'midi']
