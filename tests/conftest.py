"""Shared fixtures: injected channels and sources, no MIDI hardware needed."""

import pytest

from midi_uniforms.midi import MIDIUniformSource, MessageChannel, load_builtin_profile


@pytest.fixture()
def channel() -> MessageChannel:
    return MessageChannel()


@pytest.fixture()
def p8_profile():
    return load_builtin_profile('dj_p8')


@pytest.fixture()
def p8(p8_profile, channel) -> MIDIUniformSource:
    source = MIDIUniformSource(p8_profile, channel=channel)
    source.set_time(0.0)
    return source


@pytest.fixture()
def generic(channel) -> MIDIUniformSource:
    source = MIDIUniformSource(load_builtin_profile('generic'), channel=channel)
    source.set_time(0.0)
    return source
