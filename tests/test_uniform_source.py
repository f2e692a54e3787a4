import numpy as np
import pytest

from midi_uniforms import UniformSource
from midi_uniforms.midi import ControllerProfile, MIDIUniformSource, ProfileError
from midi_frames import cc, note_off, note_on


def tap(source, channel, note, t):
    source.set_time(t)
    channel.send(note_on(note))
    channel.send(note_off(note))
    return source.get('left_bpm')


def test_is_a_uniform_source(p8):
    assert isinstance(p8, UniformSource)


def test_eq_knob_scenario(p8, channel):
    channel.send(cc(68, 64))
    assert p8.get('left_low') == pytest.approx(64 / 127)
    assert p8.get('left_low') == pytest.approx(0.504, abs=1e-3)


def test_play_button_scenario(p8, channel):
    channel.send(note_on(33, 127))
    assert p8.get('left_play') is True
    channel.send(note_off(33))
    assert p8.get('left_play') is False


def test_note_off_flips_toggled_with_builtin_profile(p8, channel):
    channel.send(note_on(33))
    assert p8.get('toggled.33') is True
    p8.set_time(1.0)
    channel.send(note_off(33))
    assert p8.get('toggled.33') is False
    assert p8.get('toggled_time.33') == 1.0
    assert p8.get('pressed_time.33') == 0.0


def test_p8_note_and_cc_82_are_independent(p8, channel):
    channel.send(cc(82, 127))
    assert p8.get('right_cue') is False
    assert p8.get('right_mid') == pytest.approx(1.0)
    channel.send(note_on(82))
    assert p8.get('right_cue') is True


def test_tap_tempo(p8, channel):
    assert tap(p8, channel, 35, 0.0) == 0.0
    assert tap(p8, channel, 35, 0.5) == pytest.approx(120.0)
    assert tap(p8, channel, 35, 1.0) == pytest.approx(120.0)
    assert p8.get('left_sync') is False
    assert p8.get('right_bpm') == 0.0


def test_tap_tempo_staleness(p8, channel):
    tap(p8, channel, 83, 0.0)
    tap(p8, channel, 83, 0.5)
    assert p8.get('right_bpm') == pytest.approx(120.0)

    p8.set_time(3.0)
    p8.poll()
    assert p8.tempos['right'].last_edge_time is None

    assert p8.get('right_bpm') == pytest.approx(120.0)
    tap(p8, channel, 83, 3.1)
    assert p8.get('right_bpm') != pytest.approx(60 / 2.6)
    assert p8.get('right_bpm') == pytest.approx(120.0)


def test_stale_first_gap_does_not_produce_bpm(p8, channel):
    tap(p8, channel, 35, 0.0)
    assert tap(p8, channel, 35, 3.1) == 0.0
    assert tap(p8, channel, 35, 3.6) == pytest.approx(120.0)


def test_out_of_range_query(generic):
    assert generic.get('pressed.5000') is None
    assert generic.get('value.5000') is None


def test_generic_aggregates(generic, channel):
    channel.send(note_on(60))
    channel.send(cc(7, 100))
    pressed = generic.get('midi.pressed')
    assert pressed[60] and pressed.sum() == 1
    assert generic.get('midi.values')[7] == 100
    assert generic.get('midi.toggled')[60]
    assert generic.get('toggled.60') is True


def test_pressed_time_uses_host_time(generic, channel):
    generic.set_time(42.0, True)
    channel.send(note_on(10))
    assert generic.get('pressed_time.10') == 42.0


def test_fallback_clock_before_host_time(channel, p8_profile):
    source = MIDIUniformSource(p8_profile, channel=channel, clock=lambda: 7.5)
    channel.send(note_on(10))
    assert source.get('pressed_time.10') == 7.5
    source.set_time(1.0)
    assert source.now() == 1.0


def test_provides(p8):
    names = p8.provides()
    assert names[:6] == ['left_low', 'left_mid', 'left_high', 'right_low', 'right_mid', 'right_high']
    assert 'left_bpm' in names and 'right_bpm' in names
    assert 'left_pad_4' in names and 'right_shift' in names
    assert names[-3:] == ['p8.pressed', 'p8.toggled', 'p8.values']
    assert len(names) == 22 + 2 + 3


def test_set_name_changes_aggregates(generic, channel):
    generic.set_name('deck')
    channel.send(note_on(1))
    assert generic.get('deck.pressed')[1]
    assert generic.get('midi.pressed') is None
    assert 'deck.values' in generic.provides()


def test_set_property(p8):
    p8.set_property('debug', True)
    assert p8.reducer.debug_enabled is True
    p8.set_property('gain', 3)
    p8.set_debug(False)
    assert p8.reducer.debug_enabled is False


def test_get_uniforms(p8, channel):
    channel.send(cc(68, 127))
    uniforms = p8.get_uniforms()
    assert set(uniforms) == set(p8.provides())
    assert uniforms['left_low'] == pytest.approx(1.0)
    assert isinstance(uniforms['p8.pressed'], np.ndarray)


def test_update_drains(p8, channel):
    channel.send(note_on(25))
    p8.update(1 / 60)
    assert len(channel) == 0
    assert p8.router.get('left_pad_1') is True


def test_reset(p8, channel):
    tap(p8, channel, 35, 0.0)
    tap(p8, channel, 35, 0.5)
    channel.send(note_on(25))
    p8.poll()
    p8.reset()
    assert p8.get('left_pad_1') is False
    assert p8.get('left_bpm') == 0.0


def test_cleanup_keeps_last_state(p8, channel):
    channel.send(note_on(33))
    p8.poll()
    p8.cleanup()
    channel.send(note_off(33))
    assert channel.closed
    assert p8.get('left_play') is True


def test_default_profile_is_generic(channel):
    source = MIDIUniformSource(channel=channel)
    assert source.name == 'midi'
    assert source.provides() == ['midi.pressed', 'midi.toggled', 'midi.values']


def test_invalid_profile_fails_at_construction():
    with pytest.raises(ProfileError):
        ControllerProfile('bad', table_size=-1)


def test_base_provides_lists_uniform_names():
    class Constant(UniformSource):
        def update(self, dt):
            pass

        def get_uniforms(self):
            return {'iOne': 1.0}

        def cleanup(self):
            pass

    assert Constant().provides() == ['iOne']
