import types

import pytest

from midi_uniforms.midi import MIDIUniformSource, MessageChannel, load_builtin_profile
from midi_uniforms.midi import usb_driver
from midi_uniforms.midi.usb_driver import DeviceNotFoundError, USBMIDIDriver


class FakeMidiIn:
    ports = []
    instances = []

    def __init__(self):
        self.opened = None
        self.callback = None
        self.ignored = None
        self.deleted = False
        FakeMidiIn.instances.append(self)

    def get_ports(self):
        return list(self.ports)

    def ignore_types(self, **kwargs):
        self.ignored = kwargs

    def open_port(self, index):
        self.opened = index

    def set_callback(self, callback):
        self.callback = callback

    def cancel_callback(self):
        self.callback = None

    def close_port(self):
        self.opened = None

    def delete(self):
        self.deleted = True


@pytest.fixture()
def fake_rtmidi(monkeypatch):
    FakeMidiIn.instances = []
    FakeMidiIn.ports = ['Midi Through:Midi Through Port-0 14:0', 'DJ P8:DJ P8 MIDI 1 28:0']
    fake = types.SimpleNamespace(MidiIn=FakeMidiIn, RtMidiError=RuntimeError)
    monkeypatch.setattr(usb_driver, 'rtmidi', fake)
    return FakeMidiIn


@pytest.mark.parametrize('ports, name, expected', [
    (['A', 'B'], 'auto', 0),
    ([], 'auto', None),
    (['Launch Control XL', 'DJ P8 MIDI'], 'p8', 1),
    (['Launch Control XL'], 'P8', None),
])
def test_find_port(ports, name, expected):
    assert USBMIDIDriver.find_port(ports, name) == expected


def test_connects_by_substring(fake_rtmidi, channel):
    driver = USBMIDIDriver('P8', channel)
    midi_in = fake_rtmidi.instances[-1]
    assert midi_in.opened == 1
    assert midi_in.ignored == {'sysex': False, 'timing': False, 'active_sense': False}
    assert driver.is_connected()
    assert driver.connected_device.startswith('DJ P8')


def test_callback_forwards_frames(fake_rtmidi, channel):
    USBMIDIDriver('P8', channel)
    callback = fake_rtmidi.instances[-1].callback
    callback(([0x90, 33, 127], 0.002), None)
    assert channel.try_recv() == bytes([0x90, 33, 127])


def test_missing_device_raises(fake_rtmidi, channel):
    with pytest.raises(DeviceNotFoundError, match='Midi Through'):
        USBMIDIDriver('Launchpad', channel)
    assert fake_rtmidi.instances[-1].deleted


def test_no_ports_raises_even_for_auto(fake_rtmidi, channel):
    fake_rtmidi.ports = []
    with pytest.raises(DeviceNotFoundError):
        USBMIDIDriver('auto', channel)


def test_cleanup_closes_port_and_channel(fake_rtmidi, channel):
    driver = USBMIDIDriver('P8', channel)
    midi_in = fake_rtmidi.instances[-1]
    driver.cleanup()
    assert midi_in.opened is None
    assert midi_in.callback is None
    assert not driver.is_connected()
    assert channel.closed


def test_list_devices(fake_rtmidi):
    assert USBMIDIDriver.list_devices() == fake_rtmidi.ports
    assert fake_rtmidi.instances[-1].deleted


def test_source_opens_device_end_to_end(fake_rtmidi):
    source = MIDIUniformSource(load_builtin_profile('dj_p8'))
    source.set_time(0.0)
    callback = fake_rtmidi.instances[-1].callback
    callback(([0xB0, 68, 127], 0.0), None)
    callback(([0x90, 33, 127], 0.0), None)
    assert source.get('left_low') == pytest.approx(1.0)
    assert source.get('left_play') is True

    source.cleanup()
    assert source.driver.channel.closed
    assert source.get('left_play') is True


def test_source_construction_fails_without_device(fake_rtmidi):
    fake_rtmidi.ports = ['Something Else']
    with pytest.raises(DeviceNotFoundError):
        MIDIUniformSource(load_builtin_profile('dj_p8'))


def test_injected_channel_skips_hardware(fake_rtmidi):
    source = MIDIUniformSource(load_builtin_profile('dj_p8'), channel=MessageChannel())
    assert source.driver is None
    assert fake_rtmidi.instances == []
