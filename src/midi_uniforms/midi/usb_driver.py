"""
USB MIDI Driver - reads MIDI messages from physical USB MIDI controllers.

Requires python-rtmidi: pip install python-rtmidi
"""

import logging
from typing import List

import rtmidi

from .channel import MessageChannel

logger = logging.getLogger(__name__)


class DeviceNotFoundError(Exception):
    """Raised when no MIDI input port matches the requested device name."""


class USBMIDIDriver:
    """
    Forwards raw MIDI frames from a USB MIDI controller into a MessageChannel.

    rtmidi invokes the callback on its own thread; the callback only pushes
    bytes into the channel and never touches controller state.
    """

    def __init__(self, device_name: str, channel: MessageChannel):
        """
        Initialize USB MIDI driver and open the matching port.

        Args:
            device_name: Substring of the port name to connect to (or "auto")
            channel: Channel the received frames are sent to

        Raises:
            DeviceNotFoundError: If no matching input port exists
        """
        self.device_name = device_name
        self.channel = channel
        self.midi_in = None
        self.connected_device = None

        self._connect()

    def _connect(self):
        """Connect to MIDI device based on device name."""
        midi_in = rtmidi.MidiIn()
        available_ports = midi_in.get_ports()

        port_index = self.find_port(available_ports, self.device_name)
        if port_index is None:
            midi_in.delete()
            logger.error("MIDI device '%s' not found", self.device_name)
            logger.info("Available devices: %s", ', '.join(available_ports) or 'none')
            raise DeviceNotFoundError(
                f'Could not find MIDI device with port name matching "{self.device_name}". '
                f"Available: {available_ports}"
            )

        # Receive everything, including sysex and clock
        midi_in.ignore_types(sysex=False, timing=False, active_sense=False)
        midi_in.open_port(port_index)
        midi_in.set_callback(self._midi_callback)

        self.midi_in = midi_in
        self.connected_device = available_ports[port_index]
        logger.info("USB MIDI connected: %s", self.connected_device)

    @staticmethod
    def find_port(available_ports: List[str], device_name: str):
        """
        Find the first port whose name contains device_name (case-insensitive).

        Args:
            available_ports: Port names reported by rtmidi
            device_name: Substring to look for, or "auto" for the first port

        Returns:
            Port index, or None if nothing matches
        """
        if not available_ports:
            return None

        if device_name == 'auto':
            return 0

        for i, port_name in enumerate(available_ports):
            if device_name.lower() in port_name.lower():
                return i
        return None

    def _midi_callback(self, message, data):
        """
        Callback for incoming MIDI messages.

        Args:
            message: Tuple of (message_data, delta_time)
            data: User data (unused)
        """
        midi_message, _delta_time = message
        self.channel.send(midi_message)

    @staticmethod
    def list_devices() -> List[str]:
        """
        List available MIDI input devices.

        Returns:
            List of device name strings
        """
        midi_in = rtmidi.MidiIn()
        try:
            return midi_in.get_ports()
        finally:
            midi_in.delete()

    def cleanup(self):
        """Close MIDI connection and the channel behind it."""
        if self.midi_in is not None:
            try:
                self.midi_in.cancel_callback()
                self.midi_in.close_port()
                logger.info("USB MIDI disconnected: %s", self.connected_device)
            except rtmidi.RtMidiError as e:
                logger.warning("Error closing MIDI port: %s", e)
            finally:
                self.midi_in = None
                self.connected_device = None
        self.channel.close()

    def is_connected(self) -> bool:
        """Check if MIDI device is connected."""
        return self.midi_in is not None and self.connected_device is not None
