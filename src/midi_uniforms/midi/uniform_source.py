"""
MIDI Uniform Source - exposes controller state to the host as uniforms.

Implements the UniformSource interface, making MIDI controllers available
to the renderer just like keyboard, audio, etc.
"""

import logging
import time
from typing import Any, Callable, Dict, List, Optional

from midi_uniforms.uniform_sources import UniformSource
from .channel import MessageChannel
from .config_loader import ControllerProfile, load_builtin_profile
from .reducer import StateReducer
from .uniform_router import UniformRouter
from .usb_driver import USBMIDIDriver

logger = logging.getLogger(__name__)


class MIDIUniformSource(UniformSource):
    """
    Provides uniforms from one MIDI controller.

    Every query first drains the frames buffered since the last poll, then
    resolves the name against the updated state. Names come from the profile:

    - Fixed aliases, e.g. left_low (float), left_play (bool)
    - Deck tempos, e.g. left_bpm (float)
    - Indexed names: pressed.<n>, toggled.<n>, value.<n>, raw.<n>,
      pressed_time.<n>, toggled_time.<n>
    - Whole tables: <name>.pressed, <name>.toggled, <name>.values

    Example host usage:
        source = MIDIUniformSource(load_builtin_profile('dj_p8'))
        source.set_time(frame_time, False)
        bpm = source.get('left_bpm')
    """

    def __init__(self, profile: Optional[ControllerProfile] = None,
                 channel: Optional[MessageChannel] = None,
                 clock: Callable[[], float] = time.monotonic):
        """
        Initialize MIDI uniform source.

        Args:
            profile: Controller profile (default: built-in 'generic')
            channel: Pre-built message channel; when omitted a USB MIDI
                     port matching profile.device_name is opened
            clock: Fallback time source until the host calls set_time()

        Raises:
            DeviceNotFoundError: If no channel is given and the device is missing
        """
        if profile is None:
            profile = load_builtin_profile('generic')

        self.profile = profile
        self.name = profile.name
        self.clock = clock
        self.host_time: Optional[float] = None
        self.driver = None

        if channel is None:
            channel = MessageChannel()
            self.driver = USBMIDIDriver(profile.device_name, channel)
        self.channel = channel

        self.state = profile.make_state()
        self.tempos = profile.make_tempos()
        self.reducer = StateReducer(
            channel, self.state, self.tempos, profile.sync_notes(), name=self.name
        )
        self.router = UniformRouter(self.name, self.state, profile.alias_table(), self.tempos)

    def now(self) -> float:
        """Current time: the last host-pushed time, or the fallback clock."""
        if self.host_time is not None:
            return self.host_time
        return self.clock()

    def poll(self) -> int:
        """
        Drain buffered MIDI frames into state.

        Returns:
            Number of frames drained
        """
        return self.reducer.drain_and_apply(self.now())

    def provides(self) -> List[str]:
        """Names this source can answer."""
        return self.router.names()

    def get(self, uniform_name: str) -> Any:
        """
        Poll, then resolve a single uniform.

        Args:
            uniform_name: Uniform name

        Returns:
            Uniform value, or None if unknown / out of range
        """
        self.poll()
        return self.router.get(uniform_name)

    def set_name(self, name: str):
        """Rename the provider (changes the aggregate uniform names)."""
        self.name = name
        self.router.name = name
        self.reducer.name = name

    def set_time(self, current_time: float, sync: bool = False):
        """
        Push the host clock.

        Args:
            current_time: Host time in seconds
            sync: Host sync flag (unused, no transport sync)
        """
        self.host_time = float(current_time)

    def set_property(self, key: str, value: Any):
        """Set a provider property. Only 'debug' has an effect."""
        if key == 'debug':
            self.set_debug(bool(value))
        else:
            logger.debug("%s: ignoring property %s=%r", self.name, key, value)

    def set_debug(self, debug: bool):
        """Enable or disable per-message trace logging."""
        self.reducer.debug_enabled = debug

    def update(self, dt: float):
        """
        Update MIDI uniforms.

        Args:
            dt: Delta time (unused, timestamps come from now())
        """
        self.poll()

    def get_uniforms(self) -> Dict[str, Any]:
        """
        Get every provided uniform.

        Returns:
            Dictionary of uniform name -> value
        """
        self.poll()
        return {name: self.router.get(name) for name in self.provides()}

    def cleanup(self):
        """Close the USB MIDI port (if any) and the channel."""
        if self.driver is not None:
            self.driver.cleanup()
        else:
            self.channel.close()

    def reset(self):
        """Reset controller state and tempo estimates."""
        self.state.reset()
        for tempo in self.tempos.values():
            tempo.reset()

    def __repr__(self) -> str:
        return f"MIDIUniformSource(name={self.name!r}, profile={self.profile.name!r})"
