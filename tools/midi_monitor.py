#!/usr/bin/env python3
"""
MIDI Monitor - watch the uniforms a controller profile produces.

Usage:
    python tools/midi_monitor.py --list
    python tools/midi_monitor.py --profile dj_p8
    python tools/midi_monitor.py --profile midi_config.yml --verbose

Opens the profile's device and prints every uniform whose value changes,
so you can check knob, pad and tap-tempo mappings live.
"""

import argparse
import logging
import sys
import time

import numpy as np

from midi_uniforms.midi import (
    DeviceNotFoundError,
    MIDIUniformSource,
    ProfileError,
    USBMIDIDriver,
    resolve_profile,
)


def _format(value) -> str:
    if isinstance(value, np.ndarray):
        active = np.flatnonzero(value).tolist()
        return f"[{len(active)} active: {active[:16]}{'...' if len(active) > 16 else ''}]"
    if isinstance(value, float):
        return f"{value:.3f}"
    return str(value)


def _changed(old, new) -> bool:
    if isinstance(new, np.ndarray):
        return old is None or not np.array_equal(old, new)
    return old != new


def main():
    """Run MIDI monitor."""
    parser = argparse.ArgumentParser(description="Monitor MIDI controller uniforms")
    parser.add_argument("--profile", type=str, default="generic",
                        help="Built-in profile name or path to a YAML profile")
    parser.add_argument("--list", action="store_true", help="List MIDI input ports and exit")
    parser.add_argument("--rate", type=float, default=60.0, help="Poll rate in Hz")
    parser.add_argument("--verbose", action="store_true", help="Trace every MIDI message")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.list:
        ports = USBMIDIDriver.list_devices()
        if not ports:
            print("No MIDI devices found!")
            return 1
        print(f"Found {len(ports)} MIDI device(s):")
        for i, port in enumerate(ports):
            print(f"  {i}: {port}")
        return 0

    try:
        profile = resolve_profile(args.profile)
        source = MIDIUniformSource(profile)
    except (ProfileError, DeviceNotFoundError) as e:
        print(f"Error: {e}")
        return 1

    source.set_debug(args.verbose)

    print("=" * 60)
    print(f"Monitoring '{profile.name}' on {source.driver.connected_device}")
    print(f"Uniforms: {', '.join(source.provides())}")
    print("Press Ctrl-C to exit")
    print("=" * 60)

    last = {}
    start = time.monotonic()
    try:
        while True:
            source.set_time(time.monotonic() - start)
            for name, value in source.get_uniforms().items():
                if _changed(last.get(name), value):
                    print(f"{name:24s} = {_format(value)}")
                    last[name] = value
            time.sleep(1.0 / args.rate)

    except KeyboardInterrupt:
        print("\n" + "-" * 60)
        print("Monitoring stopped")

    finally:
        source.cleanup()

    return 0


if __name__ == '__main__':
    sys.exit(main())
