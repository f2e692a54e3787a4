"""
Uniform source interface for the host renderer.

The host ticks every source once per frame and reads back named values,
the same way it reads shader uniforms. MIDI controllers are one kind of
source; the host treats them no differently from camera or audio input.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List


class UniformSource(ABC):
    """
    Abstract base class for per-frame uniform providers.

    Sources own their state; the host only reads it through the
    uniform names a source provides.
    """

    @abstractmethod
    def update(self, dt: float):
        """
        Advance the source by one host frame.

        Args:
            dt: Delta time since last update (seconds)
        """
        pass

    @abstractmethod
    def get_uniforms(self) -> Dict[str, Any]:
        """
        Get current uniform values.

        Returns:
            Dictionary mapping uniform name -> value
            Values can be: bool, int, float, numpy arrays
        """
        pass

    @abstractmethod
    def cleanup(self):
        """Release ports, devices and threads."""
        pass

    def provides(self) -> List[str]:
        """Names of the uniforms this source answers."""
        return list(self.get_uniforms())

    def reset(self):
        """Reset source to initial state (optional)."""
        pass
