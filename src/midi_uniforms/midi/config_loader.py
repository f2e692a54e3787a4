"""
MIDI Configuration Loader - loads YAML controller profiles.

A profile describes one controller layout as data: which port to open,
how big the state tables are, which notes act as tap-tempo sync buttons,
and which fixed uniform names alias which indexed uniforms.
"""

from pathlib import Path
from typing import Dict, List, Optional, Union

import yaml

from .midi_state import ControllerState, TOGGLE_EDGE, TOGGLE_MODES
from .tempo import TempoEstimator
from .uniform_router import parse_indexed_name

PROFILES_DIR = Path(__file__).parent / 'profiles'


class ProfileError(ValueError):
    """Raised when a controller profile is missing or invalid."""


class UniformAlias:
    """Single fixed uniform name -> indexed uniform mapping."""

    def __init__(self, name: str, target: str):
        """
        Initialize uniform alias.

        Args:
            name: Fixed uniform name exposed to the host ('left_low')
            target: Indexed uniform it reads ('value.68', 'pressed.33')
        """
        parsed = parse_indexed_name(target)
        if parsed is None or parsed[0] is not None:
            raise ProfileError(
                f"Invalid target '{target}' for uniform '{name}'. "
                f"Expected '<field>.<index>', e.g. 'value.68' or 'pressed.33'."
            )

        self.name = name
        self.target = target
        _, self.field, self.index = parsed

    def __repr__(self):
        return f"UniformAlias({self.name} -> {self.target})"


class ControllerProfile:
    """MIDI controller profile."""

    def __init__(self, name: str, device_name: str = 'auto',
                 aliases: Optional[List[UniformAlias]] = None,
                 decks: Optional[Dict[str, int]] = None,
                 table_size: int = ControllerState.DEFAULT_TABLE_SIZE,
                 toggle_mode: str = TOGGLE_EDGE,
                 staleness_window: float = TempoEstimator.DEFAULT_STALENESS_WINDOW,
                 min_interval: float = TempoEstimator.DEFAULT_MIN_INTERVAL):
        """
        Initialize controller profile.

        Args:
            name: Provider name, prefix of the aggregate uniforms
            device_name: Port name substring to connect to (or "auto")
            aliases: Fixed uniform names
            decks: Deck name -> sync note number
            table_size: Slots per state table
            toggle_mode: 'edge' or 'latch'
            staleness_window: Tap-tempo reference timeout (seconds)
            min_interval: Shortest accepted tap interval (seconds)
        """
        if not name:
            raise ProfileError("Profile name must not be empty")
        if table_size <= 0:
            raise ProfileError(f"table_size must be positive, got {table_size}")
        if toggle_mode not in TOGGLE_MODES:
            raise ProfileError(f"Invalid toggle_mode '{toggle_mode}'. Must be one of {TOGGLE_MODES}.")
        if staleness_window <= 0 or min_interval < 0:
            raise ProfileError("Tempo windows must be positive")

        self.name = name
        self.device_name = device_name
        self.aliases = aliases or []
        self.decks = decks or {}
        self.table_size = table_size
        self.toggle_mode = toggle_mode
        self.staleness_window = staleness_window
        self.min_interval = min_interval

        for alias in self.aliases:
            if alias.index >= table_size:
                raise ProfileError(f"Uniform '{alias.name}' targets index {alias.index} outside the table")
        for deck, note in self.decks.items():
            if not 0 <= note < table_size:
                raise ProfileError(f"Sync note {note} for deck '{deck}' is outside the table")

    def alias_table(self) -> Dict[str, tuple]:
        """Fixed name -> (field, index) mapping for the router."""
        return {alias.name: (alias.field, alias.index) for alias in self.aliases}

    def sync_notes(self) -> Dict[int, str]:
        """Sync note number -> deck name."""
        return {note: deck for deck, note in self.decks.items()}

    def make_state(self) -> ControllerState:
        return ControllerState(self.table_size, self.toggle_mode)

    def make_tempos(self) -> Dict[str, TempoEstimator]:
        return {
            deck: TempoEstimator(deck, self.staleness_window, self.min_interval)
            for deck in self.decks
        }

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'ControllerProfile':
        """
        Create ControllerProfile from dictionary (loaded from YAML).

        Args:
            config_dict: Configuration dictionary

        Returns:
            ControllerProfile instance
        """
        if not isinstance(config_dict, dict):
            raise ProfileError(f"Profile must be a mapping, got {type(config_dict).__name__}")

        uniforms = config_dict.get('uniforms') or {}
        if not isinstance(uniforms, dict):
            raise ProfileError("'uniforms' must map names to targets")
        aliases = [UniformAlias(name, str(target)) for name, target in uniforms.items()]

        try:
            tempo = config_dict.get('tempo') or {}
            decks = tempo.get('decks') or {}
            return cls(
                name=str(config_dict.get('name', 'midi')),
                device_name=str(config_dict.get('device_name', 'auto')),
                aliases=aliases,
                decks={str(deck): int(note) for deck, note in decks.items()},
                table_size=int(config_dict.get('table_size', ControllerState.DEFAULT_TABLE_SIZE)),
                toggle_mode=str(config_dict.get('toggle_mode', TOGGLE_EDGE)),
                staleness_window=float(tempo.get('staleness_window', TempoEstimator.DEFAULT_STALENESS_WINDOW)),
                min_interval=float(tempo.get('min_interval', TempoEstimator.DEFAULT_MIN_INTERVAL)),
            )
        except ProfileError:
            raise
        except (TypeError, ValueError, AttributeError) as e:
            raise ProfileError(f"Invalid profile: {e}") from e

    def __repr__(self):
        return f"ControllerProfile({self.name}, device={self.device_name!r}, aliases={len(self.aliases)})"


def load_profile(config_path: Union[str, Path]) -> ControllerProfile:
    """
    Load a controller profile from a YAML file.

    Args:
        config_path: Path to the profile

    Returns:
        ControllerProfile instance

    Raises:
        ProfileError: If the file cannot be read or parsed
    """
    config_path = Path(config_path)
    try:
        with open(config_path, 'r') as f:
            config_dict = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ProfileError(f"Failed to load MIDI profile from {config_path}: {e}") from e

    return ControllerProfile.from_dict(config_dict)


def load_builtin_profile(name: str) -> ControllerProfile:
    """
    Load one of the profiles shipped with the package.

    Args:
        name: Profile name ('generic', 'dj_p8')
    """
    path = PROFILES_DIR / f'{name}.yml'
    if not path.exists():
        available = sorted(p.stem for p in PROFILES_DIR.glob('*.yml'))
        raise ProfileError(f"Unknown built-in profile '{name}'. Available: {', '.join(available)}")
    return load_profile(path)


def load_midi_config(config_path: Optional[Path] = None) -> Optional[ControllerProfile]:
    """
    Load the user's MIDI profile.

    Args:
        config_path: Path to config file (default: midi_config.yml in project root)

    Returns:
        ControllerProfile instance, or None if the config doesn't exist
    """
    if config_path is None:
        # Look for config in project root
        config_path = Path(__file__).parent.parent.parent.parent / 'midi_config.yml'

    if not Path(config_path).exists():
        return None

    return load_profile(config_path)


def resolve_profile(name_or_path: Union[str, Path]) -> ControllerProfile:
    """Load a profile given either a built-in name or a file path."""
    path = Path(name_or_path)
    if path.suffix in ('.yml', '.yaml') or path.exists():
        return load_profile(path)
    return load_builtin_profile(str(name_or_path))
