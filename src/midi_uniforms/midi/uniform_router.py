"""
Uniform router - resolves uniform names against controller state.

Names resolve in this order:
    1. Fixed aliases from the profile ("left_low") and deck BPMs ("left_bpm")
    2. Indexed names ("pressed.33", "value_68", "p8.toggled.25")
    3. Provider aggregates ("p8.pressed", "p8.values") - whole tables
    4. Anything else resolves to None

The router only reads state; it never mutates the tables.
"""

import re
from typing import Any, Dict, Mapping, Optional, Tuple

from .midi_state import ControllerState
from .tempo import TempoEstimator

# Indexed fields and the aggregate suffix that exposes each full table
INDEXED_FIELDS = ('pressed', 'toggled', 'value', 'raw', 'pressed_time', 'toggled_time')

AGGREGATE_TABLES = {
    'pressed': 'pressed',
    'toggled': 'toggled',
    'values': 'values',
    'pressed_time': 'pressed_at',
    'toggled_time': 'toggled_at',
}

# Advertised by provides(); the timestamp tables are answered but not listed
ADVERTISED_AGGREGATES = ('pressed', 'toggled', 'values')

BPM_SUFFIX = '_bpm'

_INDEXED_RE = re.compile(
    r'^(?:(?P<provider>.+)\.)?(?P<field>pressed_time|toggled_time|pressed|toggled|value|raw)[._](?P<index>[0-9]+)$'
)


def parse_indexed_name(name: str) -> Optional[Tuple[Optional[str], str, int]]:
    """
    Split an indexed uniform name.

    Args:
        name: e.g. 'pressed.33', 'value_68', 'p8.toggled.25'

    Returns:
        (provider or None, field, index) tuple, or None if not an indexed name
    """
    match = _INDEXED_RE.match(name)
    if match is None:
        return None
    return match.group('provider'), match.group('field'), int(match.group('index'))


def read_field(state: ControllerState, field: str, index: int) -> Any:
    """Read one indexed field, or None if the index is out of range."""
    if field == 'pressed':
        return state.is_pressed(index)
    if field == 'toggled':
        return state.is_toggled(index)
    if field == 'value':
        return state.get_normalized(index)
    if field == 'raw':
        return state.get_raw(index)
    if field == 'pressed_time':
        return state.get_pressed_time(index)
    if field == 'toggled_time':
        return state.get_toggled_time(index)
    return None


class UniformRouter:
    """
    Maps uniform names to snapshots of controller and tempo state.
    """

    def __init__(self, name: str, state: ControllerState,
                 aliases: Optional[Mapping[str, Tuple[str, int]]] = None,
                 tempos: Optional[Mapping[str, TempoEstimator]] = None):
        """
        Initialize uniform router.

        Args:
            name: Provider name (prefix for aggregate names)
            state: Controller state to read from
            aliases: Fixed name -> (field, index) mapping
            tempos: Deck name -> tempo estimator
        """
        self.name = name
        self.state = state
        self.aliases: Dict[str, Tuple[str, int]] = dict(aliases or {})
        self.tempos: Dict[str, TempoEstimator] = dict(tempos or {})

    def get(self, uniform_name: str) -> Any:
        """
        Resolve a uniform name.

        Args:
            uniform_name: Name to resolve

        Returns:
            bool, int, float or numpy array copy; None if the name is unknown
            or its index is out of range
        """
        if not isinstance(uniform_name, str):
            return None

        alias = self.aliases.get(uniform_name)
        if alias is not None:
            return read_field(self.state, *alias)

        if uniform_name.endswith(BPM_SUFFIX):
            tempo = self.tempos.get(uniform_name[:-len(BPM_SUFFIX)])
            if tempo is not None:
                return float(tempo.bpm)

        indexed = parse_indexed_name(uniform_name)
        if indexed is not None:
            provider, field, index = indexed
            if provider is None or provider == self.name:
                return read_field(self.state, field, index)
            return None

        prefix = self.name + '.'
        if uniform_name.startswith(prefix):
            table = AGGREGATE_TABLES.get(uniform_name[len(prefix):])
            if table is not None:
                return getattr(self.state, table).copy()

        return None

    def names(self) -> list:
        """All names this router advertises, fixed names first."""
        names = list(self.aliases)
        names.extend(f"{deck}{BPM_SUFFIX}" for deck in self.tempos)
        names.extend(f"{self.name}.{suffix}" for suffix in ADVERTISED_AGGREGATES)
        return names
