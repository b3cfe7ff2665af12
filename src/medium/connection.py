"""
Connection Module
=================

Outcome of one transmission attempt: which radios receive the packet and
which are merely interfered.

Author: Logistic Loss Medium Team
"""

from itertools import count
from typing import List, Set

from .radio import Radio

_connection_ids = count()


class Connection:
    """
    A radio connection created per transmission.

    Destinations and interfered radios are kept in insertion order. A radio
    may be amended into the interfered set after creation when a later,
    stronger transmission captures it.

    Attributes:
        source: Transmitting radio
        id: Monotonic connection id
    """

    def __init__(self, source: Radio):
        self.source = source
        self.id = next(_connection_ids)
        self._destinations: List[Radio] = []
        self._interfered: List[Radio] = []

    def add_destination(self, radio: Radio):
        if radio not in self._destinations:
            self._destinations.append(radio)

    def add_interfered(self, radio: Radio):
        if radio not in self._interfered:
            self._interfered.append(radio)

    def get_destinations(self) -> List[Radio]:
        return list(self._destinations)

    def get_interfered(self) -> List[Radio]:
        return list(self._interfered)

    def is_destination(self, radio: Radio) -> bool:
        return radio in self._destinations

    def is_interfered(self, radio: Radio) -> bool:
        return radio in self._interfered

    def get_all_destinations(self) -> Set[Radio]:
        """Destinations and interfered radios together."""
        return set(self._destinations) | set(self._interfered)

    def __repr__(self) -> str:
        return (
            f"Connection(id={self.id}, source={self.source.node_id}, "
            f"destinations={[r.node_id for r in self._destinations]}, "
            f"interfered={[r.node_id for r in self._interfered]})"
        )
