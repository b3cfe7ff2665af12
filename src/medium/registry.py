"""
Radio Registry Module
=====================

Tracks the participating radios in registration order.

Every membership or position change bumps a revision counter. Consumers
that cache derived data (the reachability graph) compare the revision they
computed against with the current one, so radios never hold references to
their observers.

Author: Logistic Loss Medium Team
"""

import logging
import numpy as np
from typing import Callable, Dict, List, Optional, Sequence

from .radio import Radio

logger = logging.getLogger(__name__)

MembershipListener = Callable[[str, int], None]


class RadioRegistry:
    """
    Ordered set of registered radios, keyed by node id.

    Example:
        >>> registry = RadioRegistry()
        >>> registry.register_radio(Radio(1, (0, 0, 0)))
        >>> registry.set_position(1, 5.0, 0.0)
        >>> registry.revision
        2
    """

    def __init__(self):
        self._radios: Dict[int, Radio] = {}
        self._listeners: List[MembershipListener] = []
        self.revision = 0

    # =========================================================================
    # MEMBERSHIP
    # =========================================================================

    def register_radio(self, radio: Radio):
        """
        Add a radio.

        Raises:
            ValueError: If a radio with the same node id is registered
        """
        if radio.node_id in self._radios:
            raise ValueError(f"Radio {radio.node_id} is already registered")
        self._radios[radio.node_id] = radio
        self.revision += 1
        self._notify("added", radio.node_id)

    def unregister_radio(self, node_id: int) -> Optional[Radio]:
        """Remove a radio. Returns the removed radio, or None if unknown."""
        radio = self._radios.pop(node_id, None)
        if radio is None:
            return None
        self.revision += 1
        self._notify("removed", node_id)
        return radio

    def add_membership_listener(self, listener: MembershipListener):
        """Register a callback invoked as listener(event, node_id) on add/remove."""
        self._listeners.append(listener)

    def remove_membership_listener(self, listener: MembershipListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, event: str, node_id: int):
        for listener in list(self._listeners):
            listener(event, node_id)

    # =========================================================================
    # LOOKUP
    # =========================================================================

    def get_radio(self, node_id: int) -> Optional[Radio]:
        return self._radios.get(node_id)

    def __contains__(self, node_id: int) -> bool:
        return node_id in self._radios

    def __len__(self) -> int:
        return len(self._radios)

    def radios(self) -> List[Radio]:
        """All radios in registration order."""
        return list(self._radios.values())

    def index_of(self, node_id: int) -> int:
        """Registration index of a node, -1 if unknown."""
        for index, known_id in enumerate(self._radios):
            if known_id == node_id:
                return index
        return -1

    def radio_at(self, index: int) -> Optional[Radio]:
        """Radio at a registration index, None if out of range."""
        if index < 0 or index >= len(self._radios):
            return None
        return list(self._radios.values())[index]

    # =========================================================================
    # POSITION
    # =========================================================================

    def notify_position_changed(self, node_id: int):
        """Record that a radio moved."""
        if node_id not in self._radios:
            logger.debug("Position change for unknown radio %s ignored", node_id)
            return
        self.revision += 1

    def set_position(self, node_id: int, x: float, y: float, z: Optional[float] = None) -> bool:
        """
        Move a radio and notify. Keeps z unchanged when not given.

        Returns:
            False if the radio is not registered
        """
        radio = self._radios.get(node_id)
        if radio is None:
            logger.debug("Cannot move unknown radio %s", node_id)
            return False
        radio.position[0] = x
        radio.position[1] = y
        if z is not None:
            radio.position[2] = z
        self.notify_position_changed(node_id)
        return True

    def positions(self, node_ids: Sequence[int]) -> np.ndarray:
        """Stack positions of the given radios into an (N, 3) array."""
        if not node_ids:
            return np.zeros((0, 3))
        return np.vstack([self._radios[i].position for i in node_ids])
