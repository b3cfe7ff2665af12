"""
Radio Module
============

State of a single radio as seen by the medium: identity, position,
channel, power/activity flags and the reported signal strength.

Author: Logistic Loss Medium Team
"""

import numpy as np
from typing import Optional, Sequence

# Channel value meaning "any/none"
ANY_CHANNEL = -1


class Radio:
    """
    A radio attached to a simulated node.

    Attributes:
        node_id: Id of the owning node
        position: Position (x, y, z), shape (3,)
        channel: Logical channel, negative for "any/none"
        on: Radio powered on
        transmitting: Radio currently transmitting
        receiving: Radio currently receiving a packet
        interfered: Ongoing reception is corrupted
        current_signal_strength: Last reported RSSI (dBm)
        base_rssi: Per-radio baseline signal strength, None for the medium default

    Example:
        >>> radio = Radio(1, (0.0, 0.0, 0.0), channel=26)
        >>> radio.interfere_any_reception()
        >>> radio.interfered
        True
    """

    def __init__(
        self,
        node_id: int,
        position: Sequence[float] = (0.0, 0.0, 0.0),
        channel: int = ANY_CHANNEL,
        on: bool = True,
        base_rssi: Optional[float] = None
    ):
        self.node_id = int(node_id)
        self.position = _as_position(position)
        self.channel = int(channel)
        self.on = on
        self.transmitting = False
        self.receiving = False
        self.interfered = False
        self.current_signal_strength = 0.0
        self.base_rssi = base_rssi

    def distance_to(self, other: "Radio") -> float:
        """Euclidean distance to another radio."""
        return float(np.linalg.norm(self.position - other.position))

    def interfere_any_reception(self):
        """Mark any ongoing (or upcoming) reception as corrupted."""
        self.interfered = True

    def signal_reception_start(self):
        self.receiving = True

    def signal_reception_end(self):
        self.receiving = False
        self.interfered = False

    def __repr__(self) -> str:
        x, y, z = self.position
        return f"Radio({self.node_id} @ [{x:.2f},{y:.2f},{z:.2f}] ch={self.channel})"


def channels_mismatch(a: Radio, b: Radio) -> bool:
    """True if both radios are tuned (channel >= 0) to different channels."""
    return a.channel >= 0 and b.channel >= 0 and a.channel != b.channel


def _as_position(position: Sequence[float]) -> np.ndarray:
    pos = np.zeros(3, dtype=np.float64)
    values = np.asarray(position, dtype=np.float64).ravel()
    pos[:min(3, values.size)] = values[:3]
    return pos
