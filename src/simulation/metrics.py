"""
Transmission Metrics Module
===========================

Tracks the outcome of every transmission once it has ended.

A destination only counts as a delivery if no later, stronger transmission
captured the receiver before the airtime elapsed, so outcomes are final
at retirement, not at resolution.

Features:
    - Totals of transmissions, deliveries and interferences
    - Rolling delivery ratio per connection and per link
    - JSON summary

Author: Logistic Loss Medium Team
"""

import json
from collections import deque, defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Tuple, Any

import numpy as np

from medium.connection import Connection


@dataclass
class RollingStats:
    """Windowed mean of outcomes in [0, 1], plus lifetime totals."""

    window_size: int = 100
    count: int = 0
    total: float = 0.0
    _values: deque = field(init=False, repr=False)

    def __post_init__(self):
        self._values = deque(maxlen=self.window_size)

    def add(self, value: float):
        self._values.append(value)
        self.count += 1
        self.total += value

    @property
    def mean(self) -> float:
        """Mean over the window."""
        if len(self._values) == 0:
            return 0.0
        return float(np.mean(self._values))

    @property
    def lifetime_mean(self) -> float:
        return self.total / self.count if self.count else 0.0

    def __len__(self) -> int:
        return len(self._values)


class TransmissionStats:
    """
    Outcome counters for a simulation run.

    Example:
        >>> stats = TransmissionStats()
        >>> stats.record(connection)            # transmission started
        >>> stats.record_retired(connection)    # airtime elapsed
        >>> stats.summary()["transmissions"]
        1
    """

    def __init__(self, window_size: int = 100):
        self.window_size = window_size
        self.transmissions = 0
        self.deliveries = 0
        self.interferences = 0
        self.delivery_ratio = RollingStats(window_size)
        # (source, dest) -> delivered (1.0) / interfered (0.0) outcomes
        self.links: Dict[Tuple[int, int], RollingStats] = defaultdict(
            lambda: RollingStats(self.window_size)
        )

    def record(self, connection: Connection):
        """Count a transmission that has just been resolved."""
        self.transmissions += 1

    def record_retired(self, connection: Connection):
        """
        Count the final outcome of an ended transmission.

        Destinations captured after resolution count as interferences.
        """
        src = connection.source.node_id
        delivered = [
            r for r in connection.get_destinations() if not connection.is_interfered(r)
        ]
        interfered = connection.get_interfered()

        self.deliveries += len(delivered)
        self.interferences += len(interfered)
        if delivered or interfered:
            self.delivery_ratio.add(len(delivered) / (len(delivered) + len(interfered)))

        for radio in delivered:
            self.links[(src, radio.node_id)].add(1.0)
        for radio in interfered:
            self.links[(src, radio.node_id)].add(0.0)

    def link_delivery_ratio(self, src: int, dst: int) -> float:
        link = self.links.get((src, dst))
        return link.lifetime_mean if link is not None else 0.0

    def summary(self) -> Dict[str, Any]:
        return {
            "transmissions": self.transmissions,
            "deliveries": self.deliveries,
            "interferences": self.interferences,
            "delivery_ratio_mean": self.delivery_ratio.mean,
            "delivery_ratio_lifetime": self.delivery_ratio.lifetime_mean,
            "links": len(self.links),
        }

    def save(self, path: str):
        """Save summary and per-link counters to JSON."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        data = self.summary()
        data["per_link"] = {
            f"{src}->{dst}": {
                "delivered": int(link.total),
                "interfered": link.count - int(link.total),
                "recent_ratio": link.mean,
            }
            for (src, dst), link in sorted(self.links.items())
        }
        with open(path, "w") as f:
            json.dump(data, f, indent=2)
