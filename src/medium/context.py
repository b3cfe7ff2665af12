"""
Medium Context Module
=====================

Plain container for the simulation-wide parameters and collaborator
handles shared by the connection resolver and the signal-strength updater.

Author: Logistic Loss Medium Team
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from physics.logistic_loss import mean_rssi, model_link_prr, noisy_rssi

from .config import MediumConfig
from .connection import Connection
from .radio import Radio
from .reachability_graph import Edge, ReachabilityGraph
from .registry import RadioRegistry


@dataclass
class MediumContext:
    """Shared state of one medium instance."""

    config: MediumConfig
    registry: RadioRegistry
    graph: ReachabilityGraph
    rng: np.random.RandomState
    is_gateway: Callable[[int], bool]
    active_connections: List[Connection] = field(default_factory=list)

    def both_are_gateways(self, source: Radio, dest: Radio) -> bool:
        return bool(self.is_gateway(source.node_id) and self.is_gateway(dest.node_id))

    def mean_rssi(self, source: Radio, dest: Radio, edge: Optional[Edge] = None) -> float:
        """Noiseless RSSI of source at dest; explicit links report their configured RSSI."""
        if edge is not None and edge.explicit:
            return float(edge.signal)
        cfg = self.config
        return mean_rssi(
            source.distance_to(dest), cfg.transmitting_range, cfg.min_rssi, cfg.rssi_range
        )

    def noisy_rssi(self, source: Radio, dest: Radio, edge: Optional[Edge] = None) -> float:
        """Mean RSSI plus N(0, 1) noise. Explicit links are reported as configured."""
        if edge is not None and edge.explicit:
            return float(edge.signal)
        cfg = self.config
        return noisy_rssi(
            source.distance_to(dest), self.rng,
            cfg.transmitting_range, cfg.min_rssi, cfg.rssi_range
        )

    def success_probability(self, source: Radio, dest: Radio, edge: Optional[Edge] = None) -> float:
        """PRR at the mean RSSI; explicit links report their configured ratio."""
        if edge is not None and edge.explicit:
            return float(edge.ratio)
        cfg = self.config
        return model_link_prr(
            self.mean_rssi(source, dest),
            cfg.min_rssi,
            cfg.rssi_range,
            cfg.prr_fifty_percent_offset,
            cfg.prr_scaling_factor,
        )
