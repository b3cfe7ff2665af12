"""
Logistic Loss Medium Module
===========================

The radio medium: the entry point the scheduler talks to.

The received signal strength decreases linearly with the normalized
distance to the transmitter, and the packet reception rate follows a
logistic curve of the RSSI (see physics.logistic_loss).

Scheduler-facing API:
    - create_connections(sender): resolve a new transmission, register it
      as active and apply reception side effects
    - retire_connection(conn): the transmission is over
    - update_signal_strengths(): refresh reported RSSI values
    - get_success_probability(source, dest): instrumentation

Author: Logistic Loss Medium Team
"""

import logging
import numpy as np
from typing import Callable, List, Optional

from .config import MediumConfig
from .connection import Connection
from .context import MediumContext
from .radio import Radio, channels_mismatch
from .reachability_graph import ReachabilityGraph
from .registry import RadioRegistry
from .resolver import ConnectionResolver
from .signal_strength import SignalStrengthUpdater

logger = logging.getLogger(__name__)


class LogisticLossMedium:
    """
    Logistic loss radio medium.

    Attributes:
        config: Propagation parameters
        registry: Registered radios
        graph: Reachability graph (also stores explicit links)
        supports_explicit_links: Capability flag checked by the topology editor

    Example:
        >>> registry = RadioRegistry()
        >>> medium = LogisticLossMedium(registry, MediumConfig(), seed=1)
        >>> registry.register_radio(Radio(1, (0, 0, 0)))
        >>> registry.register_radio(Radio(2, (5, 0, 0)))
        >>> conn = medium.create_connections(registry.get_radio(1))
    """

    supports_explicit_links = True

    def __init__(
        self,
        registry: RadioRegistry,
        config: Optional[MediumConfig] = None,
        rng: Optional[np.random.RandomState] = None,
        seed: Optional[int] = None,
        is_gateway: Optional[Callable[[int], bool]] = None
    ):
        """
        Initialize the medium.

        Args:
            registry: Radio registry owned by the simulation
            config: Propagation parameters (defaults if None)
            rng: Random source; created from seed if None
            seed: Seed for the random source
            is_gateway: Privileged-id predicate; derived from
                        config.gateway_id_threshold if None
        """
        self.config = config or MediumConfig()
        self.registry = registry

        if rng is None:
            rng = np.random.RandomState(seed)
        if is_gateway is None:
            is_gateway = self.config.gateway_predicate()

        self.graph = ReachabilityGraph(registry, self.config.interference_range, is_gateway)
        self.context = MediumContext(
            config=self.config,
            registry=registry,
            graph=self.graph,
            rng=rng,
            is_gateway=is_gateway,
        )
        self.resolver = ConnectionResolver(self.context)
        self.signal_strengths = SignalStrengthUpdater(self.context)

        registry.add_membership_listener(self._on_membership_change)

    def _on_membership_change(self, event: str, node_id: int):
        if event == "removed":
            self.graph.remove_edges_of(node_id)
        self.graph.mark_dirty()

    def mark_dirty(self):
        self.graph.mark_dirty()

    # =========================================================================
    # CONNECTIONS
    # =========================================================================

    def create_connections(self, sender: Radio) -> Connection:
        """
        Resolve a transmission from sender and register it as active.

        Destinations start receiving. Interfered radios that share the
        sender's channel start receiving noise and are flagged interfered;
        channel-mismatched ones stay dormant.
        """
        connection = self.resolver.resolve(sender)

        for radio in connection.get_destinations():
            radio.signal_reception_start()

        for radio in connection.get_interfered():
            if channels_mismatch(sender, radio):
                continue
            if radio.on:
                radio.signal_reception_start()
            radio.interfere_any_reception()

        self.context.active_connections.append(connection)
        return connection

    def retire_connection(self, connection: Connection) -> bool:
        """Remove a finished connection from the active set."""
        active = self.context.active_connections
        if connection not in active:
            return False
        active.remove(connection)
        return True

    def get_active_connections(self) -> List[Connection]:
        return list(self.context.active_connections)

    # =========================================================================
    # INSTRUMENTATION
    # =========================================================================

    def get_success_probability(self, source: Radio, dest: Radio) -> float:
        """
        Probability in [0, 1] that dest receives a packet from source.

        Returns 0.0 if either radio is not registered.
        """
        if self.registry.get_radio(source.node_id) is not source \
                or self.registry.get_radio(dest.node_id) is not dest:
            return 0.0
        edge = self.graph.get_edge(source.node_id, dest.node_id, source.channel)
        return self.context.success_probability(source, dest, edge)

    def get_rssi(self, source: Radio, dest: Radio) -> float:
        """Instantaneous (noisy) RSSI of source at dest."""
        edge = self.graph.get_edge(source.node_id, dest.node_id, source.channel)
        return self.context.noisy_rssi(source, dest, edge)

    def get_mean_rssi(self, source: Radio, dest: Radio) -> float:
        edge = self.graph.get_edge(source.node_id, dest.node_id, source.channel)
        return self.context.mean_rssi(source, dest, edge)

    def update_signal_strengths(self):
        self.signal_strengths.update()

    def set_base_rssi(self, node_id: int, base_rssi: float) -> bool:
        radio = self.registry.get_radio(node_id)
        if radio is None:
            return False
        radio.base_rssi = base_rssi
        return True
