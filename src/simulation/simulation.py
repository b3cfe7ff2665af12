"""
Simulation Module
=================

Discrete-event harness around the radio medium, built on simpy.

It plays the scheduler role: it decides when transmissions start and end,
asks the medium for a connection when a transmission begins, retires it
when the airtime has elapsed, clears reception flags at teardown and
refreshes reported signal strengths after every change.

Author: Logistic Loss Medium Team
"""

import logging
import numpy as np
from typing import Dict, Any, Optional

import simpy

from medium.connection import Connection
from medium.logistic_loss_medium import LogisticLossMedium
from medium.radio import Radio
from medium.registry import RadioRegistry
from plugins.mobility import MobilityReplay
from plugins.topology import TopologyEditor

from .config import SimulationConfig
from .metrics import TransmissionStats

logger = logging.getLogger(__name__)


class Simulation:
    """
    A complete simulation: registry, medium, collaborators and traffic.

    Attributes:
        config: Simulation configuration
        env: simpy environment (simulated seconds)
        registry: Registered radios
        medium: Logistic loss medium
        topology: Node and explicit-link editor
        mobility: Mobility replay, None until loaded
        stats: Transmission outcome counters

    Example:
        >>> sim = Simulation(get_debug_config())
        >>> sim.populate()
        >>> sim.start_traffic()
        >>> summary = sim.run()
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        env: Optional[simpy.Environment] = None
    ):
        self.config = config or SimulationConfig()
        self.env = env or simpy.Environment()
        self.rng = np.random.RandomState(self.config.seed)

        self.registry = RadioRegistry()
        self.medium = LogisticLossMedium(self.registry, self.config.medium, rng=self.rng)
        self.topology = TopologyEditor(self.registry, self.medium)
        self.mobility: Optional[MobilityReplay] = None
        self.stats = TransmissionStats()

    def current_time(self) -> float:
        return self.env.now

    # =========================================================================
    # SETUP
    # =========================================================================

    def add_radio(
        self,
        node_id: int,
        x: float,
        y: float,
        z: float = 0.0,
        channel: Optional[int] = None
    ) -> Radio:
        radio = Radio(node_id, (x, y, z), channel=self.config.channel if channel is None else channel)
        self.registry.register_radio(radio)
        return radio

    def populate(self):
        """
        Create the configured radios at random positions, then apply the
        link file if one is configured.
        """
        cfg = self.config
        positions = self.rng.uniform(0.0, cfg.arena_size, size=(cfg.num_radios, 2))
        for i, (x, y) in enumerate(positions, start=1):
            self.add_radio(i, float(x), float(y))

        if cfg.links_file:
            applied = self.topology.load_links(cfg.links_file)
            logger.info("Applied %d explicit links from %s", applied, cfg.links_file)

        if cfg.mobility_file:
            self.load_mobility(cfg.mobility_file, cfg.mobility_wrap)

    def load_mobility(self, path: str, wrap: bool = True) -> MobilityReplay:
        self.mobility = MobilityReplay.from_file(self.registry, self.env, path, wrap)
        self.mobility.start()
        return self.mobility

    # =========================================================================
    # TRANSMISSIONS
    # =========================================================================

    def transmit(self, node_id: int, duration: Optional[float] = None) -> simpy.Process:
        """Start a transmission from a radio; the process value is its Connection."""
        if duration is None:
            duration = self.config.packet_duration
        return self.env.process(self._transmission(node_id, duration))

    def _transmission(self, node_id: int, duration: float):
        radio = self.registry.get_radio(node_id)
        if radio is None or not radio.on or radio.transmitting:
            logger.debug("%.6f: radio %s cannot transmit now", self.env.now, node_id)
            return None

        radio.transmitting = True
        connection = self.medium.create_connections(radio)
        self.stats.record(connection)
        self.medium.update_signal_strengths()
        logger.debug("%.6f: %s", self.env.now, connection)

        yield self.env.timeout(duration)

        self.medium.retire_connection(connection)
        radio.transmitting = False
        self._end_receptions(connection)
        self.stats.record_retired(connection)
        self.medium.update_signal_strengths()
        return connection

    def _end_receptions(self, connection: Connection):
        """Clear reception flags of radios no other active connection reaches."""
        busy = set()
        for conn in self.medium.get_active_connections():
            busy |= conn.get_all_destinations()
        for radio in connection.get_all_destinations():
            if radio not in busy:
                radio.signal_reception_end()

    def start_traffic(self):
        """Every registered radio transmits at exponentially distributed intervals."""
        for radio in self.registry.radios():
            self.env.process(self._traffic(radio.node_id))

    def _traffic(self, node_id: int):
        while node_id in self.registry:
            yield self.env.timeout(self.rng.exponential(self.config.tx_interval))
            if node_id in self.registry:
                yield self.transmit(node_id)

    def run(self, until: Optional[float] = None) -> Dict[str, Any]:
        """Run until the given time (default: configured duration)."""
        self.env.run(until=self.config.duration if until is None else until)
        summary = self.stats.summary()
        summary["time"] = self.env.now
        summary["radios"] = len(self.registry)
        summary["graph_recomputations"] = self.medium.graph.recompute_count
        return summary
