"""
Unit Tests for Simulation Harness
=================================

Tests the transmission lifecycle driven by simpy, flag teardown,
outcome statistics and run determinism.

Run with: python -m pytest tests/test_simulation.py -v

Author: Logistic Loss Medium Team
"""

import sys
import os
import json

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from medium.config import SS_STRONG, SS_NOTHING
from medium.connection import Connection
from medium.radio import Radio
from simulation.config import SimulationConfig, get_debug_config
from simulation.metrics import RollingStats, TransmissionStats
from simulation.simulation import Simulation


class FixedRandom:
    """Random source returning fixed draws."""

    def __init__(self, uniform=0.0, normal=0.0):
        self.uniform = uniform
        self.normal = normal

    def random_sample(self):
        return self.uniform

    def standard_normal(self):
        return self.normal


def make_sim(*positions):
    sim = Simulation(SimulationConfig(seed=1))
    for node_id, (x, y) in enumerate(positions, start=1):
        sim.add_radio(node_id, x, y)
    sim.medium.context.rng = FixedRandom()
    return sim


class TestTransmissionLifecycle:
    """Test one transmission from start to teardown."""

    def test_flags_during_and_after(self):
        sim = make_sim((0, 0), (5, 0))
        a, b = sim.registry.get_radio(1), sim.registry.get_radio(2)

        process = sim.transmit(1, duration=0.01)
        sim.env.run(until=0.005)
        assert a.transmitting
        assert b.receiving
        assert len(sim.medium.get_active_connections()) == 1
        assert a.current_signal_strength == SS_STRONG
        assert abs(b.current_signal_strength - (-72.0)) < 1e-12

        sim.env.run(until=0.02)
        connection = process.value
        assert connection.is_destination(b)
        assert not a.transmitting
        assert not b.receiving
        assert sim.medium.get_active_connections() == []
        assert a.current_signal_strength == SS_NOTHING
        assert b.current_signal_strength == SS_NOTHING

    def test_radios_use_configured_channel(self):
        sim = make_sim((0, 0))
        assert sim.registry.get_radio(1).channel == sim.config.channel

    def test_unknown_radio_does_not_transmit(self):
        sim = make_sim((0, 0))
        process = sim.transmit(99)
        sim.env.run(until=1.0)
        assert process.value is None
        assert sim.stats.transmissions == 0

    def test_busy_radio_does_not_transmit_twice(self):
        sim = make_sim((0, 0), (5, 0))
        sim.transmit(1, duration=1.0)
        second = sim.transmit(1, duration=1.0)
        sim.env.run(until=2.0)
        assert second.value is None
        assert sim.stats.transmissions == 1

    def test_overlapping_receptions_torn_down_separately(self):
        """
        A -> {B, C}; C then transmits and captures B. When A ends, C's
        reception flag is cleared but B keeps receiving from C.
        """
        sim = make_sim((0, 0), (5, 0), (8, 0))
        a, b, c = (sim.registry.get_radio(i) for i in (1, 2, 3))

        def later():
            yield sim.env.timeout(0.002)
            yield sim.transmit(3, duration=0.018)

        first = sim.transmit(1, duration=0.01)
        sim.env.process(later())

        sim.env.run(until=0.015)
        assert first.value.is_interfered(b)
        assert b.receiving
        assert not c.receiving
        assert c.transmitting
        assert not a.transmitting

        sim.env.run(until=0.05)
        assert not b.receiving
        assert not a.receiving
        assert sim.medium.get_active_connections() == []

        assert sim.stats.transmissions == 2
        assert sim.stats.deliveries == 2
        assert sim.stats.interferences == 2
        assert sim.stats.link_delivery_ratio(1, 2) == 0.0
        assert sim.stats.link_delivery_ratio(3, 2) == 1.0


class TestPopulate:
    """Test scenario construction from configuration."""

    def test_random_radios(self):
        sim = Simulation(get_debug_config())
        sim.populate()
        assert len(sim.registry) == 4
        for radio in sim.registry.radios():
            assert 0.0 <= radio.position[0] <= 10.0
            assert 0.0 <= radio.position[1] <= 10.0

    def test_links_and_mobility_files(self, tmp_path):
        links = tmp_path / "links.txt"
        links.write_text("1 2 -1 0.5 -60 100\n")
        trace = tmp_path / "positions.dat"
        trace.write_text("0 1.0 3.0 4.0\n")

        config = SimulationConfig(num_radios=3, links_file=str(links),
                                  mobility_file=str(trace), mobility_wrap=False)
        sim = Simulation(config)
        sim.populate()
        assert sim.topology.get_edge(1, 2).ratio == 0.5

        sim.run(until=2.0)
        assert list(sim.registry.get_radio(1).position[:2]) == [3.0, 4.0]
        assert sim.mobility.moves_applied == 1


class TestRun:
    """Test traffic runs."""

    def test_summary(self):
        sim = Simulation(get_debug_config())
        sim.populate()
        sim.start_traffic()
        summary = sim.run()
        assert summary["time"] == 5.0
        assert summary["radios"] == 4
        assert summary["transmissions"] > 0
        assert summary["graph_recomputations"] >= 1

    def test_same_seed_same_outcome(self):
        results = []
        for _ in range(2):
            sim = Simulation(get_debug_config())
            sim.populate()
            sim.start_traffic()
            results.append(sim.run())
        assert results[0] == results[1]

    def test_stats_saved(self, tmp_path):
        sim = make_sim((0, 0), (5, 0))
        sim.transmit(1, duration=0.01)
        sim.run(until=1.0)
        path = tmp_path / "out" / "stats.json"
        sim.stats.save(str(path))
        data = json.loads(path.read_text())
        assert data["transmissions"] == 1
        assert data["per_link"]["1->2"] == {"delivered": 1, "interfered": 0, "recent_ratio": 1.0}


class TestMetrics:
    """Test outcome counters."""

    def test_rolling_stats(self):
        stats = RollingStats(window_size=3)
        for v in [1.0, 0.0, 1.0, 1.0]:
            stats.add(v)
        assert len(stats) == 3
        assert abs(stats.mean - 2.0 / 3.0) < 1e-12
        assert stats.count == 4
        assert abs(stats.lifetime_mean - 0.75) < 1e-12

    def test_empty_summary(self):
        summary = TransmissionStats().summary()
        assert summary["transmissions"] == 0
        assert summary["delivery_ratio_mean"] == 0.0

    def test_outcomes_counted_at_retirement(self):
        sim = make_sim((0, 0), (5, 0))
        sim.transmit(1, duration=0.01)
        sim.env.run(until=0.005)
        assert sim.stats.transmissions == 1
        assert sim.stats.deliveries == 0
        sim.env.run(until=0.02)
        assert sim.stats.deliveries == 1

    def test_per_link_ratio(self):
        """Each link keeps its own outcome history."""
        a, b, c = Radio(1, (0, 0, 0)), Radio(2, (5, 0, 0)), Radio(3, (8, 0, 0))
        stats = TransmissionStats(window_size=2)
        for delivered_to_b in (True, False, False):
            conn = Connection(a)
            if delivered_to_b:
                conn.add_destination(b)
            else:
                conn.add_interfered(b)
            conn.add_destination(c)
            stats.record(conn)
            stats.record_retired(conn)

        assert abs(stats.link_delivery_ratio(1, 2) - 1.0 / 3.0) < 1e-12
        assert stats.links[(1, 2)].mean == 0.0
        assert stats.link_delivery_ratio(1, 3) == 1.0
        assert stats.link_delivery_ratio(3, 1) == 0.0

    def test_captured_destination_counted_once(self):
        a, b = Radio(1, (0, 0, 0)), Radio(2, (5, 0, 0))
        conn = Connection(a)
        conn.add_destination(b)
        conn.add_interfered(b)
        stats = TransmissionStats()
        stats.record(conn)
        stats.record_retired(conn)
        assert stats.deliveries == 0
        assert stats.interferences == 1
        assert stats.links[(1, 2)].count == 1
