"""
Unit Tests for Topology Editor
==============================

Tests node editing, explicit links, queued links and link files.

Run with: python -m pytest tests/test_topology.py -v

Author: Logistic Loss Medium Team
"""

import sys
import os
import logging
import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from medium.logistic_loss_medium import LogisticLossMedium
from medium.registry import RadioRegistry
from plugins.topology import (
    DEFAULT_POSITION,
    LinkRecord,
    TopologyEditor,
    parse_links,
)


class FixedRandom:
    """Random source returning fixed draws."""

    def __init__(self, uniform=0.0, normal=0.0):
        self.uniform = uniform
        self.normal = normal

    def random_sample(self):
        return self.uniform

    def standard_normal(self):
        return self.normal


@pytest.fixture
def setup():
    registry = RadioRegistry()
    medium = LogisticLossMedium(registry, rng=FixedRandom(uniform=0.5))
    editor = TopologyEditor(registry, medium)
    return registry, medium, editor


class TestCapability:
    """Test the explicit-link capability check."""

    def test_rejects_medium_without_explicit_links(self):
        class PlainMedium:
            pass

        with pytest.raises(TypeError):
            TopologyEditor(RadioRegistry(), PlainMedium())

    def test_accepts_logistic_loss_medium(self, setup):
        _, medium, editor = setup
        assert editor.medium is medium


class TestMotes:
    """Test adding and removing nodes."""

    def test_add_mote_default_position(self, setup):
        registry, _, editor = setup
        assert editor.add_mote(1)
        assert tuple(registry.get_radio(1).position) == DEFAULT_POSITION

    def test_add_existing_mote(self, setup):
        _, _, editor = setup
        editor.add_mote(1)
        assert not editor.add_mote(1)

    def test_remove_mote(self, setup):
        registry, _, editor = setup
        editor.add_mote(1)
        assert editor.remove_mote(1)
        assert not editor.mote_exists(1)
        assert not editor.remove_mote(1)
        assert len(registry) == 0

    def test_remove_mote_drops_links(self, setup):
        _, medium, editor = setup
        editor.add_mote(1, 0.0, 0.0)
        editor.add_mote(2, 80.0, 0.0)
        editor.add_mote(3, 160.0, 0.0)
        editor.set_edge(1, 2, ratio=0.9)
        editor.set_edge(2, 3, ratio=0.9)
        editor.set_edge(3, 1, ratio=0.9)

        editor.remove_mote(2)
        assert editor.get_edge(1, 2) is None
        assert editor.get_edge(2, 3) is None
        assert editor.get_edge(3, 1) is not None
        for edge in medium.graph.all_edges():
            assert 2 not in (edge.source_id, edge.dest_id)

    def test_clear(self, setup):
        registry, medium, editor = setup
        editor.add_mote(1, 0.0, 0.0)
        editor.add_mote(2, 1.0, 0.0)
        editor.clear()
        assert len(registry) == 0
        assert medium.graph.all_edges() == []

    def test_set_base_rssi(self, setup):
        registry, _, editor = setup
        editor.add_mote(1)
        assert editor.set_base_rssi(1, -92.0)
        assert registry.get_radio(1).base_rssi == -92.0
        assert not editor.set_base_rssi(7, -92.0)


class TestLinks:
    """Test explicit link editing."""

    def test_set_edge_stores_parameters(self, setup):
        _, medium, editor = setup
        editor.add_mote(1, 0.0, 0.0)
        editor.add_mote(2, 80.0, 0.0)
        assert editor.set_edge(1, 2, 26, ratio=0.9, rssi=-60.0, lqi=100)

        edge = editor.get_edge(1, 2, 26)
        assert edge.explicit
        assert (edge.ratio, edge.signal, edge.lqi) == (0.9, -60.0, 100)
        assert medium.graph.get_edge(1, 2) == edge

    def test_set_edge_updates_existing(self, setup):
        _, _, editor = setup
        editor.add_mote(1, 0.0, 0.0)
        editor.add_mote(2, 80.0, 0.0)
        editor.set_edge(1, 2, ratio=0.9, rssi=-60.0)
        editor.set_edge(1, 2, ratio=0.2, rssi=-85.0)
        edge = editor.get_edge(1, 2)
        assert (edge.ratio, edge.signal) == (0.2, -85.0)
        assert len(editor.medium.graph.explicit_edges()) == 1

    def test_remove_edge(self, setup):
        _, medium, editor = setup
        editor.add_mote(1, 0.0, 0.0)
        editor.add_mote(2, 80.0, 0.0)
        editor.set_edge(1, 2)
        assert editor.remove_edge(1, 2)
        assert not editor.remove_edge(1, 2)
        assert medium.graph.get_candidates(1) == []

    def test_link_drives_delivery(self, setup):
        """Explicit ratio replaces the distance model (draw 0.5)."""
        registry, medium, editor = setup
        editor.add_mote(1, 0.0, 0.0)
        editor.add_mote(2, 80.0, 0.0)
        editor.add_mote(3, 160.0, 0.0)
        editor.set_edge(1, 2, ratio=0.9)
        editor.set_edge(1, 3, ratio=0.1)

        conn = medium.create_connections(registry.get_radio(1))
        assert conn.is_destination(registry.get_radio(2))
        assert conn.is_interfered(registry.get_radio(3))


class TestDelayedLinks:
    """Test links naming motes that do not exist yet."""

    def test_link_before_motes(self, setup):
        """Links requested before their motes are realised with the exact parameters."""
        _, medium, editor = setup
        editor.set_edge(1, 2, 26, ratio=0.75, rssi=-70.0, lqi=90)
        assert len(editor.delayed_links) == 1
        assert medium.graph.explicit_edges() == []

        editor.add_mote(1, 0.0, 0.0)
        assert len(editor.delayed_links) == 1

        editor.add_mote(2, 50.0, 0.0)
        assert editor.delayed_links == []
        edge = editor.get_edge(1, 2, 26)
        assert (edge.ratio, edge.signal, edge.lqi) == (0.75, -70.0, 90)

    def test_requeue_replaces_pending(self, setup):
        _, _, editor = setup
        editor.set_edge(1, 2, ratio=0.3)
        editor.set_edge(1, 2, ratio=0.6)
        assert len(editor.delayed_links) == 1
        assert editor.delayed_links[0].ratio == 0.6

    def test_remove_pending_link(self, setup):
        _, _, editor = setup
        editor.set_edge(1, 2)
        assert editor.remove_edge(1, 2)
        assert editor.delayed_links == []

    def test_only_completed_links_applied(self, setup):
        _, _, editor = setup
        editor.set_edge(1, 2)
        editor.set_edge(1, 3)
        editor.add_mote(1, 0.0, 0.0)
        editor.add_mote(3, 50.0, 0.0)
        assert editor.get_edge(1, 3) is not None
        assert [(l.src, l.dst) for l in editor.delayed_links] == [(1, 2)]


class TestLinkFiles:
    """Test the link record format."""

    def test_parse(self):
        links = parse_links([
            "# src dst channel ratio rssi lqi",
            "1 2 26 0.9 -60 100",
            "",
            "2 1 -1 0.5 -75.5 80",
        ])
        assert links == [
            LinkRecord(1, 2, 26, 0.9, -60.0, 100),
            LinkRecord(2, 1, -1, 0.5, -75.5, 80),
        ]

    def test_malformed_lines_skipped(self, caplog):
        with caplog.at_level(logging.WARNING, logger="plugins.topology"):
            links = parse_links(["1 2 26 0.9 -60", "1 2 x 0.9 -60 100", "3 4 -1 1.0 -10 105"])
        assert [(l.src, l.dst) for l in links] == [(3, 4)]
        assert len([r for r in caplog.records if r.levelno == logging.WARNING]) == 2

    def test_missing_file(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING, logger="plugins.topology"):
            assert parse_links(tmp_path / "missing.links") == []
        assert caplog.records

    def test_load_links_from_file(self, setup, tmp_path):
        _, _, editor = setup
        path = tmp_path / "topology.links"
        path.write_text("1 2 -1 0.8 -65 95\n2 1 -1 0.4 -88 60\n")
        editor.add_mote(1, 0.0, 0.0)
        editor.add_mote(2, 80.0, 0.0)

        assert editor.load_links(path) == 2
        assert editor.get_edge(1, 2).ratio == 0.8
        assert editor.get_edge(2, 1).signal == -88.0
