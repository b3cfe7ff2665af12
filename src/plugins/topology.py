"""
Topology Editor Module
======================

Adds and removes nodes by id and manages explicit point-to-point links
with a configured success ratio, RSSI and LQI. Explicit links bypass the
distance model and are stored in the medium's reachability graph.

A link naming a node that is not registered yet is queued and applied
once both endpoints exist.

Link File Format (one record per line):
    src dst channel ratio rssi lqi
    # comments and blank lines are ignored

Author: Logistic Loss Medium Team
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Union

from medium.radio import ANY_CHANNEL, Radio
from medium.reachability_graph import Edge
from medium.registry import RadioRegistry

logger = logging.getLogger(__name__)

# Initial position of motes added without coordinates
DEFAULT_POSITION = (100.0, 100.0, 0.0)

DEFAULT_LQI = 105


@dataclass
class LinkRecord:
    """An explicit link request."""
    src: int
    dst: int
    channel: int = ANY_CHANNEL
    ratio: float = 1.0
    rssi: float = -10.0
    lqi: int = DEFAULT_LQI

    def to_edge(self) -> Edge:
        return Edge(
            self.src, self.dst, self.channel,
            ratio=self.ratio, signal=self.rssi, lqi=self.lqi, explicit=True
        )


class TopologyEditor:
    """
    Node and explicit-link editing on top of a medium.

    Attributes:
        registry: Radio registry
        medium: Radio medium supporting explicit links
        delayed_links: Links waiting for an endpoint to be registered

    Example:
        >>> editor = TopologyEditor(registry, medium)
        >>> editor.add_mote(1, 0.0, 0.0)
        True
        >>> editor.set_edge(1, 2, ratio=0.9, rssi=-60.0, lqi=100)
        True
        >>> len(editor.delayed_links)
        1
    """

    def __init__(self, registry: RadioRegistry, medium):
        """
        Raises:
            TypeError: If the medium cannot store explicit links
        """
        if not getattr(medium, "supports_explicit_links", False):
            raise TypeError(
                f"{type(medium).__name__} does not support explicit links"
            )
        self.registry = registry
        self.medium = medium
        self.delayed_links: List[LinkRecord] = []
        registry.add_membership_listener(self._on_membership_change)

    # =========================================================================
    # NODES
    # =========================================================================

    def mote_exists(self, node_id: int) -> bool:
        return node_id in self.registry

    def add_mote(
        self,
        node_id: int,
        x: float = DEFAULT_POSITION[0],
        y: float = DEFAULT_POSITION[1],
        z: float = DEFAULT_POSITION[2],
        channel: int = ANY_CHANNEL
    ) -> bool:
        if self.mote_exists(node_id):
            logger.info("Mote %s already exists.", node_id)
            return False
        logger.info("Adding mote: %s", node_id)
        self.registry.register_radio(Radio(node_id, (x, y, z), channel=channel))
        return True

    def remove_mote(self, node_id: int) -> bool:
        if not self.mote_exists(node_id):
            return False
        removed = self.medium.graph.remove_edges_of(node_id)
        logger.info("Removing mote: %s (%d links)", node_id, removed)
        self.registry.unregister_radio(node_id)
        return True

    def clear(self):
        for radio in self.registry.radios():
            self.remove_mote(radio.node_id)

    def set_base_rssi(self, node_id: int, base_rssi: float) -> bool:
        return self.medium.set_base_rssi(node_id, base_rssi)

    # =========================================================================
    # LINKS
    # =========================================================================

    def set_edge(
        self,
        src: int,
        dst: int,
        channel: int = ANY_CHANNEL,
        ratio: float = 1.0,
        rssi: float = -10.0,
        lqi: int = DEFAULT_LQI
    ) -> bool:
        return self.set_link(LinkRecord(src, dst, channel, ratio, rssi, lqi))

    def set_link(self, link: LinkRecord) -> bool:
        """Create or update an explicit link, queueing it if an endpoint is missing."""
        if not self.mote_exists(link.src) or not self.mote_exists(link.dst):
            logger.debug("Queueing link %s -> %s until both motes exist", link.src, link.dst)
            self._drop_delayed(link.src, link.dst, link.channel)
            self.delayed_links.append(link)
            return True

        self.medium.graph.set_explicit_edge(link.to_edge())
        return True

    def remove_edge(self, src: int, dst: int, channel: int = ANY_CHANNEL) -> bool:
        dropped = self._drop_delayed(src, dst, channel)
        return self.medium.graph.remove_explicit_edge(src, dst, channel) or dropped

    def get_edge(self, src: int, dst: int, channel: int = ANY_CHANNEL) -> Optional[Edge]:
        return self.medium.graph.get_explicit_edge(src, dst, channel)

    def _drop_delayed(self, src: int, dst: int, channel: int) -> bool:
        before = len(self.delayed_links)
        self.delayed_links = [
            link for link in self.delayed_links
            if (link.src, link.dst, link.channel) != (src, dst, channel)
        ]
        return len(self.delayed_links) != before

    def _on_membership_change(self, event: str, node_id: int):
        if event != "added" or not self.delayed_links:
            return
        # set_link re-queues whatever is still missing an endpoint
        pending, self.delayed_links = self.delayed_links, []
        for link in pending:
            self.set_link(link)

    # =========================================================================
    # LINK FILES
    # =========================================================================

    def load_links(self, source: Union[str, Path, Iterable[str]]) -> int:
        """
        Apply link records from a file path or an iterable of lines.

        Returns:
            Number of records applied or queued
        """
        applied = 0
        for link in parse_links(source):
            if self.set_link(link):
                applied += 1
        return applied


def parse_links(source: Union[str, Path, Iterable[str]]) -> List[LinkRecord]:
    """
    Parse link records, skipping malformed lines with a warning.

    A missing file yields no records.
    """
    if isinstance(source, (str, Path)):
        path = Path(source)
        if not path.exists():
            logger.warning("Link file %s not found", path)
            return []
        lines = path.read_text().splitlines()
    else:
        lines = list(source)

    links = []
    for lineno, line in enumerate(lines, start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        fields = line.split()
        try:
            if len(fields) != 6:
                raise ValueError(f"expected 6 fields, got {len(fields)}")
            links.append(LinkRecord(
                src=int(fields[0]),
                dst=int(fields[1]),
                channel=int(fields[2]),
                ratio=float(fields[3]),
                rssi=float(fields[4]),
                lqi=int(fields[5]),
            ))
        except ValueError as e:
            logger.warning("Skipping malformed link record on line %d: %r (%s)", lineno, line, e)
    return links
