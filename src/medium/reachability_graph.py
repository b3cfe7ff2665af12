"""
Reachability Graph Module
=========================

Directed graph of potential receivers. An edge A -> B means radio B is a
potential receiver of radio A; it does not imply B -> A.

Key Concepts:
    - Edge A -> B exists if distance(A, B) < interference range, or if both
      radios satisfy the gateway predicate (privileged backbone links)
    - Explicit links (set by the topology editor) share the same storage and
      replace the distance-derived edge for their ordered pair
    - The edge table is derived data: any membership or position change marks
      it dirty, and it is recomputed in full (O(N^2)) on the next query

Recomputation happens at most once per dirty period, never per query.

Author: Logistic Loss Medium Team
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from physics.logistic_loss import compute_pairwise_distances

from .radio import ANY_CHANNEL
from .registry import RadioRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Edge:
    """
    Directed potential-reception link.

    Attributes:
        source_id: Transmitting node
        dest_id: Potential receiving node
        channel: Channel this link carries, -1 for any
        ratio: Success ratio (explicit links only)
        signal: RSSI in dBm (explicit links only)
        lqi: Link quality indicator (explicit links only)
        explicit: True for manually configured links
    """
    source_id: int
    dest_id: int
    channel: int = ANY_CHANNEL
    ratio: float = 1.0
    signal: float = 0.0
    lqi: int = 105
    explicit: bool = False


class ReachabilityGraph:
    """
    Lazily recomputed table of potential destinations per source radio.

    Attributes:
        registry: Radio registry the graph is derived from
        interference_range: Distance below which a radio is a candidate
        is_gateway: Privileged-id predicate

    Example:
        >>> graph = ReachabilityGraph(registry, interference_range=10.0)
        >>> [e.dest_id for e in graph.get_candidates(1)]
        [2, 3]
    """

    def __init__(
        self,
        registry: RadioRegistry,
        interference_range: float,
        is_gateway: Optional[Callable[[int], bool]] = None
    ):
        self.registry = registry
        self.interference_range = interference_range
        self.is_gateway = is_gateway or (lambda node_id: False)

        self._dirty = True
        self._revision = -1
        self._edges: Dict[int, List[Edge]] = {}
        # Explicit links keyed by (source, dest, channel)
        self._explicit: Dict[Tuple[int, int, int], Edge] = {}
        self.recompute_count = 0

    # =========================================================================
    # DIRTY FLAG
    # =========================================================================

    def mark_dirty(self):
        """Request recomputation on the next query."""
        self._dirty = True

    @property
    def is_dirty(self) -> bool:
        return self._dirty or self._revision != self.registry.revision

    def both_are_gateways(self, source_id: int, dest_id: int) -> bool:
        return bool(self.is_gateway(source_id) and self.is_gateway(dest_id))

    # =========================================================================
    # QUERIES
    # =========================================================================

    def get_candidates(self, source_id: int) -> List[Edge]:
        """
        Potential destinations of a source radio, in registration order.

        Recomputes the table first if it is dirty. Returns an empty list for
        an unregistered source.
        """
        self._ensure_fresh()
        return list(self._edges.get(source_id, ()))

    def get_edge(self, source_id: int, dest_id: int, channel: int = ANY_CHANNEL) -> Optional[Edge]:
        """Edge from source to dest as seen by a sender on channel, None if none."""
        pair = [edge for edge in self.get_candidates(source_id) if edge.dest_id == dest_id]
        return _select_edge(pair, channel)

    def get_receiver_edges(self, source_id: int, channel: int = ANY_CHANNEL) -> List[Edge]:
        """
        One edge per potential receiver, in registration order.

        Where per-channel explicit links exist for a pair, the link on the
        sender's channel wins, then the any-channel link.
        """
        by_dest: Dict[int, List[Edge]] = {}
        for edge in self.get_candidates(source_id):
            by_dest.setdefault(edge.dest_id, []).append(edge)
        return [_select_edge(edges, channel) for edges in by_dest.values()]

    def all_edges(self) -> List[Edge]:
        self._ensure_fresh()
        return [edge for edges in self._edges.values() for edge in edges]

    def edge_count(self) -> int:
        return len(self.all_edges())

    # =========================================================================
    # EXPLICIT LINKS
    # =========================================================================

    def set_explicit_edge(self, edge: Edge):
        """Add or replace a manually configured link."""
        edge = Edge(
            edge.source_id, edge.dest_id, edge.channel,
            edge.ratio, edge.signal, edge.lqi, explicit=True
        )
        self._explicit[(edge.source_id, edge.dest_id, edge.channel)] = edge
        self.mark_dirty()

    def remove_explicit_edge(self, source_id: int, dest_id: int, channel: int = ANY_CHANNEL) -> bool:
        removed = self._explicit.pop((source_id, dest_id, channel), None)
        if removed is None:
            return False
        self.mark_dirty()
        return True

    def remove_edges_of(self, node_id: int) -> int:
        """Drop every explicit link touching a node. Returns the number removed."""
        keys = [k for k in self._explicit if node_id in (k[0], k[1])]
        for key in keys:
            del self._explicit[key]
        if keys:
            self.mark_dirty()
        return len(keys)

    def explicit_edges(self) -> List[Edge]:
        return list(self._explicit.values())

    def get_explicit_edge(self, source_id: int, dest_id: int, channel: int) -> Optional[Edge]:
        return self._explicit.get((source_id, dest_id, channel))

    # =========================================================================
    # RECOMPUTATION
    # =========================================================================

    def _ensure_fresh(self):
        if self.is_dirty:
            self._analyze_edges()

    def _analyze_edges(self):
        """Rebuild the whole edge table from current positions and membership."""
        radios = self.registry.radios()
        ids = [radio.node_id for radio in radios]
        registered = set(ids)

        # Explicit links with a vanished endpoint are purged for good
        stale = [k for k in self._explicit if k[0] not in registered or k[1] not in registered]
        for key in stale:
            logger.debug("Dropping explicit link %s -> %s: endpoint removed", key[0], key[1])
            del self._explicit[key]

        explicit_by_pair: Dict[Tuple[int, int], List[Edge]] = {}
        for edge in self._explicit.values():
            explicit_by_pair.setdefault((edge.source_id, edge.dest_id), []).append(edge)

        distances = compute_pairwise_distances(self.registry.positions(ids))

        edges: Dict[int, List[Edge]] = {}
        for i, source_id in enumerate(ids):
            row: List[Edge] = []
            for j, dest_id in enumerate(ids):
                if i == j:
                    continue
                manual = explicit_by_pair.get((source_id, dest_id))
                if manual:
                    row.extend(manual)
                elif (distances[i, j] < self.interference_range
                        or self.both_are_gateways(source_id, dest_id)):
                    row.append(Edge(source_id, dest_id))
            edges[source_id] = row

        self._edges = edges
        self._revision = self.registry.revision
        self._dirty = False
        self.recompute_count += 1
        logger.debug(
            "Reachability graph recomputed: %d radios, %d edges",
            len(ids), sum(len(r) for r in edges.values())
        )


def _select_edge(edges: List[Edge], channel: int) -> Optional[Edge]:
    if not edges:
        return None
    if channel >= 0:
        for edge in edges:
            if edge.channel == channel:
                return edge
    for edge in edges:
        if edge.channel == ANY_CHANNEL:
            return edge
    # Only links bound to other channels: the resolver treats these as no effect
    return edges[0]
