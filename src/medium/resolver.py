"""
Connection Resolver Module
==========================

Decides, for one transmitting radio, which candidate radios receive the
packet and which are interfered.

Per candidate R of sender S (in the sender's edge order):
    1. Gateway pair          -> destination, no further checks
    2. Explicit link bound
       to another channel    -> no effect
    3. Channel mismatch      -> interfered (dormant, the receiver is simply
                                not listening on this channel right now)
    4. Out of range          -> no effect (explicit links skip this check)
    5. R is off              -> interfered, R's reception is disrupted
    6. R interfered or
       transmitting          -> interfered
    7. Otherwise             -> probabilistic reception; if R is already
                                receiving, capture contention decides

Capture Contention (margin = co-channel rejection, mean RSSI only):
    old > new + margin  -> keep old, new attempt interfered
    new > old + margin  -> every active connection naming R as destination
                           is amended to interfere R; new proceeds
    otherwise           -> both interfered

The retroactive step only revisits connections that already exist.
A stronger transmission resolved later does not rescue a weaker one that
was already interfered.

Author: Logistic Loss Medium Team
"""

import logging
from typing import Optional

from physics.logistic_loss import reception_succeeds

from .connection import Connection
from .context import MediumContext
from .radio import Radio, channels_mismatch
from .reachability_graph import Edge

logger = logging.getLogger(__name__)


class ConnectionResolver:
    """
    Builds a Connection per transmission from the reachability graph.

    Example:
        >>> resolver = ConnectionResolver(context)
        >>> conn = resolver.resolve(sender)
        >>> [r.node_id for r in conn.get_destinations()]
        [2]
    """

    def __init__(self, context: MediumContext):
        self.ctx = context

    def resolve(self, sender: Radio) -> Connection:
        """
        Resolve a transmission from sender against all its candidates.

        An unregistered sender yields an empty connection. Candidates that
        left the registry since the graph was cached are skipped.
        """
        connection = Connection(sender)
        registry = self.ctx.registry

        if registry.get_radio(sender.node_id) is not sender:
            logger.debug("Sender %s is not registered, no candidates", sender.node_id)
            return connection

        for edge in self.ctx.graph.get_receiver_edges(sender.node_id, sender.channel):
            recv = registry.get_radio(edge.dest_id)
            if recv is None:
                logger.debug("Candidate %s vanished, skipping", edge.dest_id)
                continue
            self._resolve_candidate(sender, recv, edge, connection)

        return connection

    # =========================================================================
    # PER-CANDIDATE RULES
    # =========================================================================

    def _resolve_candidate(self, sender: Radio, recv: Radio, edge: Edge, connection: Connection):
        ctx = self.ctx

        if ctx.both_are_gateways(sender, recv):
            connection.add_destination(recv)
            return

        # Explicit links bound to a channel only carry that channel
        if edge.explicit and edge.channel >= 0 and sender.channel >= 0 \
                and edge.channel != sender.channel:
            return

        if channels_mismatch(sender, recv):
            connection.add_interfered(recv)
            return

        if not edge.explicit and sender.distance_to(recv) > ctx.config.transmitting_range:
            return

        if not recv.on:
            connection.add_interfered(recv)
            recv.interfere_any_reception()
            return

        if recv.interfered or recv.transmitting:
            connection.add_interfered(recv)
            return

        receive_new_ok = reception_succeeds(ctx.success_probability(sender, recv, edge), ctx.rng)

        if recv.receiving:
            receive_new_ok = self._contend(sender, recv, edge, receive_new_ok)

        if receive_new_ok:
            connection.add_destination(recv)
            logger.debug("%s: tx to %s", sender.node_id, recv.node_id)
        else:
            connection.add_interfered(recv)
            logger.debug("%s: interfere to %s", sender.node_id, recv.node_id)

    def _contend(self, sender: Radio, recv: Radio, edge: Edge, receive_new_ok: bool) -> bool:
        """Capture contention against the strongest ongoing reception at recv."""
        margin = self.ctx.config.co_channel_rejection
        old_signal = self.strongest_prior_signal(recv)
        new_signal = self.ctx.mean_rssi(sender, recv, edge)

        if old_signal - margin > new_signal:
            logger.debug("%s: keep old at %s", sender.node_id, recv.node_id)
            return False

        if new_signal - margin > old_signal:
            logger.debug("%s: keep new at %s", sender.node_id, recv.node_id)
        else:
            logger.debug("%s: interfere both at %s", sender.node_id, recv.node_id)
            receive_new_ok = False

        for conn in self.ctx.active_connections:
            if conn.is_destination(recv):
                conn.add_interfered(recv)
        recv.interfere_any_reception()

        return receive_new_ok

    def strongest_prior_signal(self, recv: Radio) -> float:
        """
        Highest mean RSSI among active connections delivering to recv.

        Falls back to the radio's reported signal strength when no active
        connection names it as a destination.
        """
        strongest: Optional[float] = None
        for conn in self.ctx.active_connections:
            if not conn.is_destination(recv):
                continue
            edge = self.ctx.graph.get_edge(conn.source.node_id, recv.node_id, conn.source.channel)
            signal = self.ctx.mean_rssi(conn.source, recv, edge)
            if strongest is None or signal > strongest:
                strongest = signal
        if strongest is None:
            return recv.current_signal_strength
        return strongest
