"""
Signal Strength Module
======================

Refreshes the scalar signal strength every radio reports, for diagnostics
and visualization. Independent of the delivery decisions already made.

Update Pass:
    1. Reset every radio to its baseline (per-radio base RSSI or SS_NOTHING)
    2. Sources of active connections are raised to SS_STRONG
    3. Destinations are raised to the noisy RSSI of the link
    4. Interfered radios are raised likewise

Values are only ever raised within a pass (maximum over contributions).
Channel-mismatched pairs contribute nothing; gateway pairs always
contribute SS_STRONG.

Author: Logistic Loss Medium Team
"""

from .context import MediumContext
from .radio import Radio, channels_mismatch
from .connection import Connection


class SignalStrengthUpdater:
    """Recomputes current_signal_strength over all active connections."""

    def __init__(self, context: MediumContext):
        self.ctx = context

    def base_rssi(self, radio: Radio) -> float:
        if radio.base_rssi is not None:
            return radio.base_rssi
        return self.ctx.config.ss_nothing

    def update(self):
        ctx = self.ctx
        strong = ctx.config.ss_strong

        for radio in ctx.registry.radios():
            radio.current_signal_strength = self.base_rssi(radio)

        connections = list(ctx.active_connections)

        for conn in connections:
            _raise(conn.source, strong)
            for dest in conn.get_destinations():
                self._contribute(conn, dest)

        for conn in connections:
            for radio in conn.get_interfered():
                self._contribute(conn, radio)

    def _contribute(self, conn: Connection, radio: Radio):
        ctx = self.ctx
        source = conn.source

        if ctx.both_are_gateways(source, radio):
            _raise(radio, ctx.config.ss_strong)
            return

        if channels_mismatch(source, radio):
            return

        edge = ctx.graph.get_edge(source.node_id, radio.node_id, source.channel)
        _raise(radio, ctx.noisy_rssi(source, radio, edge))


def _raise(radio: Radio, value: float):
    if radio.current_signal_strength < value:
        radio.current_signal_strength = value
