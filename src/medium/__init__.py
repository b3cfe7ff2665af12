"""
Medium Module
=============

Radio medium of the discrete-event wireless simulator.
    - radio: Radio state and channel semantics
    - registry: Registered radios and change revisions
    - reachability_graph: Cached potential-receiver graph
    - connection: Outcome of one transmission
    - resolver: Destination / interference decisions and capture
    - signal_strength: Reported RSSI refresh
    - logistic_loss_medium: Scheduler-facing medium
    - config: Propagation parameters
"""

from .config import MediumConfig, SS_STRONG, SS_NOTHING
from .radio import Radio, ANY_CHANNEL, channels_mismatch
from .registry import RadioRegistry
from .reachability_graph import Edge, ReachabilityGraph
from .connection import Connection
from .context import MediumContext
from .resolver import ConnectionResolver
from .signal_strength import SignalStrengthUpdater
from .logistic_loss_medium import LogisticLossMedium

__all__ = [
    "MediumConfig",
    "SS_STRONG",
    "SS_NOTHING",
    "Radio",
    "ANY_CHANNEL",
    "channels_mismatch",
    "RadioRegistry",
    "Edge",
    "ReachabilityGraph",
    "Connection",
    "MediumContext",
    "ConnectionResolver",
    "SignalStrengthUpdater",
    "LogisticLossMedium",
]
