"""
Simulation Module
=================

Discrete-event harness around the radio medium:
    - config: Simulation configuration and presets
    - simulation: simpy-driven scheduler, traffic and teardown
    - metrics: Transmission outcome statistics
"""

from .config import (
    SimulationConfig,
    get_default_config,
    get_wearable_config,
    get_debug_config,
)
from .metrics import RollingStats, TransmissionStats
from .simulation import Simulation

__all__ = [
    "SimulationConfig",
    "get_default_config",
    "get_wearable_config",
    "get_debug_config",
    "RollingStats",
    "TransmissionStats",
    "Simulation",
]
