"""
Simulation Configuration Module
===============================

Centralized configuration for a simulation run: the medium's propagation
parameters plus the harness settings.

Author: Logistic Loss Medium Team
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any
import json
from pathlib import Path

from medium.config import MediumConfig


@dataclass
class SimulationConfig:
    """Complete simulation configuration."""

    medium: MediumConfig = field(default_factory=MediumConfig)

    # Topology
    num_radios: int = 10            # Radios created when no link file is given
    arena_size: float = 20.0        # Side of the square radios are scattered in
    channel: int = 26               # Channel all generated radios tune to

    # Traffic
    duration: float = 60.0          # Simulated seconds
    tx_interval: float = 1.0        # Mean time between transmissions per radio (s)
    packet_duration: float = 0.004  # Airtime of one packet (s)

    # Collaborators
    mobility_file: Optional[str] = None
    mobility_wrap: bool = True
    links_file: Optional[str] = None

    # Output
    output_dir: str = "outputs"
    experiment_name: str = "logistic_loss"
    log_level: str = "INFO"

    seed: int = 42

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "medium": self.medium.to_dict(),
            "num_radios": self.num_radios,
            "arena_size": self.arena_size,
            "channel": self.channel,
            "duration": self.duration,
            "tx_interval": self.tx_interval,
            "packet_duration": self.packet_duration,
            "mobility_file": self.mobility_file,
            "mobility_wrap": self.mobility_wrap,
            "links_file": self.links_file,
            "output_dir": self.output_dir,
            "experiment_name": self.experiment_name,
            "log_level": self.log_level,
            "seed": self.seed,
        }

    def save(self, path: str):
        """Save configuration to JSON."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: str) -> "SimulationConfig":
        """Load configuration from JSON."""
        with open(path, "r") as f:
            data = json.load(f)

        config = cls()

        if "medium" in data:
            config.medium = MediumConfig.from_dict(data["medium"])

        for k, v in data.items():
            if k != "medium" and hasattr(config, k):
                setattr(config, k, v)

        return config


# =============================================================================
# PRESETS
# =============================================================================

def get_default_config() -> SimulationConfig:
    """Reference medium parameters, no gateway rule."""
    return SimulationConfig()


def get_wearable_config() -> SimulationConfig:
    """Wearable deployment: node ids below 192 form an always-connected backbone."""
    config = SimulationConfig()
    config.medium.gateway_id_threshold = 192
    return config


def get_debug_config() -> SimulationConfig:
    """Small, short and verbose."""
    config = SimulationConfig()
    config.num_radios = 4
    config.arena_size = 10.0
    config.duration = 5.0
    config.log_level = "DEBUG"
    return config
