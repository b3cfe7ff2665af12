"""
Medium Configuration Module
===========================

Simulation-wide propagation parameters of the logistic loss medium.
Read-only after the medium is constructed.

Author: Logistic Loss Medium Team
"""

from dataclasses import dataclass, asdict
from typing import Optional, Dict, Any, Callable
import json
from pathlib import Path

from physics.logistic_loss import (
    TRANSMITTING_RANGE,
    PRR_FIFTY_PERCENT_OFFSET,
    PRR_SCALING_FACTOR,
    RSSI_RANGE,
    MIN_RSSI,
    CO_CHANNEL_REJECTION,
)

# Signal strength reported for a transmitting radio (dBm)
SS_STRONG = -10.0

# Signal strength reported when nothing is heard (dBm)
SS_NOTHING = -100.0


@dataclass
class MediumConfig:
    """Propagation and signal-strength parameters."""

    # Geometry
    transmitting_range: float = TRANSMITTING_RANGE
    interference_range: Optional[float] = None   # None: same as transmitting_range

    # PRR curve
    prr_fifty_percent_offset: float = PRR_FIFTY_PERCENT_OFFSET
    prr_scaling_factor: float = PRR_SCALING_FACTOR
    rssi_range: float = RSSI_RANGE
    min_rssi: float = MIN_RSSI

    # Capture
    co_channel_rejection: float = CO_CHANNEL_REJECTION

    # Reported signal strengths
    ss_strong: float = SS_STRONG
    ss_nothing: float = SS_NOTHING

    # Radios with ids below this threshold are always mutually reachable.
    # None disables the rule.
    gateway_id_threshold: Optional[int] = None

    def __post_init__(self):
        if self.interference_range is None:
            self.interference_range = self.transmitting_range
        if self.transmitting_range <= 0:
            raise ValueError(f"transmitting_range must be positive, got {self.transmitting_range}")
        if self.interference_range <= 0:
            raise ValueError(f"interference_range must be positive, got {self.interference_range}")
        if self.rssi_range <= 0:
            raise ValueError(f"rssi_range must be positive, got {self.rssi_range}")
        if not 0.0 < self.prr_scaling_factor <= 1.0:
            raise ValueError(
                f"prr_scaling_factor must be in (0, 1], got {self.prr_scaling_factor}"
            )
        if self.co_channel_rejection < 0:
            raise ValueError(
                f"co_channel_rejection must be non-negative, got {self.co_channel_rejection}"
            )

    @property
    def max_rssi(self) -> float:
        """RSSI close to 100% PRR."""
        return self.min_rssi + self.rssi_range

    def gateway_predicate(self) -> Callable[[int], bool]:
        """Build the privileged-id predicate from the configured threshold."""
        threshold = self.gateway_id_threshold
        if threshold is None:
            return lambda node_id: False
        return lambda node_id: node_id < threshold

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MediumConfig":
        """Build from a dictionary, ignoring unknown keys."""
        known = cls.__dataclass_fields__.keys()
        return cls(**{k: v for k, v in data.items() if k in known})

    def save(self, path: str):
        """Save configuration to JSON."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: str) -> "MediumConfig":
        """Load configuration from JSON."""
        with open(path, "r") as f:
            data = json.load(f)
        return cls.from_dict(data)
