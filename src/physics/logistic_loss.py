"""
Logistic Loss Propagation Module
================================

This module implements the distance-based RSSI model and the logistic
packet reception rate (PRR) curve used by the radio medium.

RSSI Model (in dBm):
    rssi(d) = MIN_RSSI + (1 - min(1, d / R)) * RSSI_RANGE

where:
    d = distance between transmitter and receiver
    R = transmitting range (at this distance the RSSI is minimal)

PRR Model:
    PRR(rssi) = 1 / (1 + exp(-(rssi - PRR_50) * k))

where:
    PRR_50 = RSSI at which 50% of packets are received
    k      = scaling factor in (0, 1], smaller values give a flatter curve

The curve is split into three pieces to avoid asymptote artifacts:
    rssi <= MIN_RSSI          -> 0
    rssi <= MIN_RSSI + 1      -> steep "good link" curve centered at MIN_RSSI + 5
    rssi >= MAX_RSSI + 5      -> 1
    otherwise                 -> logistic curve above

Author: Logistic Loss Medium Team
"""

import numpy as np
from scipy.special import expit
from scipy.spatial.distance import cdist
from typing import Union

# =============================================================================
# PROPAGATION CONSTANTS
# =============================================================================

# At this distance, the RSSI is minimal
TRANSMITTING_RANGE = 10.0
INTERFERENCE_RANGE = TRANSMITTING_RANGE

# At this RSSI, 50% of packets are received (dBm)
PRR_FIFTY_PERCENT_OFFSET = -75.0

# Slope scaling of the packet loss curve, must be in (0, 1]
PRR_SCALING_FACTOR = 0.2

# The range from ~0% PRR to ~100% PRR (dB)
RSSI_RANGE = 50.0

# Close to 0% PRR (dBm)
MIN_RSSI = -97.0

# Close to 100% PRR (dBm)
MAX_RSSI = MIN_RSSI + RSSI_RANGE

# Co-channel rejection margin of 802.15.4 radios (dB)
CO_CHANNEL_REJECTION = 3.0

# Offset of the "good link" curve above MIN_RSSI (dB)
GOOD_LINK_OFFSET = 5.0

# Margin above MAX_RSSI past which reception always succeeds (dB)
SATURATION_MARGIN = 5.0


# =============================================================================
# RSSI CALCULATIONS
# =============================================================================

def normalized_distance(
    distance: Union[float, np.ndarray],
    transmitting_range: float = TRANSMITTING_RANGE
) -> Union[float, np.ndarray]:
    """
    Normalize a distance to the transmitting range, saturating at 1.

    Args:
        distance: Distance(s) between transmitter and receiver
        transmitting_range: Range at which the RSSI reaches MIN_RSSI

    Returns:
        min(1, distance / transmitting_range)
    """
    return np.minimum(1.0, np.asarray(distance, dtype=np.float64) / transmitting_range)


def mean_rssi(
    distance: Union[float, np.ndarray],
    transmitting_range: float = TRANSMITTING_RANGE,
    min_rssi: float = MIN_RSSI,
    rssi_range: float = RSSI_RANGE
) -> Union[float, np.ndarray]:
    """
    Compute the noiseless RSSI at a given distance.

    Linear interpolation from MAX_RSSI at distance 0 down to MIN_RSSI at
    the transmitting range (and beyond).

    Args:
        distance: Distance(s) between transmitter and receiver
        transmitting_range: Range at which the RSSI reaches min_rssi
        min_rssi: RSSI at (and beyond) the transmitting range (dBm)
        rssi_range: Span between min and max RSSI (dB)

    Returns:
        Mean RSSI in dBm (float for scalar input)

    Example:
        >>> mean_rssi(5.0)   # halfway across a 10-unit range
        -72.0
        >>> mean_rssi(0.0)
        -47.0
    """
    d = normalized_distance(distance, transmitting_range)
    rssi = min_rssi + (1.0 - d) * rssi_range
    return float(rssi) if np.ndim(rssi) == 0 else rssi


def noisy_rssi(
    distance: float,
    rng: np.random.RandomState,
    transmitting_range: float = TRANSMITTING_RANGE,
    min_rssi: float = MIN_RSSI,
    rssi_range: float = RSSI_RANGE
) -> float:
    """
    Mean RSSI plus additive white Gaussian noise sampled from N(0, 1).

    Only used for reporting instantaneous signal strength; delivery
    decisions use the noiseless mean.
    """
    awgn = rng.standard_normal()
    return mean_rssi(distance, transmitting_range, min_rssi, rssi_range) + float(awgn)


# =============================================================================
# PRR CALCULATIONS
# =============================================================================

def model_good_link_prr(
    rssi: Union[float, np.ndarray],
    min_rssi: float = MIN_RSSI
) -> Union[float, np.ndarray]:
    """
    Steep logistic curve for very weak links.

    Centered GOOD_LINK_OFFSET dB above min_rssi with unit slope.
    """
    x = np.asarray(rssi, dtype=np.float64) - (min_rssi + GOOD_LINK_OFFSET)
    prr = expit(x)
    return float(prr) if np.ndim(prr) == 0 else prr


def model_link_prr(
    rssi: Union[float, np.ndarray],
    min_rssi: float = MIN_RSSI,
    rssi_range: float = RSSI_RANGE,
    fifty_percent_offset: float = PRR_FIFTY_PERCENT_OFFSET,
    scaling_factor: float = PRR_SCALING_FACTOR
) -> Union[float, np.ndarray]:
    """
    Packet reception rate for a given RSSI.

    Branch boundaries (checked in this order):
        1. rssi <= min_rssi               -> 0.0
        2. rssi <= min_rssi + 1           -> model_good_link_prr(rssi)
        3. rssi >= max_rssi + 5           -> 1.0
        4. otherwise                      -> 1 / (1 + exp(-(rssi - offset) * k))

    Args:
        rssi: RSSI value(s) in dBm
        min_rssi: RSSI close to 0% PRR
        rssi_range: Span from min_rssi to max_rssi
        fifty_percent_offset: RSSI at which 50% of packets are received
        scaling_factor: Slope scaling k in (0, 1]

    Returns:
        PRR in [0, 1] (float for scalar input)

    Example:
        >>> model_link_prr(-75.0)
        0.5
        >>> model_link_prr(-97.0)
        0.0
    """
    r = np.asarray(rssi, dtype=np.float64)
    max_rssi = min_rssi + rssi_range

    conditions = [
        r <= min_rssi,
        r <= min_rssi + 1.0,
        r >= max_rssi + SATURATION_MARGIN,
    ]
    choices = [
        np.zeros_like(r),
        model_good_link_prr(r, min_rssi),
        np.ones_like(r),
    ]
    logistic = expit((r - fifty_percent_offset) * scaling_factor)
    prr = np.select(conditions, choices, default=logistic)

    return float(prr) if np.ndim(prr) == 0 else prr


def rx_success_probability(
    distance: Union[float, np.ndarray],
    transmitting_range: float = TRANSMITTING_RANGE,
    min_rssi: float = MIN_RSSI,
    rssi_range: float = RSSI_RANGE,
    fifty_percent_offset: float = PRR_FIFTY_PERCENT_OFFSET,
    scaling_factor: float = PRR_SCALING_FACTOR
) -> Union[float, np.ndarray]:
    """
    Probability that a packet sent over the given distance is received.

    Evaluates the PRR curve at the noiseless mean RSSI.
    """
    rssi = mean_rssi(distance, transmitting_range, min_rssi, rssi_range)
    return model_link_prr(rssi, min_rssi, rssi_range, fifty_percent_offset, scaling_factor)


def reception_succeeds(prr: float, rng: np.random.RandomState) -> bool:
    """
    Draw u ~ Uniform(0, 1) and deliver iff u < prr.
    """
    return bool(rng.random_sample() < prr)


def compute_pairwise_distances(positions: np.ndarray) -> np.ndarray:
    """
    Euclidean distance matrix for an (N, 3) array of positions.

    Args:
        positions: Radio positions, shape (N, 3)

    Returns:
        Distance matrix of shape (N, N)
    """
    if positions.shape[0] == 0:
        return np.zeros((0, 0))
    return cdist(positions, positions)
