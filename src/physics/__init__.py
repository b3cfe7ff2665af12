"""
Physics Module
==============

Contains the RF propagation calculations of the logistic loss medium:
    - logistic_loss: distance -> RSSI, RSSI -> packet reception rate
"""

from .logistic_loss import (
    TRANSMITTING_RANGE,
    INTERFERENCE_RANGE,
    PRR_FIFTY_PERCENT_OFFSET,
    PRR_SCALING_FACTOR,
    RSSI_RANGE,
    MIN_RSSI,
    MAX_RSSI,
    CO_CHANNEL_REJECTION,
    normalized_distance,
    mean_rssi,
    noisy_rssi,
    model_good_link_prr,
    model_link_prr,
    rx_success_probability,
    reception_succeeds,
    compute_pairwise_distances,
)
