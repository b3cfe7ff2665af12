"""
Logistic Loss Medium
====================

Radio propagation and interference engine for discrete-event wireless
network simulation. Received signal strength falls linearly with distance
and the packet reception rate follows a logistic curve of the RSSI.

Modules:
    - physics: Distance -> RSSI -> PRR propagation model
    - medium: Radios, reachability graph, connection resolution, capture
    - plugins: Topology editing and mobility replay
    - simulation: simpy scheduler harness, configuration, statistics
"""

__version__ = "1.0.0"
__author__ = "Logistic Loss Medium Team"
