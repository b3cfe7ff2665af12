"""
Logistic Loss Medium Tests Package
==================================

Unit tests per component:
    - test_logistic_loss: RSSI and PRR curve, branch boundaries
    - test_reachability_graph: Candidates, lazy recomputation, explicit links
    - test_resolver: Destinations, interference, capture
    - test_signal_strength: Reported RSSI refresh
    - test_topology: Mote and link editing
    - test_mobility: Trace parsing and timed replay
    - test_simulation: simpy harness and statistics
    - test_config: Validation, persistence and presets
"""
