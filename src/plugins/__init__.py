"""
Plugins Module
==============

Collaborators layered on top of the radio medium:
    - topology: Add/remove nodes and explicit point-to-point links
    - mobility: Time-indexed position replay
"""

from .topology import TopologyEditor, LinkRecord, parse_links
from .mobility import MobilityReplay, Move, parse_moves

__all__ = [
    "TopologyEditor",
    "LinkRecord",
    "parse_links",
    "MobilityReplay",
    "Move",
    "parse_moves",
]
