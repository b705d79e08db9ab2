"""
Config - Environment loading and the network registry.
"""

from .env import load_env
from .networks import NETWORKS, Network, activate, get_network

__all__ = ["NETWORKS", "Network", "activate", "get_network", "load_env"]
