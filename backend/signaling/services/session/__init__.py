"""
Session management module.

Provides the ConnectionSession that wires one WebSocket to the relay.
"""
from .orchestrator import ConnectionSession

__all__ = ["ConnectionSession"]
