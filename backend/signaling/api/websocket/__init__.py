"""
WebSocket API module.

Provides the WebSocket router for signaling traffic.
"""
from .router import router

__all__ = ["router"]
