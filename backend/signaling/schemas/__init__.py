"""
Schemas Package

Pydantic models for WebSocket frames and signaling payloads.
"""

from signaling.schemas.signaling import (
    ClientFrame,
    ServerFrame,
    SessionDescription,
    AckResult,
)

__all__ = [
    "ClientFrame",
    "ServerFrame",
    "SessionDescription",
    "AckResult",
]
