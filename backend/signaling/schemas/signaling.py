"""
Signaling Schemas

Pydantic models for the WebSocket frame envelope, the normalized session
description and acknowledgement results.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Wire Frames
# =============================================================================

class ClientFrame(BaseModel):
    """Inbound frame: an event name, its positional arguments and an optional ack id."""
    event: str
    args: List[Any] = Field(default_factory=list)
    ack: Optional[int] = None


class ServerFrame(BaseModel):
    """Outbound frame. `ack` is only set on acknowledgement replies."""
    event: str
    args: List[Any] = Field(default_factory=list)
    ack: Optional[int] = None

    def to_wire(self) -> dict:
        # Args are relayed as-is; None values inside them must survive.
        data = {"event": self.event, "args": self.args}
        if self.ack is not None:
            data["ack"] = self.ack
        return data


# =============================================================================
# Signaling Payloads
# =============================================================================

class SessionDescription(BaseModel):
    """Normalized SDP offer or answer. The strings are relayed untouched."""
    model_config = ConfigDict(frozen=True, strict=True)

    sdp: str
    type: str


# =============================================================================
# Acknowledgements
# =============================================================================

class AckResult(BaseModel):
    """
    Result delivered to a caller that asked for an acknowledgement.

    Success: {ok: true, room?, peers?, time?}
    Failure: {ok: false, message}
    """
    ok: bool
    room: Optional[str] = None
    peers: Optional[int] = None
    time: Optional[int] = None
    message: Optional[str] = None

    @classmethod
    def success(cls, **fields: Any) -> "AckResult":
        return cls(ok=True, **fields)

    @classmethod
    def failure(cls, message: str) -> "AckResult":
        return cls(ok=False, message=message)

    def to_wire(self) -> dict:
        return self.model_dump(exclude_none=True)
