"""
Signaling Module

Payload normalization, acknowledgement handles and relay errors.
The relay itself lives in `signaling.services.signaling.relay`.
"""
from .ack import Ack
from .exceptions import SignalingError, InvalidRoomKey, InvalidPayload
from .payloads import (
    SdpShape,
    ParsedSdp,
    parse_sdp,
    normalize_sdp,
    extract_candidate,
    resolve_room_key,
)

__all__ = [
    "Ack",
    "SignalingError",
    "InvalidRoomKey",
    "InvalidPayload",
    "SdpShape",
    "ParsedSdp",
    "parse_sdp",
    "normalize_sdp",
    "extract_candidate",
    "resolve_room_key",
]
