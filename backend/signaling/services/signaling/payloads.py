"""
Signaling Payload Normalization

Turns the loosely shaped payloads clients emit into the exact structures
forwarded to peers. SDP and candidate strings are never inspected or altered;
only the envelope around them is unwrapped.

SDP payloads are accepted in two wire shapes:
    {"sdp": "...", "type": "offer"}                  raw session description
    {"offer": {"sdp": "...", "type": "offer"}}       wrapped (also "answer")

ICE candidates are accepted flat or nested under a "candidate" key, and are
always forwarded flat.
"""
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional

from signaling.config.constants import ROOM_KEY_FIELD
from signaling.schemas.signaling import SessionDescription

from .exceptions import InvalidPayload


class SdpShape(str, Enum):
    RAW = "raw"
    WRAPPED_OFFER = "wrapped_offer"
    WRAPPED_ANSWER = "wrapped_answer"
    INVALID = "invalid"


class ParsedSdp(NamedTuple):
    shape: SdpShape
    description: Optional[SessionDescription] = None


def _as_description(value: Any) -> Optional[SessionDescription]:
    if not isinstance(value, dict):
        return None
    sdp = value.get("sdp")
    sdp_type = value.get("type")
    if isinstance(sdp, str) and isinstance(sdp_type, str):
        return SessionDescription(sdp=sdp, type=sdp_type)
    return None


def parse_sdp(payload: Any) -> ParsedSdp:
    """Classify an SDP payload by ordered shape matching: raw, then offer, then answer."""
    if not isinstance(payload, dict):
        return ParsedSdp(SdpShape.INVALID)

    description = _as_description(payload)
    if description is not None:
        return ParsedSdp(SdpShape.RAW, description)

    description = _as_description(payload.get("offer"))
    if description is not None:
        return ParsedSdp(SdpShape.WRAPPED_OFFER, description)

    description = _as_description(payload.get("answer"))
    if description is not None:
        return ParsedSdp(SdpShape.WRAPPED_ANSWER, description)

    return ParsedSdp(SdpShape.INVALID)


def normalize_sdp(payload: Any) -> Optional[SessionDescription]:
    """Return the `{sdp, type}` carried by either wire shape, or None if there is none."""
    return parse_sdp(payload).description


def extract_candidate(payload: Any) -> Dict[str, Any]:
    """
    Pull the flat ICE candidate object out of a payload.

    A dict under "candidate" wins; otherwise the payload itself must be the
    candidate, in which case the roomKey envelope field is stripped. The
    returned object is never re-wrapped.
    """
    if not isinstance(payload, dict):
        raise InvalidPayload("candidate payload must be an object")

    nested = payload.get("candidate")
    if isinstance(nested, dict):
        candidate = nested
    else:
        candidate = {k: v for k, v in payload.items() if k != ROOM_KEY_FIELD}

    if not isinstance(candidate.get("candidate"), str):
        raise InvalidPayload("candidate object must have a string 'candidate' field")
    return candidate


def resolve_room_key(args: List[Any]) -> Any:
    """
    Find the target room for a relay event.

    `roomKey` inside the first argument takes precedence; older clients pass
    the room as a second positional argument instead.
    """
    payload = args[0] if args else None
    if isinstance(payload, dict) and ROOM_KEY_FIELD in payload:
        return payload[ROOM_KEY_FIELD]
    if len(args) > 1:
        return args[1]
    return None
