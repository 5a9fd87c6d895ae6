"""
WebSocket Router - Signaling Endpoint

This is the thin routing layer that checks the origin and delegates to
ConnectionSession for everything else.
"""
import logging
from typing import List

from fastapi import APIRouter, WebSocket

from signaling.config.constants import WS_CLOSE_POLICY_VIOLATION
from signaling.services.session import ConnectionSession

logger = logging.getLogger(__name__)

router = APIRouter()


def is_origin_allowed(origin: str, allowed_origins: List[str]) -> bool:
    """Requests without an Origin header (non-browser clients) are allowed."""
    if not origin:
        return True
    return "*" in allowed_origins or origin in allowed_origins


@router.websocket("/ws")
async def ws_endpoint(websocket: WebSocket):
    """
    WebSocket endpoint for signaling.

    Frames are JSON text: {"event": str, "args": [...], "ack": int?}

    Events:
        - join-room(roomKey) / leave-room(roomKey), ack optional
        - offer-sent / answer-sent({sdp, type, roomKey} or {offer|answer: {...}, roomKey})
        - ice-candidate-sent({candidate, ..., roomKey} or {candidate: {...}, roomKey})
        - ping-server, ack required for a reply
    """
    state = websocket.app.state
    origin = websocket.headers.get("origin", "")

    if not is_origin_allowed(origin, state.settings.ALLOWED_ORIGINS):
        logger.warning(f"WebSocket connection rejected: origin {origin} not allowed")
        await websocket.close(code=WS_CLOSE_POLICY_VIOLATION)
        return

    await websocket.accept()

    session = ConnectionSession(
        websocket=websocket,
        relay=state.relay,
        max_payload_bytes=state.settings.MAX_PAYLOAD_BYTES,
        max_pending=state.settings.OUTBOX_MAX_MESSAGES
    )
    await session.run()
