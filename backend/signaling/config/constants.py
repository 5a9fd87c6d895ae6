"""
Signaling protocol constants.

Event names and reply messages shared by the relay, the WebSocket session
and the smoke client.

Note: Environment-dependent settings (port, origins, limits) belong in settings.py.
"""

# ==============================================================================
# INBOUND EVENTS (client -> relay)
# ==============================================================================

EVENT_JOIN_ROOM: str = "join-room"
EVENT_LEAVE_ROOM: str = "leave-room"
EVENT_OFFER_SENT: str = "offer-sent"
EVENT_ANSWER_SENT: str = "answer-sent"
EVENT_ICE_CANDIDATE_SENT: str = "ice-candidate-sent"
EVENT_PING_SERVER: str = "ping-server"

# ==============================================================================
# OUTBOUND EVENTS (relay -> room peers)
# ==============================================================================

EVENT_OFFER_RECEIVED: str = "offer-received"
EVENT_ANSWER_RECEIVED: str = "answer-received"
EVENT_ICE_CANDIDATE_RECEIVED: str = "ice-candidate-received"

# Sent once to a connection right after the socket is accepted
EVENT_CONNECTED: str = "connected"

# Frame name used for acknowledgement replies
EVENT_ACK: str = "ack"

# ==============================================================================
# PAYLOAD FIELDS
# ==============================================================================

# Envelope field naming the target room inside offer/answer/candidate payloads
ROOM_KEY_FIELD: str = "roomKey"

# ==============================================================================
# ACK MESSAGES
# ==============================================================================

MSG_INVALID_ROOM_KEY: str = "roomKey must be a non-empty string"
MSG_INTERNAL_ERROR: str = "Internal error"
MSG_UNKNOWN_EVENT: str = "Unknown event"

# ==============================================================================
# WEBSOCKET CLOSE CODES
# ==============================================================================

# Policy violation (RFC 6455), used for rejected origins
WS_CLOSE_POLICY_VIOLATION: int = 1008
