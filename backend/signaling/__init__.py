"""WebRTC signaling relay: room-scoped forwarding of SDP offers, answers and ICE candidates."""

__version__ = "1.0.0"
