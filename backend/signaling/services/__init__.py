"""Relay services.

Service Categories:
- Rooms: room membership registry and the Connection handle
- Signaling: payload normalization, acks and the event relay
- Session: per-WebSocket frame loop wiring transport to relay
"""
