"""
Room Membership Module

Exports the RoomRegistry and the Connection handle it tracks.
"""
from .models import Connection
from .registry import RoomRegistry, validate_room_key

__all__ = [
    "Connection",
    "RoomRegistry",
    "validate_room_key",
]
