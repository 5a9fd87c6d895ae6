"""
Signaling Exceptions

Custom exceptions for relay errors.
"""
from typing import Any

from signaling.config.constants import MSG_INVALID_ROOM_KEY


class SignalingError(Exception):
    """Base exception for signaling relay errors"""
    pass


class InvalidRoomKey(SignalingError):
    """Raised when a room operation is given an empty or non-string key"""

    def __init__(self, room_key: Any = None):
        self.room_key = room_key
        super().__init__(MSG_INVALID_ROOM_KEY)


class InvalidPayload(SignalingError):
    """Raised when an offer, answer or candidate payload fails shape validation"""
    pass
