"""
Room Registry

Authoritative mapping from room key to member connections:
- Join / leave / leave-all on disconnect
- Fan-out snapshots excluding the sender
- Room size lookups
"""
import asyncio
import logging
from typing import Any, Dict, FrozenSet, List

from signaling.services.signaling.exceptions import InvalidRoomKey

from .models import Connection

logger = logging.getLogger(__name__)


def validate_room_key(room_key: Any) -> str:
    """Return the key unchanged if it is a non-empty string, else raise InvalidRoomKey."""
    if not isinstance(room_key, str) or room_key == "":
        raise InvalidRoomKey(room_key)
    return room_key


class RoomRegistry:
    """
    Tracks which live connections belong to which room.

    Every mutation and every fan-out snapshot runs under one lock, so a
    room's member set is never observed half-updated. Rooms with no
    members are dropped, which makes them indistinguishable from rooms
    that never existed.
    """

    def __init__(self):
        # room_key -> {connection_id: Connection}
        self._rooms: Dict[str, Dict[str, Connection]] = {}
        # connection_id -> set of room keys (for leave_all)
        self._memberships: Dict[str, set] = {}
        self._lock = asyncio.Lock()

    # === Mutations ===

    async def join(self, connection: Connection, room_key: Any) -> None:
        """Add a connection to a room. Joining twice has no additional effect."""
        room_key = validate_room_key(room_key)

        async with self._lock:
            members = self._rooms.setdefault(room_key, {})
            is_new = connection.id not in members
            members[connection.id] = connection
            self._memberships.setdefault(connection.id, set()).add(room_key)
            size = len(members)

        if is_new:
            logger.info(f"Connection {connection.id} joined room {room_key} (members: {size})")
        else:
            logger.debug(f"Connection {connection.id} already in room {room_key}")

    async def leave(self, connection: Connection, room_key: Any) -> None:
        """Remove a connection from a room. Removing a non-member is a no-op."""
        async with self._lock:
            removed = self._remove(connection.id, room_key)

        if removed:
            logger.info(f"Connection {connection.id} left room {room_key}")

    async def leave_all(self, connection: Connection) -> List[str]:
        """Remove a connection from every room it belongs to. Returns the rooms it left."""
        async with self._lock:
            room_keys = list(self._memberships.get(connection.id, ()))
            for room_key in room_keys:
                self._remove(connection.id, room_key)

        if room_keys:
            logger.info(f"Connection {connection.id} removed from rooms: {room_keys}")
        return room_keys

    def _remove(self, connection_id: str, room_key: Any) -> bool:
        # Caller holds the lock
        members = self._rooms.get(room_key) if isinstance(room_key, str) else None
        if not members or connection_id not in members:
            return False

        del members[connection_id]
        if not members:
            del self._rooms[room_key]

        rooms = self._memberships.get(connection_id)
        if rooms is not None:
            rooms.discard(room_key)
            if not rooms:
                del self._memberships[connection_id]
        return True

    # === Fan-out ===

    async def members_except(self, room_key: Any, connection: Connection) -> List[Connection]:
        """Snapshot of the room's members other than `connection`."""
        async with self._lock:
            members = self._rooms.get(room_key) if isinstance(room_key, str) else None
            if not members:
                return []
            return [conn for conn_id, conn in members.items() if conn_id != connection.id]

    # === Query Methods ===

    def size(self, room_key: Any) -> int:
        """Number of members in a room, 0 for unknown rooms."""
        if not isinstance(room_key, str):
            return 0
        return len(self._rooms.get(room_key, {}))

    def rooms_of(self, connection: Connection) -> FrozenSet[str]:
        """Rooms a connection currently belongs to."""
        return frozenset(self._memberships.get(connection.id, ()))

    def room_count(self) -> int:
        return len(self._rooms)

    def connection_count(self) -> int:
        """Connections that belong to at least one room."""
        return len(self._memberships)
