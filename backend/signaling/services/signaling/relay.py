"""
Signaling Relay

Event-level protocol handling. Every inbound event goes through the same
steps: validate, normalize, look up the fan-out set, forward, and
optionally acknowledge. No handshake state is kept; sequencing the
offer/answer/candidate exchange is up to the clients.
"""
import logging
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional

from signaling.config.constants import (
    EVENT_JOIN_ROOM,
    EVENT_LEAVE_ROOM,
    EVENT_OFFER_SENT,
    EVENT_ANSWER_SENT,
    EVENT_ICE_CANDIDATE_SENT,
    EVENT_PING_SERVER,
    EVENT_OFFER_RECEIVED,
    EVENT_ANSWER_RECEIVED,
    EVENT_ICE_CANDIDATE_RECEIVED,
    MSG_INTERNAL_ERROR,
    MSG_UNKNOWN_EVENT,
)
from signaling.schemas.signaling import AckResult
from signaling.services.rooms.models import Connection
from signaling.services.rooms.registry import RoomRegistry

from .ack import Ack
from .exceptions import InvalidPayload, InvalidRoomKey
from .payloads import extract_candidate, normalize_sdp, resolve_room_key

logger = logging.getLogger(__name__)

Handler = Callable[[Connection, List[Any], Optional[Ack]], Awaitable[None]]


class SignalingRelay:
    """
    Routes signaling events between members of the same room.

    The registry is injected so tests (and alternative transports) can
    supply their own.
    """

    def __init__(self, registry: RoomRegistry, clock: Callable[[], float] = time.time):
        self.registry = registry
        self._clock = clock
        self._handlers: Dict[str, Handler] = {
            EVENT_JOIN_ROOM: self._on_join_room,
            EVENT_LEAVE_ROOM: self._on_leave_room,
            EVENT_OFFER_SENT: self._on_offer_sent,
            EVENT_ANSWER_SENT: self._on_answer_sent,
            EVENT_ICE_CANDIDATE_SENT: self._on_ice_candidate_sent,
            EVENT_PING_SERVER: self._on_ping_server,
        }

    # === Connection Lifecycle ===

    async def connect(self, connection: Connection) -> None:
        logger.info(f"Client connected: {connection.id}")

    async def disconnect(self, connection: Connection, reason: str = "") -> None:
        """Drop the connection from every room it joined. Always succeeds."""
        connection.close()
        try:
            rooms = await self.registry.leave_all(connection)
        except Exception:
            logger.exception(f"Error removing {connection.id} from rooms")
            rooms = []
        logger.info(
            f"Client disconnected: {connection.id} ({reason or 'no reason'}), "
            f"left {len(rooms)} room(s), connected since "
            f"{connection.connected_at_wall.isoformat()} ({connection.uptime():.1f}s)"
        )

    # === Dispatch ===

    async def dispatch(
        self,
        connection: Connection,
        event: str,
        args: List[Any],
        ack: Optional[Ack] = None
    ) -> None:
        """
        Run the handler for one inbound event.

        Nothing raised by a handler escapes: room key errors become a failed
        ack, invalid signaling payloads are logged and dropped, anything else
        is logged and turned into an internal-error ack.
        """
        handler = self._handlers.get(event)
        if handler is None:
            logger.warning(f"Unknown event '{event}' from {connection.id}")
            if ack:
                ack.reply(AckResult.failure(MSG_UNKNOWN_EVENT))
            return

        try:
            await handler(connection, args, ack)

        except InvalidRoomKey as e:
            logger.warning(f"Rejected {event} from {connection.id}: {e} (got {e.room_key!r})")
            if ack:
                ack.reply(AckResult.failure(str(e)))

        except InvalidPayload as e:
            logger.warning(f"Dropped {event} from {connection.id}: {e}")

        except Exception:
            logger.exception(f"Error handling {event} from {connection.id}")
            if ack and not ack.done:
                ack.reply(AckResult.failure(MSG_INTERNAL_ERROR))

    # === Room Handlers ===

    async def _on_join_room(self, connection: Connection, args: List[Any], ack: Optional[Ack]) -> None:
        room_key = args[0] if args else None
        await self.registry.join(connection, room_key)

        if ack:
            peers = self.registry.size(room_key) - 1
            ack.reply(AckResult.success(room=room_key, peers=peers))

    async def _on_leave_room(self, connection: Connection, args: List[Any], ack: Optional[Ack]) -> None:
        room_key = args[0] if args else None
        if not isinstance(room_key, str):
            raise InvalidRoomKey(room_key)

        await self.registry.leave(connection, room_key)

        if ack:
            ack.reply(AckResult.success())

    async def _on_ping_server(self, connection: Connection, args: List[Any], ack: Optional[Ack]) -> None:
        if ack:
            ack.reply(AckResult.success(time=int(self._clock() * 1000)))

    # === Relay Handlers ===

    async def _on_offer_sent(self, connection: Connection, args: List[Any], ack: Optional[Ack]) -> None:
        await self._relay_description(connection, args, "offer", EVENT_OFFER_RECEIVED)

    async def _on_answer_sent(self, connection: Connection, args: List[Any], ack: Optional[Ack]) -> None:
        await self._relay_description(connection, args, "answer", EVENT_ANSWER_RECEIVED)

    async def _on_ice_candidate_sent(self, connection: Connection, args: List[Any], ack: Optional[Ack]) -> None:
        room_key = self._require_room_key(args)
        candidate = extract_candidate(args[0] if args else None)
        await self._forward(connection, room_key, EVENT_ICE_CANDIDATE_RECEIVED, candidate)

    async def _relay_description(
        self,
        connection: Connection,
        args: List[Any],
        kind: str,
        outbound_event: str
    ) -> None:
        room_key = self._require_room_key(args)
        description = normalize_sdp(args[0] if args else None)
        if description is None:
            raise InvalidPayload(f"no session description in {kind} payload")

        await self._forward(connection, room_key, outbound_event, {kind: description.model_dump()})

    @staticmethod
    def _require_room_key(args: List[Any]) -> str:
        room_key = resolve_room_key(args)
        if not isinstance(room_key, str) or room_key == "":
            raise InvalidPayload("missing roomKey")
        return room_key

    async def _forward(self, sender: Connection, room_key: str, event: str, data: Any) -> int:
        """Emit to every room member except the sender. Returns the number of peers reached."""
        peers = await self.registry.members_except(room_key, sender)

        sent_count = 0
        for peer in peers:
            if peer.emit(event, data):
                sent_count += 1

        logger.debug(f"Relayed {event} from {sender.id} to {sent_count}/{len(peers)} peer(s) in room {room_key}")
        return sent_count
