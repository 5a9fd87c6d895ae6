import asyncio
import json
import logging
from typing import Optional

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from signaling.config.constants import EVENT_CONNECTED
from signaling.config.settings import settings
from signaling.schemas.signaling import ClientFrame
from signaling.services.rooms.models import Connection
from signaling.services.signaling.ack import Ack
from signaling.services.signaling.relay import SignalingRelay

logger = logging.getLogger(__name__)


class ConnectionSession:
    """
    Drives the lifecycle of one WebSocket connection.
    Handles:
    - Connection registration and the initial `connected` frame
    - Frame loop: decode, bound, dispatch to the relay
    - Outbox writer task
    - Cleanup on disconnect
    """

    def __init__(
        self,
        websocket: WebSocket,
        relay: SignalingRelay,
        max_payload_bytes: Optional[int] = None,
        max_pending: Optional[int] = None
    ):
        self.websocket = websocket
        self.relay = relay
        self.max_payload_bytes = max_payload_bytes or settings.MAX_PAYLOAD_BYTES
        self.connection = Connection(max_pending=max_pending or settings.OUTBOX_MAX_MESSAGES)
        self._writer: Optional[asyncio.Task] = None

    async def run(self):
        """
        Main entry point. Assumes the socket has already been accepted.
        """
        connection = self.connection
        reason = "transport close"

        await self.relay.connect(connection)
        connection.emit(EVENT_CONNECTED, {"id": connection.id})
        self._writer = asyncio.create_task(self._write_loop())

        try:
            await self._message_loop()

        except WebSocketDisconnect as e:
            reason = f"client disconnect (code {e.code})"

        except Exception as e:
            reason = f"server error: {e}"
            logger.error(f"[Session] Error during message loop for {connection.id}: {e}")

        finally:
            await self._cleanup(reason)

    async def _message_loop(self):
        while True:
            message = await self.websocket.receive()

            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))

            text = message.get("text")
            if text is None and message.get("bytes") is not None:
                try:
                    text = message["bytes"].decode("utf-8")
                except UnicodeDecodeError:
                    logger.warning(f"[Session] Dropped binary frame with invalid UTF-8 from {self.connection.id}")
                    continue

            if text is None:
                logger.warning(f"[Session] Unexpected message structure from {self.connection.id}")
                continue

            await self._handle_text_frame(text)

    async def _handle_text_frame(self, text: str):
        """
        Decode one frame and hand it to the relay. Bad frames are dropped,
        the connection stays usable.
        """
        connection_id = self.connection.id

        if len(text.encode("utf-8")) > self.max_payload_bytes:
            logger.warning(
                f"[Session] Dropped oversized frame from {connection_id} "
                f"(limit {self.max_payload_bytes} bytes)"
            )
            return

        try:
            frame = ClientFrame.model_validate(json.loads(text))
        except json.JSONDecodeError:
            logger.warning(f"[Session] Invalid JSON received from {connection_id}")
            return
        except ValidationError as e:
            logger.warning(f"[Session] Malformed frame from {connection_id}: {e.error_count()} error(s)")
            return

        ack = None
        if frame.ack is not None:
            ack = Ack(frame.ack, self.connection.send_frame)

        await self.relay.dispatch(self.connection, frame.event, frame.args, ack)

    async def _write_loop(self):
        """Drain the connection's outbox to the socket in order."""
        connection_id = self.connection.id
        try:
            while True:
                frame = await self.connection.next_outbound()
                await self.websocket.send_json(frame)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            # Delivery is best-effort; the receive side notices the close.
            logger.error(f"[Session] Error sending to {connection_id}: {e}")

    async def _cleanup(self, reason: str):
        await self.relay.disconnect(self.connection, reason)

        if self._writer is not None:
            self._writer.cancel()
            try:
                await self._writer
            except asyncio.CancelledError:
                pass
