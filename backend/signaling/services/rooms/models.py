"""
Connection Models

The live handle the relay uses to talk to one endpoint.
"""
import asyncio
import logging
import time
import uuid
from collections import deque
from datetime import datetime, UTC
from typing import Any, Deque, Dict, Optional

from signaling.schemas.signaling import ServerFrame

logger = logging.getLogger(__name__)


class Connection:
    """
    Represents one endpoint's bidirectional channel.

    Outbound frames go through a bounded outbox so that emitting never waits
    on the network. When the outbox is full the oldest relayed event is
    dropped; ack replies are only dropped when nothing but acks is queued.
    Whoever owns the transport drains it with `next_outbound()`.
    """

    def __init__(self, connection_id: Optional[str] = None, max_pending: int = 256):
        self.id = connection_id or uuid.uuid4().hex
        self.connected_at = time.monotonic()
        self.connected_at_wall = datetime.now(UTC)
        self.dropped_frames = 0
        self.closed = False
        self.max_pending = max_pending
        self._outbox: Deque[Dict[str, Any]] = deque()
        self._ready = asyncio.Event()

    def __repr__(self) -> str:
        return f"<Connection {self.id}>"

    def emit(self, event: str, *args: Any) -> bool:
        """Queue an event for delivery. Returns False if the connection is closed."""
        return self.send_frame(ServerFrame(event=event, args=list(args)))

    def send_frame(self, frame: ServerFrame) -> bool:
        if self.closed:
            return False

        if len(self._outbox) >= self.max_pending:
            self._evict()

        self._outbox.append(frame.to_wire())
        self._ready.set()
        return True

    def _evict(self) -> None:
        victim = 0
        for index, queued in enumerate(self._outbox):
            if "ack" not in queued:
                victim = index
                break

        dropped = self._outbox[victim]
        del self._outbox[victim]
        self.dropped_frames += 1
        logger.warning(
            f"Outbox full for {self.id}, dropped {dropped['event']} frame "
            f"({self.dropped_frames} dropped so far)"
        )

    async def next_outbound(self) -> Dict[str, Any]:
        """Wait for the next queued frame, in emission order."""
        while not self._outbox:
            self._ready.clear()
            await self._ready.wait()
        return self._outbox.popleft()

    def pending(self) -> int:
        return len(self._outbox)

    def close(self) -> None:
        self.closed = True

    def uptime(self) -> float:
        return time.monotonic() - self.connected_at
