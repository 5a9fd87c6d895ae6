"""
Acknowledgement channel.

A request that carries an ack id gets an `Ack`; requests without one get
None and are fire-and-forget.
"""
import logging
from typing import Callable, Optional

from signaling.config.constants import EVENT_ACK
from signaling.schemas.signaling import AckResult, ServerFrame

logger = logging.getLogger(__name__)


class Ack:
    """Single-use reply handle bound to one inbound request."""

    def __init__(self, ack_id: int, send: Callable[[ServerFrame], bool]):
        self.ack_id = ack_id
        self._send = send
        self.result: Optional[AckResult] = None

    @property
    def done(self) -> bool:
        return self.result is not None

    def reply(self, result: AckResult) -> bool:
        if self.done:
            logger.debug(f"Ack {self.ack_id} already answered, ignoring second reply")
            return False
        self.result = result
        return self._send(ServerFrame(event=EVENT_ACK, ack=self.ack_id, args=[result.to_wire()]))

    def __repr__(self) -> str:
        return f"<Ack {self.ack_id} done={self.done}>"
