from typing import Any, Dict, List

from signaling.services.rooms import Connection
from signaling.services.signaling import Ack
from signaling.schemas.signaling import ServerFrame


async def drain(connection: Connection) -> List[Dict[str, Any]]:
    """Pop every frame currently queued on a connection."""
    frames = []
    while connection.pending():
        frames.append(await connection.next_outbound())
    return frames


async def events_of(connection: Connection) -> List[str]:
    return [frame["event"] for frame in await drain(connection)]


class RecordingAck(Ack):
    """Ack whose replies are kept in a list instead of being sent."""

    def __init__(self, ack_id: int = 1):
        self.frames: List[ServerFrame] = []
        super().__init__(ack_id, self._record)

    def _record(self, frame: ServerFrame) -> bool:
        self.frames.append(frame)
        return True

    @property
    def payload(self) -> Dict[str, Any]:
        return self.result.to_wire()


def frame(event: str, *args: Any, ack: int = None) -> Dict[str, Any]:
    data = {"event": event, "args": list(args)}
    if ack is not None:
        data["ack"] = ack
    return data
