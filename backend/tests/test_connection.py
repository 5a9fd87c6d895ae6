import pytest

from signaling.schemas.signaling import ServerFrame
from signaling.services.rooms import Connection
from tests.helpers import drain


@pytest.mark.asyncio
async def test_emit_queues_frames_in_order():
    conn = Connection("a")

    conn.emit("offer-received", {"offer": {"sdp": "X", "type": "offer"}})
    conn.emit("ice-candidate-received", {"candidate": "c1"})

    assert await drain(conn) == [
        {"event": "offer-received", "args": [{"offer": {"sdp": "X", "type": "offer"}}]},
        {"event": "ice-candidate-received", "args": [{"candidate": "c1"}]},
    ]


@pytest.mark.asyncio
async def test_outbox_drops_oldest_when_full():
    conn = Connection("a", max_pending=2)

    for i in range(4):
        assert conn.emit("ice-candidate-received", {"candidate": f"c{i}"})

    frames = await drain(conn)
    assert [f["args"][0]["candidate"] for f in frames] == ["c2", "c3"]
    assert conn.dropped_frames == 2


@pytest.mark.asyncio
async def test_closed_connection_refuses_frames():
    conn = Connection("a")
    conn.close()

    assert conn.emit("offer-received", {}) is False
    assert conn.send_frame(ServerFrame(event="ack", ack=1, args=[{"ok": True}])) is False
    assert conn.pending() == 0


def test_generated_ids_are_unique():
    assert Connection().id != Connection().id


@pytest.mark.asyncio
async def test_flood_evicts_events_before_acks():
    conn = Connection("a", max_pending=3)

    conn.send_frame(ServerFrame(event="ack", ack=1, args=[{"ok": True, "room": "r", "peers": 1}]))
    for i in range(5):
        conn.emit("ice-candidate-received", {"candidate": f"c{i}"})

    frames = await drain(conn)
    assert frames[0] == {"event": "ack", "ack": 1, "args": [{"ok": True, "room": "r", "peers": 1}]}
    assert [f["args"][0]["candidate"] for f in frames[1:]] == ["c3", "c4"]
    assert conn.dropped_frames == 3


@pytest.mark.asyncio
async def test_only_acks_queued_drops_oldest_ack():
    conn = Connection("a", max_pending=2)

    for ack_id in (1, 2, 3):
        conn.send_frame(ServerFrame(event="ack", ack=ack_id, args=[{"ok": True}]))

    assert [f["ack"] for f in await drain(conn)] == [2, 3]
