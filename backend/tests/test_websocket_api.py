"""
End-to-end tests over the /ws endpoint using the FastAPI TestClient.
"""
import pytest
from fastapi import WebSocketDisconnect

from signaling.api.websocket.router import is_origin_allowed
from tests.helpers import frame


def connect(client, **kwargs):
    ws = client.websocket_connect("/ws", **kwargs)
    return ws


def expect_connected(ws) -> str:
    hello = ws.receive_json()
    assert hello["event"] == "connected"
    return hello["args"][0]["id"]


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_root(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.json()["status"] == "running"


def test_cors_preflight_allows_configured_origin(client):
    r = client.options(
        "/health",
        headers={"Origin": "http://localhost:3000", "Access-Control-Request-Method": "GET"},
    )
    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] == "http://localhost:3000"


def test_connection_ids_are_unique(client):
    with connect(client) as ws_a, connect(client) as ws_b:
        assert expect_connected(ws_a) != expect_connected(ws_b)


def test_end_to_end_signaling(client):
    with connect(client) as ws_a, connect(client) as ws_b:
        expect_connected(ws_a)
        expect_connected(ws_b)

        ws_a.send_json(frame("join-room", "abc123", ack=1))
        assert ws_a.receive_json() == {
            "event": "ack", "ack": 1, "args": [{"ok": True, "room": "abc123", "peers": 0}]
        }

        ws_b.send_json(frame("join-room", "abc123", ack=1))
        assert ws_b.receive_json() == {
            "event": "ack", "ack": 1, "args": [{"ok": True, "room": "abc123", "peers": 1}]
        }

        ws_a.send_json(frame("offer-sent", {"sdp": "X", "type": "offer", "roomKey": "abc123"}))
        assert ws_b.receive_json() == {
            "event": "offer-received", "args": [{"offer": {"sdp": "X", "type": "offer"}}]
        }

        ws_b.send_json(frame("answer-sent", {"sdp": "Y", "type": "answer", "roomKey": "abc123"}))
        assert ws_a.receive_json() == {
            "event": "answer-received", "args": [{"answer": {"sdp": "Y", "type": "answer"}}]
        }

        ws_a.send_json(frame("ice-candidate-sent", {"candidate": {"candidate": "c1"}, "roomKey": "abc123"}))
        assert ws_b.receive_json() == {"event": "ice-candidate-received", "args": [{"candidate": "c1"}]}

        ws_b.send_json(frame("ice-candidate-sent", {"candidate": "c2", "sdpMid": "0", "roomKey": "abc123"}))
        assert ws_a.receive_json() == {
            "event": "ice-candidate-received", "args": [{"candidate": "c2", "sdpMid": "0"}]
        }


def test_malformed_offer_is_not_delivered(client):
    with connect(client) as ws_a, connect(client) as ws_b:
        expect_connected(ws_a)
        expect_connected(ws_b)
        ws_a.send_json(frame("join-room", "abc123", ack=1))
        ws_a.receive_json()
        ws_b.send_json(frame("join-room", "abc123", ack=1))
        ws_b.receive_json()

        ws_a.send_json(frame("offer-sent", {"roomKey": "abc123"}))

        # Sender's connection stays usable
        ws_a.send_json(frame("ping-server", ack=2))
        pong = ws_a.receive_json()
        assert pong["ack"] == 2
        assert pong["args"][0]["ok"] is True
        assert isinstance(pong["args"][0]["time"], int)

        # Per-sender ordering: the first thing B sees is the valid offer
        ws_a.send_json(frame("offer-sent", {"sdp": "good", "type": "offer", "roomKey": "abc123"}))
        assert ws_b.receive_json()["args"] == [{"offer": {"sdp": "good", "type": "offer"}}]


def test_bad_frames_are_dropped(client):
    with connect(client) as ws:
        expect_connected(ws)

        ws.send_text("not json")
        ws.send_json({"args": ["missing event name"]})
        ws.send_json(frame("join-room", "", ack=3))

        assert ws.receive_json() == {
            "event": "ack", "ack": 3, "args": [{"ok": False, "message": "roomKey must be a non-empty string"}]
        }


def test_oversized_frame_is_dropped(client, test_settings):
    with connect(client) as ws_a, connect(client) as ws_b:
        expect_connected(ws_a)
        expect_connected(ws_b)
        for ws in (ws_a, ws_b):
            ws.send_json(frame("join-room", "big", ack=1))
            ws.receive_json()

        huge = "v" * (test_settings.MAX_PAYLOAD_BYTES + 1)
        ws_a.send_json(frame("offer-sent", {"sdp": huge, "type": "offer", "roomKey": "big"}))
        ws_a.send_json(frame("offer-sent", {"sdp": "small", "type": "offer", "roomKey": "big"}))

        assert ws_b.receive_json()["args"] == [{"offer": {"sdp": "small", "type": "offer"}}]


def test_disconnect_removes_from_room(client):
    relay = client.app.state.relay

    with connect(client) as ws_a:
        expect_connected(ws_a)
        with connect(client) as ws_b:
            expect_connected(ws_b)
            ws_b.send_json(frame("join-room", "abc123", ack=1))
            ws_b.receive_json()
            assert relay.registry.size("abc123") == 1

        # Round trip on A so B's cleanup has been processed
        ws_a.send_json(frame("join-room", "abc123", ack=1))
        assert ws_a.receive_json()["args"][0]["peers"] == 0


def test_rejects_disallowed_origin(client):
    with pytest.raises(WebSocketDisconnect) as exc:
        with connect(client, headers={"origin": "http://evil.example"}) as ws:
            ws.receive_json()
    assert exc.value.code == 1008


def test_accepts_allowed_origin(client):
    with connect(client, headers={"origin": "http://localhost:3000"}) as ws:
        expect_connected(ws)


def test_is_origin_allowed():
    assert is_origin_allowed("", ["http://a"])
    assert is_origin_allowed("http://a", ["http://a"])
    assert is_origin_allowed("http://b", ["*"])
    assert not is_origin_allowed("http://b", ["http://a"])


def test_invalid_utf8_binary_frame_is_dropped(client):
    with connect(client) as ws_a, connect(client) as ws_b:
        expect_connected(ws_a)
        expect_connected(ws_b)
        for ws in (ws_a, ws_b):
            ws.send_json(frame("join-room", "r", ack=1))
            ws.receive_json()

        ws_a.send_bytes(
            b'{"event":"offer-sent","args":[{"sdp":"v=0\xff\xfe","type":"offer","roomKey":"r"}]}'
        )
        ws_a.send_json(frame("offer-sent", {"sdp": "clean", "type": "offer", "roomKey": "r"}))

        assert ws_b.receive_json()["args"] == [{"offer": {"sdp": "clean", "type": "offer"}}]


def test_valid_utf8_binary_frame_is_relayed(client):
    with connect(client) as ws_a, connect(client) as ws_b:
        expect_connected(ws_a)
        expect_connected(ws_b)
        for ws in (ws_a, ws_b):
            ws.send_json(frame("join-room", "r", ack=1))
            ws.receive_json()

        ws_a.send_bytes('{"event":"offer-sent","args":[{"sdp":"v=0 é","type":"offer","roomKey":"r"}]}'.encode("utf-8"))

        assert ws_b.receive_json()["args"] == [{"offer": {"sdp": "v=0 é", "type": "offer"}}]
