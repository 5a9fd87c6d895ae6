import asyncio
import httpx
import websockets
import json
import logging
import uuid

import os

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

BASE_URL = os.getenv("BASE_URL", "http://localhost:4000")
WS_URL = os.getenv("WS_URL", "ws://localhost:4000")
TIMEOUT = float(os.getenv("VERIFY_TIMEOUT", "5.0"))


class Peer:
    """Minimal signaling client: sends event frames, routes acks and events apart."""

    def __init__(self, name, ws):
        self.name = name
        self.ws = ws
        self.events = asyncio.Queue()
        self._acks = {}
        self._next_ack = 0
        self._reader = asyncio.create_task(self._read_loop())

    async def _read_loop(self):
        try:
            async for msg in self.ws:
                frame = json.loads(msg)
                if frame.get("event") == "ack":
                    future = self._acks.pop(frame["ack"], None)
                    if future and not future.done():
                        future.set_result(frame["args"][0])
                else:
                    logger.info(f"[{self.name}] WS Event: {frame['event']}")
                    await self.events.put(frame)
        except websockets.ConnectionClosed:
            logger.info(f"[{self.name}] Connection closed")

    async def emit(self, event, *args):
        await self.ws.send(json.dumps({"event": event, "args": list(args)}))

    async def call(self, event, *args):
        self._next_ack += 1
        ack_id = self._next_ack
        future = asyncio.get_running_loop().create_future()
        self._acks[ack_id] = future
        await self.ws.send(json.dumps({"event": event, "args": list(args), "ack": ack_id}))
        return await asyncio.wait_for(future, timeout=TIMEOUT)

    async def expect(self, event):
        while True:
            frame = await asyncio.wait_for(self.events.get(), timeout=TIMEOUT)
            if frame["event"] == event:
                return frame["args"]

    def close(self):
        self._reader.cancel()


async def check_health(client):
    resp = await client.get(f"{BASE_URL}/health")
    if resp.status_code != 200:
        logger.error(f"Health check failed: {resp.status_code} {resp.text}")
        return False
    logger.info(f"Health: {resp.json()}")
    return True


async def run_scenario():
    async with httpx.AsyncClient() as client:
        if not await check_health(client):
            return False

    room = f"verify-{uuid.uuid4().hex[:8]}"

    async with websockets.connect(f"{WS_URL}/ws") as ws_a, websockets.connect(f"{WS_URL}/ws") as ws_b:
        peer_a = Peer("A", ws_a)
        peer_b = Peer("B", ws_b)
        try:
            await peer_a.expect("connected")
            await peer_b.expect("connected")

            # 1. Both peers join the room
            ack = await peer_a.call("join-room", room)
            logger.info(f"A joined: {ack}")
            assert ack == {"ok": True, "room": room, "peers": 0}

            ack = await peer_b.call("join-room", room)
            logger.info(f"B joined: {ack}")
            assert ack == {"ok": True, "room": room, "peers": 1}

            # 2. Offer A -> B
            await peer_a.emit("offer-sent", {"sdp": "v=0 verify", "type": "offer", "roomKey": room})
            args = await peer_b.expect("offer-received")
            assert args[0] == {"offer": {"sdp": "v=0 verify", "type": "offer"}}
            logger.info("SUCCESS: B received offer")

            # 3. Answer B -> A (wrapped shape)
            await peer_b.emit("answer-sent", {"answer": {"sdp": "v=0 reply", "type": "answer"}, "roomKey": room})
            args = await peer_a.expect("answer-received")
            assert args[0] == {"answer": {"sdp": "v=0 reply", "type": "answer"}}
            logger.info("SUCCESS: A received answer")

            # 4. Candidate A -> B, delivered flat
            await peer_a.emit("ice-candidate-sent", {"candidate": {"candidate": "c1", "sdpMid": "0"}, "roomKey": room})
            args = await peer_b.expect("ice-candidate-received")
            assert args[0] == {"candidate": "c1", "sdpMid": "0"}
            logger.info("SUCCESS: B received candidate")

            # 5. Health probe over the socket
            pong = await peer_a.call("ping-server")
            logger.info(f"Ping: {pong}")
            assert pong["ok"] is True
        finally:
            peer_a.close()
            peer_b.close()

    logger.info("All signaling checks passed")
    return True

if __name__ == "__main__":
    asyncio.run(run_scenario())
