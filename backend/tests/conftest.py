import sys
import pytest
from pathlib import Path

# Add project root (2 levels up from tests/) to sys.path so tests can import 'signaling'
root = Path(__file__).resolve().parents[1]
if str(root) not in sys.path:
    sys.path.insert(0, str(root))


from fastapi.testclient import TestClient

from signaling.config.settings import Settings
from signaling.main import create_app
from signaling.services.rooms import Connection, RoomRegistry
from signaling.services.signaling.relay import SignalingRelay


@pytest.fixture
def registry():
    return RoomRegistry()


@pytest.fixture
def relay(registry):
    # Fixed clock so ping replies are deterministic
    return SignalingRelay(registry, clock=lambda: 1700000000.123)


@pytest.fixture
def make_connection():
    """Factory for connections with readable ids."""
    def _make(name: str = None) -> Connection:
        return Connection(connection_id=name)
    return _make


@pytest.fixture
def test_settings():
    return Settings(
        ALLOWED_ORIGINS=["http://localhost:3000"],
        MAX_PAYLOAD_BYTES=4096,
        OUTBOX_MAX_MESSAGES=64,
    )


@pytest.fixture
def client(test_settings):
    """TestClient around a fresh app, so room state never leaks between tests."""
    app = create_app(settings=test_settings)
    with TestClient(app) as c:
        yield c
