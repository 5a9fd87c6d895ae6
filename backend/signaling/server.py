"""
Server entry point.

Transport keepalive and the inbound frame size limit are enforced by
uvicorn's WebSocket implementation.
"""
import logging

import uvicorn

from signaling.config.settings import settings

logger = logging.getLogger(__name__)


def main():
    logging.basicConfig(level=settings.LOG_LEVEL.upper())
    logger.info(f"Starting signaling server on {settings.API_HOST}:{settings.API_PORT}")
    uvicorn.run(
        "signaling.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
        ws_ping_interval=settings.PING_INTERVAL,
        ws_ping_timeout=settings.PING_TIMEOUT,
        ws_max_size=settings.MAX_PAYLOAD_BYTES,
    )


if __name__ == "__main__":
    main()
