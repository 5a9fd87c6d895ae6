from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    # App
    APP_NAME: str = Field("WebRTC Signaling Relay")
    API_HOST: str = Field("0.0.0.0")
    API_PORT: int = Field(4000)
    DEBUG: bool = Field(False)
    LOG_LEVEL: str = Field("INFO")

    # Cross-origin access (HTTP CORS and WebSocket Origin check)
    ALLOWED_ORIGINS: List[str] = Field(["http://localhost:3000"])

    # Transport keepalive (seconds)
    PING_INTERVAL: float = Field(25.0)
    PING_TIMEOUT: float = Field(20.0)

    # Untrusted input bounds
    MAX_PAYLOAD_BYTES: int = Field(1_000_000)
    OUTBOX_MAX_MESSAGES: int = Field(256)

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        env_file_encoding="utf-8"
    )


settings = Settings()
