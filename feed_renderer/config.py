"""Configuration management for the feed renderer."""

import os
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_USER_AGENT = "Feed-Renderer/1.0 (RSS/Atom feed renderer)"


@dataclass(frozen=True)
class FetcherConfig:
    """Configuration for outbound feed fetches."""

    timeout: int = 30
    user_agent: str = DEFAULT_USER_AGENT
    chunk_size: int = 64 * 1024


@dataclass(frozen=True)
class ServerConfig:
    """Configuration for the HTTP layer."""

    host: str = "0.0.0.0"
    port: int = 8000
    static_dir: Path = field(default_factory=lambda: Path("static"))


class Config:
    """Main configuration manager."""

    def __init__(self):
        """Initialize configuration from environment variables."""
        self.host = os.getenv("FEED_RENDERER_HOST", "0.0.0.0")
        self.port = os.getenv("FEED_RENDERER_PORT", "8000")
        self.static_dir = os.getenv("FEED_RENDERER_STATIC_DIR", "static")
        self.user_agent = os.getenv("FEED_RENDERER_USER_AGENT", DEFAULT_USER_AGENT)
        self.log_level = os.getenv("LOG_LEVEL", "INFO")

    def get_server_config(self) -> ServerConfig:
        """Get HTTP server configuration.

        Raises:
            ValueError: If the configured port is not a valid TCP port
        """
        try:
            port = int(self.port)
        except ValueError:
            raise ValueError(f"Invalid FEED_RENDERER_PORT: {self.port!r}")
        if not 0 < port < 65536:
            raise ValueError(f"FEED_RENDERER_PORT out of range: {port}")

        return ServerConfig(
            host=self.host,
            port=port,
            static_dir=Path(self.static_dir),
        )

    def get_fetcher_config(self) -> FetcherConfig:
        """Get feed fetcher configuration."""
        return FetcherConfig(user_agent=self.user_agent.strip() or DEFAULT_USER_AGENT)
