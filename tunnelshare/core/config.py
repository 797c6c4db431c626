"""
Application configuration using Pydantic Settings.

Centralizes all configuration with environment variable support.
"""

from functools import lru_cache
from typing import Any, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra env vars
    )

    # File serving
    shared_dir: str = "."
    host: str = "127.0.0.1"
    port: int = 0  # 0 binds a random free port

    # Tunnel provider selection
    tunnel_provider: Optional[str] = None
    tunnel_name: Optional[str] = None
    tunnel_url_timeout: float = 10.0

    # Reverse SSH connection
    ssh_user: Optional[str] = None
    ssh_key_path: Optional[str] = None
    ssh_server: Optional[str] = None
    ssh_port: Optional[int] = None
    ssh_password: Optional[str] = None
    remote_port: Optional[int] = None
    ssh_binary: str = "ssh"

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @field_validator("ssh_port", "remote_port", mode="before")
    @classmethod
    def lenient_port(cls, v: Any) -> Optional[int]:
        """Unparsable port numbers fall back to the provider default."""
        if v is None or v == "":
            return None
        try:
            return int(v)
        except (TypeError, ValueError):
            return None

    def has_tunnel_overrides(self) -> bool:
        """Whether a key path or server override implies the default provider."""
        return self.ssh_key_path is not None or self.ssh_server is not None


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
