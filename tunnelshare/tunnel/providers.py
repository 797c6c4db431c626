"""Reverse SSH tunnel providers and their connection defaults."""

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_SSH_PORT = 22
DEFAULT_REMOTE_PORT = 80


class TunnelProvider(str, Enum):
    """Supported reverse SSH tunnel services."""

    PICO = "pico"
    LOCALHOST_RUN = "localhost.run"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def default_server(self) -> str:
        return _DEFAULT_SERVERS[self]

    @property
    def default_username(self) -> Optional[str]:
        """Username used when SSH_USER is unset. Pico requires an account name."""
        return _DEFAULT_USERNAMES[self]

    @property
    def url_patterns(self) -> Tuple[str, ...]:
        """Domain substrings that identify this provider's public URLs."""
        return _URL_PATTERNS[self]

    @classmethod
    def from_selector(cls, selector: str) -> Optional["TunnelProvider"]:
        """Map a TUNNEL_PROVIDER value to a provider, or None if unknown."""
        return PROVIDER_ALIASES.get(selector.strip().lower())


_DISPLAY_NAMES = {
    TunnelProvider.PICO: "Pico",
    TunnelProvider.LOCALHOST_RUN: "LocalhostRun",
}

_DEFAULT_SERVERS = {
    TunnelProvider.PICO: "tuns.sh",
    TunnelProvider.LOCALHOST_RUN: "ssh.localhost.run",
}

_DEFAULT_USERNAMES = {
    TunnelProvider.PICO: None,
    TunnelProvider.LOCALHOST_RUN: "localhost",
}

_URL_PATTERNS = {
    TunnelProvider.PICO: (".tuns.sh",),
    TunnelProvider.LOCALHOST_RUN: (".lhr.life", ".lhr.rocks", ".localhost.run"),
}

PROVIDER_ALIASES = {
    "pico": TunnelProvider.PICO,
    "pico.sh": TunnelProvider.PICO,
    "tuns": TunnelProvider.PICO,
    "tuns.sh": TunnelProvider.PICO,
    "localhost.run": TunnelProvider.LOCALHOST_RUN,
    "localhostrun": TunnelProvider.LOCALHOST_RUN,
    "lhr": TunnelProvider.LOCALHOST_RUN,
}


class TunnelConfig(BaseModel):
    """Connection settings for one reverse SSH tunnel."""

    model_config = ConfigDict(frozen=True)

    server_addr: str
    server_port: int = DEFAULT_SSH_PORT
    username: str
    key_path: Optional[str] = None
    password: Optional[str] = Field(default=None, repr=False)
    # Remote bind address; for pico this is the tunnel subdomain name
    bind_address: str = ""
    remote_port: int = DEFAULT_REMOTE_PORT
    local_addr: str = "127.0.0.1"
    local_port: int
