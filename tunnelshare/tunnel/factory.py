"""Resolve the tunnel provider and connection config from settings."""

import logging
from typing import Optional, Tuple

from ..core.config import Settings
from .providers import (
    DEFAULT_REMOTE_PORT,
    DEFAULT_SSH_PORT,
    TunnelConfig,
    TunnelProvider,
)

logger = logging.getLogger(__name__)

LOCAL_ONLY_SELECTORS = ("none", "skip")


def resolve_provider(settings: Settings) -> Optional[TunnelProvider]:
    """Pick the tunnel provider.

    Resolution order:
    1. TUNNEL_PROVIDER environment variable (aliases accepted)
    2. Pico when SSH_KEY_PATH or SSH_SERVER is set
    3. None (local-only mode)
    """
    selector = (settings.tunnel_provider or "").strip().lower()

    if selector:
        if selector in LOCAL_ONLY_SELECTORS:
            logger.info("Tunnel provider set to 'none', running in local mode")
            return None
        provider = TunnelProvider.from_selector(selector)
        if provider is None:
            logger.warning(f"Unknown tunnel provider '{selector}', running in local mode")
        return provider

    if settings.has_tunnel_overrides():
        logger.info("TUNNEL_PROVIDER not set, defaulting to 'pico'")
        return TunnelProvider.PICO

    return None


def resolve_tunnel(
    settings: Settings,
    local_port: int,
    local_addr: str = "127.0.0.1",
) -> Optional[Tuple[TunnelProvider, TunnelConfig]]:
    """Build the tunnel configuration for the local HTTP port.

    Returns None when no provider is configured or when the provider
    needs a username that is not available.
    """
    provider = resolve_provider(settings)
    if provider is None:
        return None

    username = settings.ssh_user or provider.default_username
    if username is None:
        logger.error(f"SSH_USER is required for {provider.default_server} tunnels")
        return None

    # Pico maps the name to <user>-<name>.tuns.sh; localhost.run assigns
    # a random subdomain and expects an empty bind address
    if provider is TunnelProvider.PICO:
        bind_address = settings.tunnel_name or ""
    else:
        bind_address = ""

    config = TunnelConfig(
        server_addr=settings.ssh_server or provider.default_server,
        server_port=(
            settings.ssh_port if settings.ssh_port is not None else DEFAULT_SSH_PORT
        ),
        username=username,
        key_path=settings.ssh_key_path,
        password=settings.ssh_password,
        bind_address=bind_address,
        remote_port=(
            settings.remote_port
            if settings.remote_port is not None
            else DEFAULT_REMOTE_PORT
        ),
        local_addr=local_addr,
        local_port=local_port,
    )
    return provider, config
