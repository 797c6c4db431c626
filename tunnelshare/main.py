import asyncio
import functools
import logging
import socket
import sys
from pathlib import Path
from typing import Optional

import uvicorn
from dotenv import load_dotenv

from . import console
from .app import create_app
from .core.config import Settings, get_settings
from .storage import FileStore
from .tunnel import resolve_tunnel, start_tunnel
from .tunnel.ssh_client import ReverseSshClient
from .utils.logging import setup_logging

logger = logging.getLogger(__name__)

# Unspecified bind hosts are reached through loopback by the tunnel client
WILDCARD_HOSTS = ("", "0.0.0.0", "::")


def load_environment(base_dir: Optional[Path] = None) -> None:
    """Load .env then .env.local (later files override earlier)."""
    base_dir = base_dir or Path.cwd()
    for env_file, override in ((".env", False), (".env.local", True)):
        path = base_dir / env_file
        if path.exists():
            load_dotenv(path, override=override)
            logger.debug(f"Loaded environment from {path}")


def bind_listener(host: str, port: int) -> socket.socket:
    """Bind the HTTP socket up front so the tunnel knows the real port.

    Raises:
        OSError: If the address cannot be bound.
    """
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
    except OSError:
        sock.close()
        raise
    return sock


def tunnel_target_host(host: str) -> str:
    return "127.0.0.1" if host in WILDCARD_HOSTS else host


async def connect_tunnel(settings: Settings, local_port: int) -> Optional[str]:
    """Start the tunnel if configured and return its public URL, if any."""
    resolved = resolve_tunnel(
        settings, local_port, local_addr=tunnel_target_host(settings.host)
    )
    if resolved is None:
        return None

    provider, config = resolved
    console.print_tunnel_details(provider, config, settings.tunnel_name)
    return await start_tunnel(
        provider,
        config,
        timeout=settings.tunnel_url_timeout,
        client_factory=functools.partial(
            ReverseSshClient, ssh_binary=settings.ssh_binary
        ),
    )


async def serve(settings: Settings) -> None:
    """Prepare the serving directory, announce the endpoints and serve HTTP."""
    store = FileStore(settings.shared_dir)
    shared_path = store.ensure_root()

    sock = bind_listener(settings.host, settings.port)
    bound_host, local_port = sock.getsockname()[:2]

    console.print_server_info(f"http://{bound_host}:{local_port}", shared_path)

    external_url = await connect_tunnel(settings, local_port)
    if external_url:
        console.print_external_usage(external_url)
    else:
        console.print_local_usage(local_port)

    config = uvicorn.Config(
        create_app(store),
        log_config=None,
        log_level=settings.log_level.lower(),
        access_log=False,
        lifespan="off",
    )
    server = uvicorn.Server(config)
    await server.serve(sockets=[sock])


def main() -> None:
    """Start the file server with the tunnel configured from the environment."""
    load_environment()
    settings = get_settings()
    setup_logging(log_level=settings.log_level, log_file=settings.log_file)

    try:
        asyncio.run(serve(settings))
    except KeyboardInterrupt:
        pass
    except OSError as e:
        logger.error(f"Failed to start server: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
