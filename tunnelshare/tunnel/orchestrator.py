"""
Tunnel startup orchestration.

Spawns the reverse SSH client in a background task and waits a bounded
time for the public URL. The wait is the only thing that times out: the
tunnel task keeps running for the life of the process either way.
"""

import asyncio
import logging
from typing import Callable, Optional

from ..utils.task_tracker import create_tracked_task
from .extractor import TunnelUrlExtractor
from .providers import TunnelConfig, TunnelProvider
from .ssh_client import ReverseSshClient, TunnelRunError

logger = logging.getLogger(__name__)

TUNNEL_URL_TIMEOUT = 10.0

ClientFactory = Callable[[TunnelConfig], ReverseSshClient]


async def run_tunnel(
    client_factory: ClientFactory,
    config: TunnelConfig,
    extractor: TunnelUrlExtractor,
) -> None:
    """Drive the tunnel client until it exits; the outcome is only logged."""
    client = client_factory(config)
    try:
        await client.run(extractor)
    except TunnelRunError as e:
        logger.error(f"Reverse SSH tunnel error: {e}")
    else:
        logger.info("Reverse SSH tunnel closed")


async def start_tunnel(
    provider: TunnelProvider,
    config: TunnelConfig,
    timeout: float = TUNNEL_URL_TIMEOUT,
    client_factory: ClientFactory = ReverseSshClient,
) -> Optional[str]:
    """Start the tunnel and return its public URL, or None.

    Returns as soon as the first URL is seen. Returns None when ``timeout``
    elapses first or when the tunnel exits without announcing a URL.
    """
    handoff: asyncio.Queue = asyncio.Queue(maxsize=1)

    def _hand_off(url: str) -> None:
        try:
            handoff.put_nowait(url)
        except asyncio.QueueFull:
            pass

    extractor = TunnelUrlExtractor(provider.url_patterns, on_url=_hand_off)
    tunnel_task = create_tracked_task(
        run_tunnel(client_factory, config, extractor),
        name=f"reverse-ssh-{provider.value}",
    )

    receiver = asyncio.ensure_future(handoff.get())
    try:
        done, _ = await asyncio.wait(
            {receiver, tunnel_task},
            timeout=timeout,
            return_when=asyncio.FIRST_COMPLETED,
        )
    finally:
        if not receiver.done():
            receiver.cancel()

    if receiver in done:
        return receiver.result()
    if not handoff.empty():
        return handoff.get_nowait()
    if tunnel_task in done:
        logger.warning("Tunnel exited before announcing a URL")
        return None

    logger.warning("Timed out waiting for tunnel URL")
    return None
