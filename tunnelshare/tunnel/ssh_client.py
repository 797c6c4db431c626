"""Reverse SSH tunnel client driving the OpenSSH ssh CLI."""

import asyncio
import logging
import os
import shutil
from typing import Callable, Dict, List, Optional, Tuple

from .providers import TunnelConfig

logger = logging.getLogger(__name__)

MessageHandler = Callable[[str], None]

# Longest ssh output line read in one piece
STREAM_LIMIT = 1024 * 1024
TERMINATE_TIMEOUT = 5.0


class TunnelRunError(RuntimeError):
    """The tunnel client could not start or exited abnormally."""


class ReverseSshClient:
    """Runs ``ssh -R`` for a TunnelConfig and streams its output.

    The tunnel services print the assigned URL on the SSH session, so
    stdout and stderr are merged and handed line by line to a callback.
    Password authentication goes through ``sshpass -e``.
    """

    def __init__(self, config: TunnelConfig, ssh_binary: str = "ssh"):
        self._config = config
        self._ssh_binary = ssh_binary
        self._process: Optional[asyncio.subprocess.Process] = None

    def _forward_spec(self) -> str:
        config = self._config
        target = f"{config.remote_port}:{config.local_addr}:{config.local_port}"
        if config.bind_address:
            return f"{config.bind_address}:{target}"
        return target

    def build_command(self) -> Tuple[List[str], Dict[str, str]]:
        """Return the argv and environment for the ssh process."""
        config = self._config
        env = dict(os.environ)
        cmd = [
            self._ssh_binary,
            "-o", "StrictHostKeyChecking=accept-new",
            "-o", "ExitOnForwardFailure=yes",
            "-o", "ServerAliveInterval=30",
            "-p", str(config.server_port),
            "-l", config.username,
            "-R", self._forward_spec(),
        ]

        if config.key_path:
            cmd.extend(["-i", os.path.expanduser(config.key_path)])
            cmd.extend(["-o", "IdentitiesOnly=yes"])
        elif config.password is not None:
            cmd.extend(["-o", "PreferredAuthentications=password,keyboard-interactive"])
            cmd = ["sshpass", "-e"] + cmd
            env["SSHPASS"] = config.password

        cmd.append(config.server_addr)
        return cmd, env

    async def run(self, on_message: MessageHandler) -> None:
        """Run the tunnel until ssh exits, passing each output line to ``on_message``.

        The ssh process is terminated if reading stops early, including
        when the surrounding task is cancelled.

        Raises:
            TunnelRunError: If ssh cannot be started or exits with a non-zero code.
        """
        cmd, env = self.build_command()
        if not shutil.which(cmd[0]):
            raise TunnelRunError(f"{cmd[0]} not found. Install OpenSSH client tools")

        logger.info(
            f"Starting reverse SSH tunnel to "
            f"{self._config.server_addr}:{self._config.server_port}"
        )
        try:
            # stdin stays open: some servers close the session on EOF
            self._process = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
                env=env,
                limit=STREAM_LIMIT,
            )
        except OSError as e:
            raise TunnelRunError(f"Failed to start {cmd[0]}: {e}") from e

        try:
            await self._read_output(on_message)
            returncode = await self._process.wait()
        finally:
            if self._process.returncode is None:
                await self._terminate()

        if returncode != 0:
            raise TunnelRunError(f"ssh exited with code {returncode}")

    async def _read_output(self, on_message: MessageHandler) -> None:
        assert self._process is not None and self._process.stdout is not None
        while True:
            try:
                line = await self._process.stdout.readline()
            except ValueError as e:
                # StreamReader drops the oversized chunk; later lines still arrive
                logger.warning(f"Skipped over-long ssh output line: {e}")
                continue
            if not line:
                break
            decoded = line.decode("utf-8", errors="replace")
            logger.debug(f"ssh: {decoded.rstrip()}")
            on_message(decoded)

    async def _terminate(self) -> None:
        assert self._process is not None
        logger.info("Stopping reverse SSH tunnel")
        try:
            self._process.terminate()
        except ProcessLookupError:
            pass
        try:
            await asyncio.wait_for(self._process.wait(), timeout=TERMINATE_TIMEOUT)
        except asyncio.TimeoutError:
            self._process.kill()
            await self._process.wait()
