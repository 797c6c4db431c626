import asyncio
import logging
import os

import pytest
from fastapi.testclient import TestClient

from tunnelshare.app import create_app
from tunnelshare.core.config import Settings
from tunnelshare.storage import FileStore
from tunnelshare.utils.task_tracker import get_active_tasks

# Every variable the tunnel resolver reads; cleared so a developer's shell
# or .env never switches tests into tunnel mode
TUNNEL_ENV_VARS = (
    "TUNNEL_PROVIDER",
    "TUNNEL_NAME",
    "TUNNEL_URL_TIMEOUT",
    "SSH_USER",
    "SSH_KEY_PATH",
    "SSH_SERVER",
    "SSH_PORT",
    "SSH_PASSWORD",
    "REMOTE_PORT",
    "SSH_BINARY",
    "SHARED_DIR",
    "HOST",
    "PORT",
    "LOG_LEVEL",
    "LOG_FILE",
)


@pytest.fixture(autouse=True)
def _clean_tunnel_env(monkeypatch):
    for name in TUNNEL_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _strip_file_handlers():
    """Remove file handlers from root logger so tests never write log files."""
    root = logging.getLogger()
    saved = [h for h in root.handlers if isinstance(h, logging.FileHandler)]
    for h in saved:
        root.removeHandler(h)
    yield
    for h in list(root.handlers):
        if isinstance(h, logging.FileHandler):
            root.removeHandler(h)
            h.close()
    for h in saved:
        root.addHandler(h)


async def _cancel_background_tasks() -> None:
    tasks = get_active_tasks()
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)


@pytest.fixture
async def clean_task_registry():
    """Cancel tunnel tasks left behind by a test."""
    await _cancel_background_tasks()
    yield
    await _cancel_background_tasks()


@pytest.fixture
def make_settings():
    """Build Settings from keyword overrides only, ignoring any .env file."""

    def _make(**overrides) -> Settings:
        return Settings(_env_file=None, **overrides)

    return _make


@pytest.fixture
def shared_dir(tmp_path):
    directory = tmp_path / "shared"
    directory.mkdir()
    return directory


@pytest.fixture
def file_store(shared_dir):
    return FileStore(shared_dir)


@pytest.fixture
def client(file_store):
    """Test client for a file server rooted at an empty temp directory."""
    return TestClient(create_app(file_store), raise_server_exceptions=False)


@pytest.fixture
def write_shared(shared_dir):
    def _write(name: str, data: bytes = b"") -> None:
        with open(os.path.join(shared_dir, name), "wb") as f:
            f.write(data)

    return _write
