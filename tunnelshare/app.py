import logging
from pathlib import Path
from typing import Union

from fastapi import FastAPI

from . import __version__
from .api.files import router as files_router
from .middleware.error_handler import register_error_handlers
from .storage import FileStore

logger = logging.getLogger(__name__)


def create_app(store: Union[FileStore, str, Path]) -> FastAPI:
    """Build the file server application around a serving directory."""
    if not isinstance(store, FileStore):
        store = FileStore(store)

    app = FastAPI(
        title="tunnelshare",
        description="Share a local directory over HTTP",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.file_store = store

    register_error_handlers(app)
    app.include_router(files_router)

    logger.debug(f"File server app created for {store.root}")
    return app
