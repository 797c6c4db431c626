"""
File sharing endpoints.

GET /          -> plain-text listing of the serving directory
GET /<name>    -> download a file (empty name falls back to the listing)
POST /<name>   -> upload the request body as <name>
"""

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse, Response

from ..storage import FileStore, InvalidFilenameError, validate_filename

logger = structlog.get_logger(__name__)

router = APIRouter()


def get_file_store(request: Request) -> FileStore:
    return request.app.state.file_store


def format_listing(names) -> str:
    if not names:
        return "No files available\n"
    return "Available files:\n" + "\n".join(names) + "\n"


def _invalid_filename(filename: str, error: InvalidFilenameError) -> PlainTextResponse:
    logger.info("Rejected filename", filename=filename, reason=str(error))
    return PlainTextResponse("Invalid filename", status_code=400)


@router.get("/")
async def list_files(store: FileStore = Depends(get_file_store)) -> Response:
    """List the files available for download."""
    try:
        names = await store.list()
    except OSError as e:
        logger.error("Error reading directory", error=str(e))
        return PlainTextResponse(f"Error listing files: {e}", status_code=500)

    logger.info("LIST: Listed files", count=len(names))
    return PlainTextResponse(format_listing(names))


@router.get("/{name:path}")
async def get_file(name: str, store: FileStore = Depends(get_file_store)) -> Response:
    """Download a single file as an attachment."""
    filename = name.lstrip("/")
    if not filename:
        return await list_files(store)

    try:
        validate_filename(filename)
    except InvalidFilenameError as e:
        return _invalid_filename(filename, e)

    try:
        contents = await store.read(filename)
    except FileNotFoundError:
        logger.info("GET: File not found", filename=filename)
        return PlainTextResponse(f"File '{filename}' not found", status_code=404)
    except OSError as e:
        logger.error("GET: Error reading file", filename=filename, error=str(e))
        return PlainTextResponse(f"Error reading file: {e}", status_code=500)

    logger.info("GET: Served file", filename=filename, size=len(contents))
    return Response(
        content=contents,
        media_type="application/octet-stream",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/{name:path}")
async def put_file(
    name: str, request: Request, store: FileStore = Depends(get_file_store)
) -> Response:
    """Store the full request body under the given filename."""
    filename = name.lstrip("/")
    if not filename:
        return PlainTextResponse("Filename required in path", status_code=400)

    try:
        validate_filename(filename)
    except InvalidFilenameError as e:
        return _invalid_filename(filename, e)

    body = await request.body()

    try:
        size = await store.write(filename, body)
    except OSError as e:
        logger.error("POST: Error writing file", filename=filename, error=str(e))
        return PlainTextResponse(f"Error writing file: {e}", status_code=500)

    logger.info("POST: Received file", filename=filename, size=size)
    return PlainTextResponse(
        f"File '{filename}' uploaded successfully ({size} bytes)", status_code=201
    )
