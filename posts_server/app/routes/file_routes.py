from typing import Optional
import aiofiles
from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import JSONResponse, StreamingResponse
from posts_server.app.errors import InvalidPath, NotFound, UnsupportedMediaType
from posts_server.app.services import media_types
from posts_server.app.services.storage_manager import to_relative_path
from posts_server.config import CHUNK_SIZE
from posts_server.logger_config import setup_logger

logger = setup_logger()

router = APIRouter()


def validate_extension(relative_path: str) -> str:
    """Return the upload's extension, raising 415 if posts can't have it."""
    extension = media_types.extension_of(relative_path)
    if extension not in media_types.UPLOAD_MEDIA_TYPES:
        allowed = ", ".join(media_types.UPLOAD_MEDIA_TYPES)
        raise UnsupportedMediaType(f"Unsupported media type. Allowed: {allowed}")
    return extension


def validate_content_type(content_type: Optional[str], extension: str):
    """Check the declared Content-Type against the types allowed for the extension."""
    if not content_type:
        raise HTTPException(status_code=400, detail="Missing Content-Type header")

    media = media_types.media_type_of(content_type)
    if media not in media_types.allowed_upload_types(extension):
        raise UnsupportedMediaType(f"Content-Type '{media}' not allowed for extension '{extension}'")


@router.get("/{file_path:path}")
async def get_file(file_path: str, request: Request):
    """Serve a file from the resources root, or from the posts root if it isn't a resource."""
    storage_manager = request.app.state.storage_manager
    logger.info(f"Receiving download request for path: /{file_path}")

    relative_path = to_relative_path(file_path)
    located = await storage_manager.locate(relative_path)
    if located is None:
        logger.info(f"Not found: /{file_path}")
        raise NotFound()

    try:
        handle = await aiofiles.open(located, 'rb')
    except OSError as e:
        # Removed or made unreadable since it was located
        logger.warning(f"Could not open {located}: {str(e)}")
        raise NotFound()

    async def file_iterator():
        try:
            while chunk := await handle.read(CHUNK_SIZE):
                yield chunk
        finally:
            await handle.close()

    return StreamingResponse(
        file_iterator(),
        headers={"Content-Type": media_types.content_type_for(located)}
    )


@router.api_route("/{file_path:path}", methods=["POST", "PUT"])
async def upload_post(file_path: str, request: Request):
    """Store the request body as a post under the posts root.

    POST answers 201 and PUT answers 200; both overwrite an existing post.
    """
    storage_manager = request.app.state.storage_manager
    upload_reader = request.app.state.upload_reader
    logger.info(f"Receiving {request.method} upload request for path: /{file_path}")

    relative_path = to_relative_path(file_path)
    if not relative_path:
        raise InvalidPath("Missing target filename in URL")

    target = storage_manager.resolve(storage_manager.posts_dir, relative_path)
    extension = validate_extension(target.name)
    validate_content_type(request.headers.get("content-type"), extension)
    upload_reader.check_declared_length(request.headers.get("content-length"))

    body = await upload_reader.read(request)
    await storage_manager.write_post(target, body.decode("utf-8", errors="replace"))

    display_path = storage_manager.display_path(target)
    logger.info(f"Stored {len(body)} bytes at {display_path}")

    status_code = status.HTTP_201_CREATED if request.method == "POST" else status.HTTP_200_OK
    return JSONResponse(
        status_code=status_code,
        content={"success": True, "path": display_path}
    )
