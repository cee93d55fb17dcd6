from typing import Optional
from starlette.requests import ClientDisconnect, Request
from posts_server.app.errors import PayloadTooLarge, RequestTransportError
from posts_server.logger_config import setup_logger

logger = setup_logger()


class UploadReader:
    def __init__(self, max_size: int = 1 * 1024 * 1024):
        self.max_size = max_size

    def check_declared_length(self, content_length: Optional[str]):
        """Reject an upload whose Content-Length already exceeds the ceiling.

        A missing or non-integer header is left to the streaming check.
        """
        if not content_length:
            return
        try:
            declared = int(content_length.strip())
        except ValueError:
            logger.debug(f"Ignoring non-integer Content-Length: {content_length!r}")
            return

        if declared > self.max_size:
            logger.warning(f"Declared Content-Length {declared} exceeds {self.max_size} bytes")
            raise PayloadTooLarge("Payload too large (Content-Length)")

    async def read(self, request: Request) -> bytes:
        """Read the whole request body, stopping as soon as it grows past the ceiling."""
        received = 0
        chunks = []
        try:
            async for chunk in request.stream():
                received += len(chunk)
                if received > self.max_size:
                    logger.warning(f"Upload exceeded {self.max_size} bytes after {received} bytes received")
                    raise PayloadTooLarge()
                chunks.append(chunk)
        except ClientDisconnect:
            logger.warning(f"Client disconnected after {received} bytes")
            raise RequestTransportError()

        logger.debug(f"Received {received} bytes")
        return b"".join(chunks)
