"""HTTP error conditions raised by the request handlers and services.

Each condition is an ``HTTPException`` so it can be raised wherever it is
detected; the application's exception handler renders it as
``{"error": <detail>}``.
"""
from typing import Dict, Optional

from fastapi import HTTPException


class InvalidPath(HTTPException):
    """Traversal outside a root, or an empty upload target."""

    def __init__(self, detail: str = "Invalid path"):
        super().__init__(status_code=400, detail=detail)


class NotFound(HTTPException):
    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=404, detail=detail)


class UnsupportedMediaType(HTTPException):
    """Upload extension or declared Content-Type is not allowed."""

    def __init__(self, detail: str):
        super().__init__(status_code=415, detail=detail)


class PayloadTooLarge(HTTPException):
    """Upload exceeds the configured ceiling; the connection is closed after the response."""

    def __init__(self, detail: str = "Payload too large", headers: Optional[Dict[str, str]] = None):
        super().__init__(status_code=413, detail=detail, headers=headers or {"Connection": "close"})


class ServerIOError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=500, detail=detail)


class RequestTransportError(HTTPException):
    """The client went away while the request body was being read."""

    def __init__(self, detail: str = "Request error"):
        super().__init__(status_code=400, detail=detail)
