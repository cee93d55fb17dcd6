import os
from types import MappingProxyType
from typing import FrozenSet, Union
from pathlib import Path

DEFAULT_CONTENT_TYPE = "application/octet-stream"
CHARSET_SUFFIX = "; charset=utf-8"

MIME_TYPES = MappingProxyType({
    ".html": "text/html",
    ".htm": "text/html",
    ".css": "text/css",
    ".js": "application/javascript",
    ".json": "application/json",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".txt": "text/plain",
    ".md": "text/markdown",
    ".pdf": "application/pdf",
})

# Extensions accepted for uploads, mapped to the Content-Types a client may declare for them
UPLOAD_MEDIA_TYPES = MappingProxyType({
    ".txt": frozenset({"text/plain"}),
    ".md": frozenset({"text/markdown", "text/plain", "text/x-markdown"}),
    ".json": frozenset({"application/json"}),
})


def extension_of(path: Union[str, Path]) -> str:
    """Lower-cased extension including the dot, or an empty string."""
    return os.path.splitext(str(path))[1].lower()


def mime_type_for(path: Union[str, Path]) -> str:
    return MIME_TYPES.get(extension_of(path), DEFAULT_CONTENT_TYPE)


def is_text_type(mime_type: str) -> bool:
    return mime_type.startswith("text/") or mime_type == "application/json"


def content_type_for(path: Union[str, Path]) -> str:
    """Response Content-Type for a served file, with a UTF-8 charset for text-like types."""
    mime_type = mime_type_for(path)
    if is_text_type(mime_type):
        return mime_type + CHARSET_SUFFIX
    return mime_type


def allowed_upload_types(extension: str) -> FrozenSet[str]:
    return UPLOAD_MEDIA_TYPES.get(extension.lower(), frozenset())


def media_type_of(content_type: str) -> str:
    """Bare media type of a Content-Type header value, e.g. 'text/plain; charset=utf-8' -> 'text/plain'."""
    return content_type.split(";")[0].strip().lower()
