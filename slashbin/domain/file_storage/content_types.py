"""
Content Type Resolution

Maps a filename extension to the media type sent with downloads.
"""

from typing import Dict

DEFAULT_CONTENT_TYPE = "application/octet-stream"

CONTENT_TYPES: Dict[str, str] = {
    "html": "text/html",
    "htm": "text/html",
    "css": "text/css",
    "js": "application/javascript",
    "json": "application/json",
    "txt": "text/plain",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "pdf": "application/pdf",
    "zip": "application/zip",
}


def resolve_content_type(filename: str) -> str:
    """
    Resolve the media type for a filename.

    Args:
        filename: Name whose text after the last '.' is the extension

    Returns:
        Media type, DEFAULT_CONTENT_TYPE when the extension is missing or unknown
    """
    if not filename or "." not in filename:
        return DEFAULT_CONTENT_TYPE
    extension = filename.rsplit(".", 1)[1].lower()
    return CONTENT_TYPES.get(extension, DEFAULT_CONTENT_TYPE)
