"""
Errors

Domain exceptions raised by the file storage layer, and the categorized
application errors the HTTP layer turns into responses. The domain half has
no dependencies outside the standard library.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(Enum):
    """Categories of failures reported to clients."""

    FILE_NOT_FOUND = "file_not_found"
    FILE_TOO_LARGE = "file_too_large"
    NO_FILE_UPLOADED = "no_file_uploaded"
    STORAGE_ERROR = "storage_error"
    SYSTEM_ERROR = "system_error"


# Client-facing wording per category: short title, message, what to do next
ERROR_MESSAGES: Dict[ErrorCategory, Dict[str, str]] = {
    ErrorCategory.FILE_NOT_FOUND: {
        "title": "File Not Found",
        "message": "File not found or expired",
        "action": "Ask the sender to upload the file again.",
    },
    ErrorCategory.FILE_TOO_LARGE: {
        "title": "File Too Large",
        "message": "The uploaded file exceeds the maximum allowed size.",
        "action": "Split the file or compress it before uploading.",
    },
    ErrorCategory.NO_FILE_UPLOADED: {
        "title": "No File Uploaded",
        "message": "No file uploaded",
        "action": "Send the file as the request body or as a 'file' form field.",
    },
    ErrorCategory.STORAGE_ERROR: {
        "title": "Upload Failed",
        "message": "Upload failed.",
        "action": "Please try again later.",
    },
    ErrorCategory.SYSTEM_ERROR: {
        "title": "Internal Error",
        "message": "Something went wrong on the server.",
        "action": "Retry in a moment.",
    },
}


# ----------------------------------------------------------------------------
# Domain exceptions
# ----------------------------------------------------------------------------

class DomainError(Exception):
    """
    Root of the file storage exceptions.

    Attributes:
        original_error: Lower-level exception this one wraps, if any
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.original_error = original_error


class StorageIOError(DomainError):
    """
    Raised when the storage root cannot be written to or read from.

    Covers open, write, publish and delete failures. The upload that hit it
    is aborted and leaves nothing behind.
    """
    pass


class StoredFileNotFoundError(DomainError):
    """Raised when no stored file exists for a requested name."""
    pass


class InvalidIdentifierError(StoredFileNotFoundError):
    """
    Raised when a requested name could escape the storage root.

    Subclasses StoredFileNotFoundError so that callers handling absence
    handle traversal attempts identically.
    """
    pass


class SweepEntryError(DomainError):
    """Raised for a single entry that could not be reclaimed during a sweep."""

    def __init__(self, name: str, original_error: Optional[Exception] = None):
        super().__init__(f"Could not reclaim {name}: {original_error}", original_error)
        self.name = name


class UploadStateError(DomainError):
    """Raised when an upload session is driven out of order."""
    pass


# ----------------------------------------------------------------------------
# Application errors
# ----------------------------------------------------------------------------

def _describe(category: ErrorCategory) -> Dict[str, str]:
    return ERROR_MESSAGES.get(category, ERROR_MESSAGES[ErrorCategory.SYSTEM_ERROR])


class ApplicationError(Exception):
    """
    An error with a category and the wording shown to the client.

    technical_message and context are for logs only and never leave the
    server.
    """

    def __init__(
        self,
        category: ErrorCategory,
        technical_message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        wording = _describe(category)
        super().__init__(wording["message"])
        self.category = category
        self.technical_message = technical_message or ""
        self.context = context or {}
        self.title = wording["title"]
        self.message = wording["message"]
        self.action = wording["action"]

    def to_dict(self) -> Dict[str, Any]:
        """JSON body for the API."""
        return {
            "error": self.category.value,
            "title": self.title,
            "message": self.message,
            "action": self.action,
        }


class NoFileUploadedError(ApplicationError):
    """Raised when an upload request carries no content at all."""

    def __init__(self, technical_message: Optional[str] = None):
        super().__init__(ErrorCategory.NO_FILE_UPLOADED, technical_message)
        self.http_status_code = 400


def create_error_response(
    category: ErrorCategory,
    technical_message: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None,
    status_code: int = 400,
) -> tuple[Dict[str, Any], int]:
    """
    Build the (body, status) pair an API resource returns for a failure.

    Args:
        category: Which entry of ERROR_MESSAGES to answer with
        technical_message: Detail for the server log
        context: Extra fields for the server log
        status_code: HTTP status to answer with

    Returns:
        Tuple of (error_dict, status_code)
    """
    return ApplicationError(category, technical_message, context).to_dict(), status_code
