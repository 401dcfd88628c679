"""
File Storage Domain

Handles identifier generation, streaming uploads, downloads and expiry.
"""

from .content_types import DEFAULT_CONTENT_TYPE, resolve_content_type
from .download_gateway import DownloadGateway, ServedFile
from .entities import FileDescriptor, StoredFile
from .storage_repository import IFileStorageRepository
from .sweeper import ReclamationSweeper, SweepReport, start_sweeper_thread
from .upload_session import UploadSession, UploadState
from .value_objects import FileIdentifier, IdentifierGenerator, is_safe_name

__all__ = [
    "DEFAULT_CONTENT_TYPE",
    "DownloadGateway",
    "FileDescriptor",
    "FileIdentifier",
    "IFileStorageRepository",
    "IdentifierGenerator",
    "ReclamationSweeper",
    "ServedFile",
    "StoredFile",
    "SweepReport",
    "UploadSession",
    "UploadState",
    "is_safe_name",
    "resolve_content_type",
    "start_sweeper_thread",
]
