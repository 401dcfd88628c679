"""
Download Gateway

Validates requested names and hands back open streams of stored files.
Reads are stateless: no session object, just a lookup under the storage root.
"""

import logging
import os
from dataclasses import dataclass
from typing import BinaryIO

from ..errors import InvalidIdentifierError, StoredFileNotFoundError
from .content_types import resolve_content_type
from .entities import StoredFile
from .storage_repository import IFileStorageRepository
from .value_objects import is_safe_name

logger = logging.getLogger(__name__)


@dataclass
class ServedFile:
    """An open stored file plus the metadata the transport needs to send it."""
    identifier: str
    size: int
    content_type: str
    stream: BinaryIO

    def close(self) -> None:
        self.stream.close()


class DownloadGateway:
    """
    Domain service for serving stored files.

    Unsafe names (parent-directory sequences, path separators) and hidden
    names are refused with the same outcome as a missing file, so callers
    cannot learn anything about the filesystem around the storage root.
    """

    def __init__(self, storage: IFileStorageRepository):
        self._storage = storage

    def serve(self, requested_name: str) -> ServedFile:
        """
        Open a stored file for download.

        Args:
            requested_name: Name taken from the request path

        Returns:
            ServedFile whose stream the caller must close

        Raises:
            StoredFileNotFoundError: If absent, or InvalidIdentifierError (a
                subclass) if the name is unsafe
        """
        self._validate(requested_name)

        stream = self._storage.open(requested_name)
        if stream is None:
            raise StoredFileNotFoundError(f"File not found: {requested_name}")

        # Size of the opened inode, stays correct if the entry is swept meanwhile
        size = os.fstat(stream.fileno()).st_size
        return ServedFile(
            identifier=requested_name,
            size=size,
            content_type=resolve_content_type(requested_name),
            stream=stream,
        )

    def describe(self, requested_name: str) -> StoredFile:
        """
        Look up a stored file without opening it.

        Raises:
            StoredFileNotFoundError: Same policy as serve()
        """
        self._validate(requested_name)

        stored = self._storage.stat(requested_name)
        if stored is None:
            raise StoredFileNotFoundError(f"File not found: {requested_name}")
        return stored

    def _validate(self, requested_name: str) -> None:
        if not is_safe_name(requested_name):
            logger.warning(f"Refused unsafe download name {requested_name!r}")
            raise InvalidIdentifierError(f"Invalid identifier: {requested_name!r}")
        if requested_name.startswith("."):
            raise InvalidIdentifierError(f"Hidden name requested: {requested_name!r}")
