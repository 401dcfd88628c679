"""
Local File Storage Repository Implementation

Concrete implementation of IFileStorageRepository on the local filesystem.
Published files live directly under base_path; uploads in progress live in a
hidden staging directory beneath it and are hard-linked into place when
complete, which both publishes atomically and refuses to overwrite.
"""

import logging
import os
from pathlib import Path
from typing import BinaryIO, List, Optional

from slashbin.domain.file_storage.entities import StoredFile
from slashbin.domain.file_storage.storage_repository import IFileStorageRepository

logger = logging.getLogger(__name__)

STAGING_DIR_NAME = ".staging"


class LocalFileStorageRepository(IFileStorageRepository):
    """
    Local filesystem implementation of IFileStorageRepository.

    Thread Safety:
        Each staged upload is a separate file opened with O_EXCL, so
        concurrent uploads never share a handle. Publication uses os.link,
        which fails instead of replacing an existing name.

    Attributes:
        base_path: Storage root holding published files
        staging_path: Hidden directory for uploads in progress
    """

    def __init__(self, base_path: str = "uploads"):
        """
        Initialize the local file storage repository.

        Args:
            base_path: Storage root (default: ./uploads)

        Raises:
            PermissionError: If the storage root cannot be created
            OSError: If directory creation fails for other reasons
        """
        self.base_path = Path(base_path)
        self.staging_path = self.base_path / STAGING_DIR_NAME
        self._ensure_base_directory()

    def _ensure_base_directory(self) -> None:
        """
        Ensure the storage root and staging directory exist.

        Raises:
            PermissionError: If insufficient permissions to create directory
            OSError: If directory creation fails for other reasons
        """
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
            self.staging_path.mkdir(exist_ok=True)
        except PermissionError as e:
            raise PermissionError(
                f"Insufficient permissions to create storage directory: {self.base_path}"
            ) from e
        except OSError as e:
            raise OSError(
                f"Failed to create storage directory: {self.base_path}"
            ) from e

    # Staging

    def create_staging(self, identifier: str) -> BinaryIO:
        staged = self.staging_path / identifier
        fd = os.open(staged, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o644)
        return os.fdopen(fd, "wb")

    def publish(self, staged_identifier: str, identifier: str) -> StoredFile:
        staged = self.staging_path / staged_identifier
        final = self.base_path / identifier

        os.link(staged, final)

        try:
            staged.unlink()
        except OSError as e:
            # Published already; the sweeper purges the leftover later
            logger.warning(f"Could not remove staging file {staged}: {e}")

        stat = final.stat()
        return StoredFile(identifier=identifier, size=stat.st_size, mtime=stat.st_mtime)

    def discard_staging(self, identifier: str) -> bool:
        try:
            (self.staging_path / identifier).unlink()
        except FileNotFoundError:
            return False
        return True

    def list_staging(self) -> List[StoredFile]:
        entries = []
        for item in self.staging_path.iterdir():
            try:
                stat = item.stat()
            except FileNotFoundError:
                continue
            entries.append(
                StoredFile(identifier=item.name, size=stat.st_size, mtime=stat.st_mtime)
            )
        return entries

    # Published files

    def exists(self, name: str) -> bool:
        """
        Check if a file is published under name.

        Never raises; invalid names return False.
        """
        try:
            if not name or not name.strip():
                return False
            return (self.base_path / name).is_file()
        except (OSError, ValueError):
            return False

    def stat(self, name: str) -> Optional[StoredFile]:
        """
        Describe a published file.

        Raises:
            OSError: For failures other than the file being absent
        """
        if not name or not name.strip():
            return None

        full_path = self.base_path / name
        try:
            stat = full_path.stat()
        except FileNotFoundError:
            return None

        if not full_path.is_file():
            return None
        return StoredFile(identifier=name, size=stat.st_size, mtime=stat.st_mtime)

    def open(self, name: str) -> Optional[BinaryIO]:
        """
        Open a published file for reading.

        Returns None for missing files and directories rather than raising.
        """
        if not name or not name.strip():
            return None

        full_path = self.base_path / name
        if not full_path.is_file():
            return None
        try:
            return open(full_path, "rb")
        except FileNotFoundError:
            # Swept between the check and the open
            return None

    def list_names(self) -> List[str]:
        return os.listdir(self.base_path)

    def delete(self, name: str) -> bool:
        """
        Delete a published file.

        Only regular files are removed; directories are left alone.
        """
        full_path = self.base_path / name
        if not full_path.is_file():
            return False
        try:
            full_path.unlink()
        except FileNotFoundError:
            return False
        return True

    def is_writable(self) -> bool:
        return self.staging_path.is_dir() and os.access(self.staging_path, os.W_OK)
