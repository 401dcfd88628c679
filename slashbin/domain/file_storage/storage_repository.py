"""
File Storage Repository Interface

Abstract interface for the storage root that holds published files.
This abstraction keeps the upload session, download gateway and sweeper
independent of the concrete filesystem layout.

Files are written into a staging area first and published under their final
name in one step, so a reader can never observe a partially written file.
"""

from abc import ABC, abstractmethod
from typing import BinaryIO, List, Optional

from .entities import StoredFile


class IFileStorageRepository(ABC):
    """
    Interface for the directory of persisted files.

    Contract Guarantees:
    - A name is published at most once; publish() never overwrites
    - Presence under the root is the only existence proof
    - Modification time is the only age signal
    - Names are single path components; callers validate them first

    Thread Safety:
    - Every staged upload owns its own handle, no cross-upload locking
    - Reads and deletes rely on filesystem unlink semantics: an open read
      survives a concurrent delete
    """

    @abstractmethod
    def create_staging(self, identifier: str) -> BinaryIO:
        """
        Open a new staging file for writing in exclusive-create mode.

        Args:
            identifier: Name the upload is staged under

        Returns:
            Binary write handle owned by the caller

        Raises:
            FileExistsError: If the identifier is already staged or published
            OSError: If the file cannot be created
        """
        pass  # pragma: no cover

    @abstractmethod
    def publish(self, staged_identifier: str, identifier: str) -> StoredFile:
        """
        Make a fully written staging file visible under its final name.

        Args:
            staged_identifier: Name the upload was staged under
            identifier: Final name, usually the same as staged_identifier

        Returns:
            The published StoredFile

        Raises:
            FileExistsError: If a file is already published under identifier
            OSError: If publication fails
        """
        pass  # pragma: no cover

    @abstractmethod
    def discard_staging(self, identifier: str) -> bool:
        """
        Delete a staging file. Idempotent.

        Returns:
            True if a file was removed, False if none existed

        Raises:
            OSError: If the file exists but cannot be removed
        """
        pass  # pragma: no cover

    @abstractmethod
    def list_staging(self) -> List[StoredFile]:
        """
        Describe every file currently in the staging area.

        Raises:
            OSError: If the staging area cannot be read
        """
        pass  # pragma: no cover

    @abstractmethod
    def exists(self, name: str) -> bool:
        """Check whether a file is published under name. Never raises."""
        pass  # pragma: no cover

    @abstractmethod
    def stat(self, name: str) -> Optional[StoredFile]:
        """
        Describe a published file.

        Returns:
            StoredFile, or None if nothing (or not a regular file) is there
        """
        pass  # pragma: no cover

    @abstractmethod
    def open(self, name: str) -> Optional[BinaryIO]:
        """
        Open a published file for reading.

        Returns:
            Binary read handle the caller must close, or None if absent
        """
        pass  # pragma: no cover

    @abstractmethod
    def list_names(self) -> List[str]:
        """
        List every entry name directly under the storage root.

        Hidden entries are included; filtering is up to the caller.

        Raises:
            OSError: If the storage root cannot be opened
        """
        pass  # pragma: no cover

    @abstractmethod
    def delete(self, name: str) -> bool:
        """
        Delete a published file.

        Returns:
            True if removed, False if it did not exist

        Raises:
            OSError: If the file exists but cannot be removed
        """
        pass  # pragma: no cover

    @abstractmethod
    def is_writable(self) -> bool:
        """Check whether new uploads can currently be stored."""
        pass  # pragma: no cover
