"""
Upload Session

Per-request state machine that streams an incoming body into the storage
root and publishes it under a freshly generated identifier.

    CREATED -> RECEIVING -> FINALIZED
    CREATED | RECEIVING -> ABORTED

The session is a context manager. Leaving the ``with`` block without having
finalized aborts the upload: the handle is closed and the staged file is
deleted, whatever the exit path (I/O error, client disconnect, oversized
body, any other exception).
"""

import logging
import os
from datetime import timedelta
from enum import Enum
from typing import BinaryIO, Optional

from ..errors import StorageIOError, UploadStateError
from .entities import FileDescriptor, StoredFile
from .storage_repository import IFileStorageRepository
from .value_objects import IdentifierGenerator

logger = logging.getLogger(__name__)

MAX_IDENTIFIER_ATTEMPTS = 5
DEFAULT_CHUNK_SIZE = 64 * 1024


class UploadState(Enum):
    """Lifecycle states of an upload session."""

    CREATED = "created"
    RECEIVING = "receiving"
    FINALIZED = "finalized"
    ABORTED = "aborted"


class UploadSession:
    """
    Accumulates one upload's byte stream into a staged file.

    Attributes:
        identifier: Name the file will be published under (set by start())
        bytes_written: Running count of bytes appended so far
        state: Current UploadState, None before start()
    """

    def __init__(
        self,
        storage: IFileStorageRepository,
        generator: IdentifierGenerator,
        expiry_horizon: timedelta,
        base_url: str,
        filename: Optional[str] = None,
    ):
        """
        Args:
            storage: Storage root the file is published into
            generator: Source of identifiers
            expiry_horizon: Lifetime reported in the descriptor
            base_url: Scheme and host the download URL is built on
            filename: Client-side filename reported back (default: identifier)
        """
        self._storage = storage
        self._generator = generator
        self._expiry_horizon = expiry_horizon
        self._base_url = base_url
        self._filename = filename
        self._handle: Optional[BinaryIO] = None
        self._staged_as: Optional[str] = None

        self.identifier: Optional[str] = None
        self.bytes_written = 0
        self.state: Optional[UploadState] = None

    def __enter__(self) -> "UploadSession":
        self.start()
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> bool:
        if self.state is not UploadState.FINALIZED:
            reason = repr(exc_value) if exc_value is not None else "not finalized"
            self.abort(reason)
        return False

    @property
    def is_open(self) -> bool:
        return self.state in (UploadState.CREATED, UploadState.RECEIVING)

    def start(self) -> str:
        """
        Enter CREATED: pick an identifier and open its staging file.

        Returns:
            The assigned identifier

        Raises:
            StorageIOError: If the file cannot be opened or no free identifier
                is found within MAX_IDENTIFIER_ATTEMPTS
        """
        if self.state is not None:
            raise UploadStateError(f"Session already started ({self.state.value})")

        for _ in range(MAX_IDENTIFIER_ATTEMPTS):
            identifier = str(self._generator.generate())
            if self._storage.exists(identifier):
                logger.warning(f"Identifier collision on {identifier}, retrying")
                continue
            try:
                handle = self._storage.create_staging(identifier)
            except FileExistsError:
                logger.warning(f"Identifier {identifier} already staged, retrying")
                continue
            except OSError as e:
                self.state = UploadState.ABORTED
                logger.error(f"Could not open upload file {identifier}: {e}")
                raise StorageIOError(f"Could not open upload file: {e}", e) from e

            self.identifier = identifier
            self._staged_as = identifier
            self._handle = handle
            self.state = UploadState.CREATED
            return identifier

        self.state = UploadState.ABORTED
        raise StorageIOError(
            f"No free identifier after {MAX_IDENTIFIER_ATTEMPTS} attempts"
        )

    def feed(self, chunk: bytes) -> Optional[FileDescriptor]:
        """
        Deliver the next body chunk.

        A non-empty chunk is appended (RECEIVING); an empty chunk marks the end
        of the body and finalizes the session.

        Returns:
            FileDescriptor once finalized, None while still receiving

        Raises:
            StorageIOError: On write failure (the session is aborted first)
            UploadStateError: If the session is not open
        """
        self._require_open()
        if not chunk:
            return self.finalize()

        try:
            self._handle.write(chunk)
        except OSError as e:
            self.abort(f"write failed: {e}")
            raise StorageIOError(f"Could not write upload {self.identifier}: {e}", e) from e

        self.bytes_written += len(chunk)
        self.state = UploadState.RECEIVING
        return None

    def consume(self, stream: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> FileDescriptor:
        """
        Pump a readable stream through feed() until end-of-body.

        Args:
            stream: Any object with read(size) returning bytes
            chunk_size: Maximum bytes per read

        Returns:
            FileDescriptor of the published file
        """
        while True:
            descriptor = self.feed(stream.read(chunk_size))
            if descriptor is not None:
                return descriptor

    def finalize(self) -> FileDescriptor:
        """
        Enter FINALIZED: flush, publish and describe the file.

        Returns:
            FileDescriptor for the HTTP layer

        Raises:
            StorageIOError: If flushing or publishing fails (the session is
                aborted first)
        """
        self._require_open()

        try:
            self._handle.flush()
            os.fsync(self._handle.fileno())
            self._handle.close()
        except OSError as e:
            self.abort(f"flush failed: {e}")
            raise StorageIOError(f"Could not flush upload {self.identifier}: {e}", e) from e
        self._handle = None

        try:
            stored = self._publish()
        except (OSError, StorageIOError) as e:
            self.abort(f"publish failed: {e}")
            if isinstance(e, StorageIOError):
                raise
            raise StorageIOError(f"Could not publish upload {self.identifier}: {e}", e) from e

        self.state = UploadState.FINALIZED
        self._staged_as = None
        logger.info(f"Upload finalized: {stored.identifier} ({self.bytes_written} bytes)")

        return FileDescriptor.create(
            identifier=stored.identifier,
            size=self.bytes_written,
            base_url=self._base_url,
            expiry_horizon=self._expiry_horizon,
            filename=self._filename,
        )

    def abort(self, reason: Optional[str] = None) -> None:
        """
        Enter ABORTED: close the handle and delete the staged file.

        Idempotent. Deletion is mandatory: if the staged file cannot be
        removed a StorageIOError is raised.
        """
        if self.state in (UploadState.FINALIZED, UploadState.ABORTED):
            return
        self.state = UploadState.ABORTED

        if self._handle is not None:
            try:
                self._handle.close()
            except OSError as e:
                logger.warning(f"Error closing aborted upload {self.identifier}: {e}")
            self._handle = None

        if self._staged_as is not None:
            try:
                self._storage.discard_staging(self._staged_as)
            except OSError as e:
                logger.error(f"Could not delete aborted upload {self._staged_as}: {e}")
                raise StorageIOError(
                    f"Could not delete aborted upload {self._staged_as}: {e}", e
                ) from e
            self._staged_as = None

        logger.info(
            f"Upload aborted: {self.identifier} after {self.bytes_written} bytes"
            f" ({reason or 'no reason given'})"
        )

    def _publish(self) -> StoredFile:
        identifier = self.identifier
        for _ in range(MAX_IDENTIFIER_ATTEMPTS):
            try:
                stored = self._storage.publish(self._staged_as, identifier)
            except FileExistsError:
                logger.warning(f"Identifier {identifier} taken at publish, regenerating")
                identifier = str(self._generator.generate())
                continue
            self.identifier = identifier
            return stored
        raise StorageIOError(
            f"No free identifier after {MAX_IDENTIFIER_ATTEMPTS} publish attempts"
        )

    def _require_open(self) -> None:
        if not self.is_open:
            state = self.state.value if self.state else "not started"
            raise UploadStateError(f"Upload session is not open ({state})")
