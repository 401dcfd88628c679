"""
Upload Service

Application service between the HTTP layer and the upload session: builds
the session for a request, pumps the body through it, and decides how the
result is presented to the client.
"""

import logging
from datetime import timedelta
from typing import BinaryIO, Optional

from slashbin.domain.errors import NoFileUploadedError
from slashbin.domain.file_storage import (
    FileDescriptor,
    IdentifierGenerator,
    IFileStorageRepository,
    UploadSession,
)
from slashbin.domain.file_storage.upload_session import DEFAULT_CHUNK_SIZE

logger = logging.getLogger(__name__)

# User-Agent substrings of command line clients that want a bare URL back
CLI_USER_AGENT_MARKERS = ("curl", "Wget")


def wants_plain_text(user_agent: Optional[str], cli_flag: Optional[str] = None) -> bool:
    """
    Decide whether the upload response should be the bare URL.

    Args:
        user_agent: Request User-Agent header, if any
        cli_flag: Value of the 'cli' query parameter, if any
    """
    if cli_flag is not None and cli_flag.lower() == "true":
        return True
    if not user_agent:
        return False
    return any(marker in user_agent for marker in CLI_USER_AGENT_MARKERS)


def build_base_url(scheme: str, host_header: Optional[str], default_host: str) -> str:
    """
    Build the scheme://host prefix of download URLs.

    The Host header is advisory addressing for the client, never used for
    storage lookups.
    """
    host = host_header.strip() if host_header and host_header.strip() else default_host
    return f"{scheme or 'http'}://{host}"


class UploadService:
    """
    Orchestrates streaming uploads into the file store.

    One UploadSession is created per request and discarded afterwards.
    """

    def __init__(
        self,
        storage: IFileStorageRepository,
        generator: IdentifierGenerator,
        expiry_horizon: timedelta,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        """
        Args:
            storage: Storage root uploads are published into
            generator: Identifier source shared by all sessions
            expiry_horizon: Lifetime of stored files
            chunk_size: Bytes read from the request body per step
        """
        self._storage = storage
        self._generator = generator
        self._expiry_horizon = expiry_horizon
        self._chunk_size = chunk_size

    @property
    def expiry_horizon(self) -> timedelta:
        return self._expiry_horizon

    def open_session(self, base_url: str, filename: Optional[str] = None) -> UploadSession:
        """Create a fresh, not yet started session for one request."""
        return UploadSession(
            storage=self._storage,
            generator=self._generator,
            expiry_horizon=self._expiry_horizon,
            base_url=base_url,
            filename=filename,
        )

    def upload(
        self,
        stream: BinaryIO,
        base_url: str,
        filename: Optional[str] = None,
    ) -> FileDescriptor:
        """
        Store a request body.

        The first chunk is read before a session is opened so that an empty
        body never allocates an identifier or touches the disk.

        Args:
            stream: Readable request body (raw stream or multipart part)
            base_url: Scheme and host for the returned URL
            filename: Client-side filename, if the client sent one

        Returns:
            FileDescriptor of the stored file

        Raises:
            NoFileUploadedError: If the body is empty
            StorageIOError: If the file cannot be written (nothing is kept)
        """
        first_chunk = stream.read(self._chunk_size)
        if not first_chunk:
            raise NoFileUploadedError("Empty request body")

        with self.open_session(base_url, filename) as session:
            session.feed(first_chunk)
            descriptor = session.consume(stream, self._chunk_size)

        return descriptor
