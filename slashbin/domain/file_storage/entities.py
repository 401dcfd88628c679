"""
File Storage Entities

A stored file as seen through the filesystem, and the descriptor returned to
uploaders.
"""

import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

EXPIRY_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_expiry(moment: datetime) -> str:
    """Render an expiry moment the way it is shown to uploaders."""
    return moment.strftime(EXPIRY_DATE_FORMAT)


@dataclass(frozen=True)
class StoredFile:
    """
    Entity representing a published file under the storage root.

    There is no metadata store: identifier, size and modification time all
    come from the filesystem entry itself.
    """
    identifier: str
    size: int
    mtime: float

    @property
    def modified_at(self) -> datetime:
        return datetime.fromtimestamp(self.mtime)

    def age_seconds(self, now: Optional[float] = None) -> float:
        """
        Seconds elapsed since the last modification.

        Args:
            now: Epoch seconds to measure against (default: current time)
        """
        if now is None:
            now = time.time()
        return now - self.mtime

    def is_expired(self, horizon: timedelta, now: Optional[float] = None) -> bool:
        """True once the file is strictly older than the expiry horizon."""
        return self.age_seconds(now) > horizon.total_seconds()

    def expires_at(self, horizon: timedelta) -> datetime:
        return self.modified_at + horizon

    def to_dict(self, horizon: timedelta, content_type: Optional[str] = None) -> dict:
        """Convert to dictionary for the file info endpoint."""
        data = {
            "identifier": self.identifier,
            "size": self.size,
            "modified": format_expiry(self.modified_at),
            "expires": format_expiry(self.expires_at(horizon)),
        }
        if content_type is not None:
            data["content_type"] = content_type
        return data


@dataclass(frozen=True)
class FileDescriptor:
    """
    Response payload for a finalized upload.

    Derived from the session at finalization, never stored.
    """
    identifier: str
    url: str
    filename: str
    size: int
    expires: str

    @classmethod
    def create(
        cls,
        identifier: str,
        size: int,
        base_url: str,
        expiry_horizon: timedelta,
        filename: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> "FileDescriptor":
        """
        Build the descriptor for a freshly published file.

        Args:
            identifier: Generated name of the stored file
            size: Bytes written
            base_url: Scheme and host the URL is built on, e.g. 'http://host:3000'
            expiry_horizon: How long the file lives
            filename: Name reported to the client (default: the identifier)
            now: Moment of finalization (default: current local time)

        Returns:
            New FileDescriptor instance
        """
        if now is None:
            now = datetime.now()
        return cls(
            identifier=identifier,
            url=f"{base_url.rstrip('/')}/{identifier}",
            filename=filename or identifier,
            size=size,
            expires=format_expiry(now + expiry_horizon),
        )

    def to_dict(self) -> dict:
        """Convert to the JSON body returned to non-CLI clients."""
        return {
            "url": self.url,
            "filename": self.filename,
            "size": self.size,
            "expires": self.expires,
        }
