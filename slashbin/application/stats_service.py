"""
Stats Service

Storage usage computed by scanning the storage root. Nothing is recorded
per upload; the numbers describe whatever is live right now.
"""

import logging

from slashbin.domain.file_storage import IFileStorageRepository
from slashbin.domain.file_storage.sweeper import HIDDEN_PREFIX

logger = logging.getLogger(__name__)

_UNITS = ((1024 ** 3, "GB"), (1024 ** 2, "MB"), (1024, "KB"))


def format_size(num_bytes: int) -> str:
    """Render a byte count as B, KB, MB or GB with one decimal."""
    for factor, unit in _UNITS:
        if num_bytes >= factor:
            return f"{num_bytes / factor:.1f} {unit}"
    return f"{num_bytes} B"


class StatsService:
    """Reports how many files are live and how much space they use."""

    def __init__(self, storage: IFileStorageRepository):
        self._storage = storage

    def get_stats(self) -> dict:
        """
        Scan the storage root.

        Returns:
            Dictionary with file count, total size and its readable form

        Raises:
            OSError: If the storage root cannot be read
        """
        files = 0
        total_size = 0
        for name in self._storage.list_names():
            if name.startswith(HIDDEN_PREFIX):
                continue
            try:
                stored = self._storage.stat(name)
            except OSError as e:
                logger.warning(f"Could not stat {name}: {e}")
                continue
            if stored is None:
                continue
            files += 1
            total_size += stored.size

        return {
            "files": files,
            "total_size": total_size,
            "human_readable_size": format_size(total_size),
        }
