"""
Reclamation Sweeper

Deletes stored files once they are older than the expiry horizon.
Modification time is the only age signal; there is no index to consult.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Callable, List, Optional

from ..errors import SweepEntryError
from .storage_repository import IFileStorageRepository

logger = logging.getLogger(__name__)

HIDDEN_PREFIX = "."


@dataclass
class SweepReport:
    """Outcome of one sweep cycle."""
    scanned: int = 0
    retained: int = 0
    deleted: List[str] = field(default_factory=list)
    staging_purged: int = 0
    errors: List[str] = field(default_factory=list)
    skipped: bool = False

    def to_dict(self) -> dict:
        return {
            "scanned": self.scanned,
            "retained": self.retained,
            "deleted": len(self.deleted),
            "staging_purged": self.staging_purged,
            "errors": list(self.errors),
            "skipped": self.skipped,
        }


class ReclamationSweeper:
    """
    Domain service enforcing the expiry horizon on the storage root.

    sweep() is idempotent and safe to run while uploads and downloads are in
    flight: uploads are staged under a hidden name until complete, and
    deleting a file does not disturb readers that already hold it open.
    """

    def __init__(
        self,
        storage: IFileStorageRepository,
        expiry_horizon: timedelta,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            storage: Storage root to scan
            expiry_horizon: Age after which a file is deleted
            clock: Source of the current epoch time
        """
        self._storage = storage
        self._horizon = expiry_horizon
        self._clock = clock

    @property
    def expiry_horizon(self) -> timedelta:
        return self._horizon

    def sweep(self) -> SweepReport:
        """
        Delete every visible entry strictly older than the horizon.

        Entries whose name starts with '.' are skipped. A failure on one
        entry is logged and the scan moves on; a storage root that cannot be
        opened turns the whole cycle into a no-op.

        Returns:
            SweepReport for this cycle
        """
        now = self._clock()
        report = SweepReport()

        try:
            names = self._storage.list_names()
        except OSError as e:
            logger.error(f"Cannot open storage root, skipping sweep: {e}")
            report.skipped = True
            return report

        for name in names:
            if name.startswith(HIDDEN_PREFIX):
                continue
            report.scanned += 1
            try:
                self._reclaim(name, now, report)
            except SweepEntryError as e:
                logger.warning(str(e))
                report.errors.append(str(e))

        report.staging_purged = self._purge_stale_staging(now, report)

        logger.info(
            f"Sweep completed - Scanned: {report.scanned}, "
            f"Deleted: {len(report.deleted)}, "
            f"Staging purged: {report.staging_purged}, "
            f"Errors: {len(report.errors)}"
        )
        return report

    def run_periodically(self, interval_seconds: float, stop_event: threading.Event) -> None:
        """
        Sweep now and then every interval until stop_event is set.

        A failing cycle is logged and does not end the loop.
        """
        logger.info(
            f"Sweeper running every {interval_seconds}s, "
            f"horizon {self._horizon.total_seconds()}s"
        )
        while not stop_event.is_set():
            try:
                self.sweep()
            except Exception:
                logger.exception("Sweep cycle failed")
            if stop_event.wait(interval_seconds):
                break
        logger.info("Sweeper stopped")

    def _reclaim(self, name: str, now: float, report: SweepReport) -> None:
        try:
            stored = self._storage.stat(name)
        except OSError as e:
            raise SweepEntryError(name, e) from e

        if stored is None:
            # Vanished since listing, or not a regular file
            return
        if not stored.is_expired(self._horizon, now):
            report.retained += 1
            return

        try:
            removed = self._storage.delete(name)
        except OSError as e:
            raise SweepEntryError(name, e) from e

        if removed:
            report.deleted.append(name)
            logger.info(f"Deleted expired file: {name}")
        else:
            logger.info(f"Expired file already gone: {name}")

    def _purge_stale_staging(self, now: float, report: SweepReport) -> int:
        """Remove staging leftovers of crashed uploads older than the horizon."""
        try:
            staged = self._storage.list_staging()
        except OSError as e:
            logger.warning(f"Cannot read staging area: {e}")
            return 0

        count = 0
        for entry in staged:
            if not entry.is_expired(self._horizon, now):
                continue
            try:
                if self._storage.discard_staging(entry.identifier):
                    count += 1
                    logger.info(f"Removed stale staging file: {entry.identifier}")
            except OSError as e:
                error = SweepEntryError(entry.identifier, e)
                logger.warning(str(error))
                report.errors.append(str(error))
        return count


def start_sweeper_thread(
    sweeper: ReclamationSweeper,
    interval_seconds: float,
    stop_event: Optional[threading.Event] = None,
) -> tuple[threading.Thread, threading.Event]:
    """
    Run a sweeper for the lifetime of the process in a daemon thread.

    Returns:
        Tuple of (thread, stop_event); set the event to stop the loop
    """
    if stop_event is None:
        stop_event = threading.Event()
    thread = threading.Thread(
        target=sweeper.run_periodically,
        args=(interval_seconds, stop_event),
        name="slashbin-sweeper",
        daemon=True,
    )
    thread.start()
    return thread, stop_event
