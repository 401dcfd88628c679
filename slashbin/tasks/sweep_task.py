"""
Sweep Task

Celery beat task that runs one reclamation sweep over the storage root.
Thin wrapper that delegates to the ReclamationSweeper.
"""

import logging

from slashbin.celery_app import celery_app
from slashbin.config.celery_config import SWEEP_TASK_NAME

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, name=SWEEP_TASK_NAME)
def sweep_expired_files(self):
    """
    Delete stored files older than the expiry horizon.

    Runs every CLEANUP_INTERVAL seconds (configured in the beat schedule).
    Failures are logged and reported in the result rather than raised, so a
    bad cycle never stops the schedule.

    Returns:
        dict: Sweep statistics with counts and errors
    """
    logger.info("Starting sweep task")

    try:
        # Resolve through the container, never build the sweeper here
        from slashbin.celery_app import flask_app
        from slashbin.domain.file_storage import ReclamationSweeper

        sweeper = flask_app.container.resolve(ReclamationSweeper)
        report = sweeper.sweep()
        return report.to_dict()

    except Exception as e:
        error_msg = f"Sweep task failed: {e}"
        logger.error(error_msg, exc_info=True)
        return {
            "scanned": 0,
            "retained": 0,
            "deleted": 0,
            "staging_purged": 0,
            "errors": [error_msg],
            "skipped": True,
        }
