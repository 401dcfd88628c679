"""
Celery Configuration

Broker, serialization and queue settings for the sweep worker, plus the
beat schedule used when SWEEPER_MODE=celery.
"""

import os

from celery import Celery
from kombu import Queue

SWEEP_TASK_NAME = "slashbin.tasks.sweep_expired_files"
SWEEP_QUEUE = "cleanup_queue"


class CeleryConfig:
    """Settings loaded with config_from_object."""

    broker_url = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0")
    result_backend = os.getenv("CELERY_RESULT_BACKEND", "redis://localhost:6379/0")

    task_serializer = "json"
    result_serializer = "json"
    accept_content = ["json"]
    timezone = "UTC"
    enable_utc = True

    # One sweep at a time per worker, acknowledged once it finished
    worker_prefetch_multiplier = 1
    task_acks_late = True

    task_routes = {
        SWEEP_TASK_NAME: {"queue": SWEEP_QUEUE},
    }
    task_default_queue = "default"
    task_queues = (
        Queue("default", routing_key="default"),
        Queue(SWEEP_QUEUE, routing_key="cleanup"),
    )

    # Sweep reports are only interesting for a while
    result_expires = 6 * 3600


def beat_schedule(interval_seconds: int) -> dict:
    """Beat schedule running the sweep every interval_seconds."""
    return {
        "sweep-expired-files": {
            "task": SWEEP_TASK_NAME,
            "schedule": float(interval_seconds),
        },
    }


def make_celery(app, sweep_interval: int) -> Celery:
    """
    Build the Celery instance bound to a Flask app.

    Tasks run inside app.app_context() so they can reach app.container.

    Args:
        app: Flask application the tasks resolve services from
        sweep_interval: Seconds between scheduled sweeps
    """
    celery = Celery(
        app.import_name,
        broker=CeleryConfig.broker_url,
        backend=CeleryConfig.result_backend,
    )
    celery.config_from_object(CeleryConfig)
    celery.conf.beat_schedule = beat_schedule(sweep_interval)

    class AppContextTask(celery.Task):
        def __call__(self, *args, **kwargs):
            with app.app_context():
                return self.run(*args, **kwargs)

    celery.Task = AppContextTask
    return celery
