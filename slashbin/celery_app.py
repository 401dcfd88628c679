"""
Celery Application Instance

Creates the Celery app instance for the worker and beat scheduler used when
SWEEPER_MODE=celery. Uses the app factory so the task resolves the same
services as the web process.

Run with:
    celery -A slashbin.celery_app worker -Q cleanup_queue
    celery -A slashbin.celery_app beat
"""

from slashbin.app_factory import create_app

# The worker never runs the in-process sweeper thread
flask_app = create_app(start_sweeper=False)

celery_app = flask_app.celery

# Imported by name when the worker starts, after celery_app exists
celery_app.conf.imports = ("slashbin.tasks.sweep_task",)
