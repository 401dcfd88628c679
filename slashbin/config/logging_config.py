"""
Logging Configuration

Configures the root logger for the application. Modules log through
``logging.getLogger(__name__)``; request handlers use ``current_app.logger``.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - [%(levelname)s] - %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger.

    Call once at startup, from the application factory.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stdout,
    )
    # Silence noisy libraries
    logging.getLogger("werkzeug").setLevel(logging.WARNING)
    logging.getLogger("kombu").setLevel(logging.WARNING)
