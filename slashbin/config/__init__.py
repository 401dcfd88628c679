"""
Configuration

Environment-driven settings, logging and Celery wiring.
"""

from .app_config import AppConfig
from .logging_config import setup_logging

__all__ = ["AppConfig", "setup_logging"]
