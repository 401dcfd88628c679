"""
Application Configuration

Reads the service settings from the environment once, at process start.
Nothing here is reconfigurable at runtime.
"""

import os
from datetime import timedelta
from typing import Optional

DEFAULT_MAX_FILE_SIZE = 4 * 1024 * 1024 * 1024  # 4GB
SWEEPER_MODES = ("thread", "celery", "off")


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


class AppConfig:
    """Application configuration."""

    def __init__(self):
        # Server
        self.host = os.getenv("HOST", "0.0.0.0")
        self.port = _int_env("PORT", 3000)
        self.debug = os.getenv("FLASK_DEBUG", "false").lower() == "true"
        self.default_host = os.getenv("DEFAULT_HOST", "localhost:3000")

        # Storage
        self.upload_dir = os.getenv("UPLOAD_DIR", "uploads")
        self.max_file_size = _int_env("MAX_FILE_SIZE", DEFAULT_MAX_FILE_SIZE)

        # Expiry
        self.file_expiry_days = _int_env("FILE_EXPIRY_DAYS", 3)
        self.cleanup_interval = _int_env("CLEANUP_INTERVAL", 86400)  # 1 day
        self.sweeper_mode = os.getenv("SWEEPER_MODE", "thread").lower()

        # Identifiers
        seed = os.getenv("RANDOM_SEED")
        self.random_seed: Optional[int] = _int_env("RANDOM_SEED", 0) if seed else None

        # Logging
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()

        self._validate()

    def _validate(self) -> None:
        if self.file_expiry_days <= 0:
            raise ValueError("FILE_EXPIRY_DAYS must be positive")
        if self.cleanup_interval <= 0:
            raise ValueError("CLEANUP_INTERVAL must be positive")
        if self.max_file_size <= 0:
            raise ValueError("MAX_FILE_SIZE must be positive")
        if self.sweeper_mode not in SWEEPER_MODES:
            raise ValueError(
                f"SWEEPER_MODE must be one of {', '.join(SWEEPER_MODES)}, "
                f"got {self.sweeper_mode!r}"
            )

    @property
    def expiry_horizon(self) -> timedelta:
        return timedelta(days=self.file_expiry_days)
