"""
Application Layer

Services that orchestrate the file storage domain for the HTTP layer and
background tasks.
"""

from .dependency_container import DependencyContainer, DependencyNotFoundError
from .stats_service import StatsService, format_size
from .upload_service import UploadService, build_base_url, wants_plain_text

__all__ = [
    "DependencyContainer",
    "DependencyNotFoundError",
    "StatsService",
    "UploadService",
    "build_base_url",
    "format_size",
    "wants_plain_text",
]
