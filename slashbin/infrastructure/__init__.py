"""
Infrastructure Layer

Concrete adapters for domain interfaces.
"""

from .local_file_storage_repository import LocalFileStorageRepository

__all__ = ["LocalFileStorageRepository"]
