"""
Dependency Injection Container

Holds the storage repository and the services built on it, so the HTTP
layer and the Celery task resolve the same instances.
"""

import logging
import threading
from typing import Any, Dict, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')


class DependencyNotFoundError(Exception):
    """Raised by resolve() for a type nothing was registered under."""
    pass


class DependencyContainer:
    """
    Registry of shared service instances keyed by type.

    Overrides take precedence over registrations and exist for tests.
    Thread-safe for concurrent access.
    """

    def __init__(self):
        self._singletons: Dict[Type, Any] = {}
        self._overrides: Dict[Type, Any] = {}
        self._lock = threading.Lock()

    def register_singleton(self, interface: Type[T], instance: T) -> None:
        """
        Register a shared instance.

        Example:
            container.register_singleton(ReclamationSweeper, sweeper)
        """
        with self._lock:
            self._singletons[interface] = instance
            logger.debug(f"singleton {interface.__name__} registered")

    def resolve(self, interface: Type[T]) -> T:
        """
        Return the instance registered for interface.

        Raises:
            DependencyNotFoundError: If nothing is registered for interface
        """
        with self._lock:
            if interface in self._overrides:
                return self._overrides[interface]
            if interface in self._singletons:
                return self._singletons[interface]

        raise DependencyNotFoundError(
            f"No registration found for type: {interface.__name__}"
        )

    def override(self, interface: Type[T], replacement: T) -> None:
        """Replace a registration, primarily for testing."""
        with self._lock:
            self._overrides[interface] = replacement
            logger.debug(f"{interface.__name__} overridden")

    def clear_overrides(self) -> None:
        with self._lock:
            self._overrides.clear()

    def is_registered(self, interface: Type) -> bool:
        with self._lock:
            return interface in self._overrides or interface in self._singletons

    def __len__(self) -> int:
        with self._lock:
            return len(self._singletons)
