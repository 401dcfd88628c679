"""
Shared pytest fixtures and configuration for the slashbin test suite.

This module provides:
- Hypothesis configuration for property-based testing
- Environment defaults so importing the Celery app never touches ./uploads
- Storage, application and client fixtures
- Pytest marker hooks
"""

import os
import tempfile
from unittest.mock import Mock

import pytest

# Hypothesis configuration
from hypothesis import settings, HealthCheck, Phase

# Module level so slashbin.celery_app (which builds an app on import) sees them
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="slashbin-tests-")
os.environ["SWEEPER_MODE"] = "off"

from slashbin.app_factory import create_app  # noqa: E402
from slashbin.config.app_config import AppConfig  # noqa: E402
from slashbin.domain.file_storage import (  # noqa: E402
    IdentifierGenerator,
    IFileStorageRepository,
)
from slashbin.infrastructure.local_file_storage_repository import (  # noqa: E402
    LocalFileStorageRepository,
)

# Register Hypothesis profiles
settings.register_profile(
    "default",
    max_examples=100,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.target, Phase.shrink],
)
settings.register_profile(
    "ci",
    max_examples=200,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.register_profile(
    "dev",
    max_examples=10,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "default"))


# =============================================================================
# Storage Fixtures
# =============================================================================

@pytest.fixture
def upload_dir(tmp_path):
    """Storage root inside a pytest-managed temporary directory."""
    return tmp_path / "uploads"


@pytest.fixture
def storage(upload_dir):
    """Real LocalFileStorageRepository on the temporary storage root."""
    return LocalFileStorageRepository(base_path=str(upload_dir))


@pytest.fixture
def seeded_generator():
    """Deterministic identifier generator."""
    return IdentifierGenerator.from_seed(1234)


@pytest.fixture
def mock_storage_repository():
    """
    Provide a mock storage repository for unit testing.

    Returns a Mock restricted to the IFileStorageRepository interface.
    """
    mock = Mock(spec=IFileStorageRepository)
    mock.exists.return_value = False
    mock.stat.return_value = None
    mock.open.return_value = None
    mock.list_names.return_value = []
    mock.list_staging.return_value = []
    mock.delete.return_value = True
    mock.discard_staging.return_value = True
    mock.is_writable.return_value = True
    return mock


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest.fixture
def app_env(monkeypatch, upload_dir):
    """Environment for an application on the temporary storage root."""
    monkeypatch.setenv("UPLOAD_DIR", str(upload_dir))
    monkeypatch.setenv("SWEEPER_MODE", "off")
    monkeypatch.setenv("DEFAULT_HOST", "files.example.test")
    monkeypatch.delenv("MAX_FILE_SIZE", raising=False)
    monkeypatch.delenv("FILE_EXPIRY_DAYS", raising=False)
    monkeypatch.delenv("RANDOM_SEED", raising=False)
    return monkeypatch


@pytest.fixture
def app_config(app_env):
    return AppConfig()


@pytest.fixture
def app(app_config):
    """Flask application without the background sweeper."""
    flask_app = create_app(app_config, start_sweeper=False)
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


# =============================================================================
# Pytest Configuration Hooks
# =============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (real filesystem)"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests (full HTTP workflows)"
    )
    config.addinivalue_line(
        "markers", "property: Property-based tests using Hypothesis"
    )


def pytest_collection_modifyitems(config, items):
    """
    Automatically mark tests based on their location.

    - tests/unit/* -> @pytest.mark.unit
    - tests/integration/* -> @pytest.mark.integration
    - tests/e2e/* -> @pytest.mark.e2e
    - tests/property/* -> @pytest.mark.property
    """
    for item in items:
        test_path = str(item.fspath)

        if "/unit/" in test_path or "\\unit\\" in test_path:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in test_path or "\\integration\\" in test_path:
            item.add_marker(pytest.mark.integration)
        elif "/e2e/" in test_path or "\\e2e\\" in test_path:
            item.add_marker(pytest.mark.e2e)
        elif "/property/" in test_path or "\\property\\" in test_path:
            item.add_marker(pytest.mark.property)
