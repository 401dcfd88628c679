"""
Application Factory

Creates and configures the Flask application with all dependencies.
The factory takes an optional AppConfig so tests can point the service at a
temporary storage root and keep the background sweeper off.
"""

import logging
from typing import Optional

from flask import Flask, jsonify
from flask_cors import CORS

from slashbin.application.dependency_container import DependencyContainer
from slashbin.application.stats_service import StatsService
from slashbin.application.upload_service import UploadService
from slashbin.config.app_config import AppConfig
from slashbin.config.celery_config import make_celery
from slashbin.config.logging_config import setup_logging
from slashbin.domain.file_storage import (
    DownloadGateway,
    IdentifierGenerator,
    IFileStorageRepository,
    ReclamationSweeper,
    start_sweeper_thread,
)
from slashbin.infrastructure.local_file_storage_repository import LocalFileStorageRepository

logger = logging.getLogger(__name__)


def create_app(config: Optional[AppConfig] = None, start_sweeper: bool = True) -> Flask:
    """
    Create and configure Flask application.

    Args:
        config: Application configuration, read from the environment if None
        start_sweeper: Start the in-process sweeper thread when
            SWEEPER_MODE=thread (tests and the Celery worker pass False)

    Returns:
        Configured Flask application

    Raises:
        PermissionError, OSError: If the storage root cannot be created
    """
    if config is None:
        config = AppConfig()

    setup_logging(config.log_level)

    app = Flask(__name__, static_folder="static")
    app.config["MAX_CONTENT_LENGTH"] = config.max_file_size
    app.config["DEFAULT_HOST"] = config.default_host
    app.config["RESTX_MASK_SWAGGER"] = False
    app.config_obj = config

    # Uploads come from anywhere, including browser pages on other origins
    CORS(
        app,
        resources={
            r"/*": {
                "origins": "*",
                "send_wildcard": True,
                "methods": ["GET", "POST", "OPTIONS"],
                "allow_headers": ["Content-Type"],
                "max_age": 3600,
            }
        },
    )

    _initialize_services(app, config)
    _initialize_celery(app, config)
    _register_blueprints(app)
    _register_health_endpoint(app)

    if start_sweeper and config.sweeper_mode == "thread":
        sweeper = app.container.resolve(ReclamationSweeper)
        _, stop_event = start_sweeper_thread(sweeper, config.cleanup_interval)
        app.sweeper_stop_event = stop_event
    else:
        app.sweeper_stop_event = None

    logger.info(
        f"slashbin ready - storage: {config.upload_dir}, "
        f"max size: {config.max_file_size} bytes, "
        f"expiry: {config.file_expiry_days} days, sweeper: {config.sweeper_mode}"
    )
    return app


def _initialize_services(app: Flask, config: AppConfig) -> None:
    """
    Build the storage root and services and attach them to the app.

    Everything is registered on one DependencyContainer; routes and the
    Celery task resolve from app.container. Unlike the optional
    infrastructure, a storage root that cannot be created is fatal.
    """
    container = DependencyContainer()

    storage = LocalFileStorageRepository(config.upload_dir)
    container.register_singleton(IFileStorageRepository, storage)
    container.register_singleton(LocalFileStorageRepository, storage)

    if config.random_seed is not None:
        generator = IdentifierGenerator.from_seed(config.random_seed)
        logger.warning(f"Identifiers are seeded ({config.random_seed}), not for production")
    else:
        generator = IdentifierGenerator()
    container.register_singleton(IdentifierGenerator, generator)

    container.register_singleton(
        UploadService, UploadService(storage, generator, config.expiry_horizon)
    )
    container.register_singleton(DownloadGateway, DownloadGateway(storage))
    container.register_singleton(
        ReclamationSweeper, ReclamationSweeper(storage, config.expiry_horizon)
    )
    container.register_singleton(StatsService, StatsService(storage))

    app.container = container
    logger.debug(f"Registered {len(container)} services")


def _initialize_celery(app: Flask, config: AppConfig) -> None:
    """Attach a Celery instance; the broker is only contacted by workers."""
    try:
        app.celery = make_celery(app, config.cleanup_interval)
    except Exception as e:
        logger.warning(f"Could not initialize Celery: {e}")
        app.celery = None


def _register_blueprints(app: Flask) -> None:
    from slashbin.api.v1 import API_VERSION, api_v1_bp
    from slashbin.api.web import register_error_handlers, web_bp

    app.register_blueprint(api_v1_bp)
    app.register_blueprint(web_bp)
    register_error_handlers(app)

    logger.info(
        f"API {API_VERSION} registered at /api/{API_VERSION} "
        f"with Swagger UI at /api/{API_VERSION}/docs"
    )


def _get_health_status(app: Flask) -> tuple[dict, int]:
    """
    Report whether the storage root accepts uploads.

    Returns:
        Tuple of (health_status_dict, http_status_code)
    """
    health_status = {
        "status": "ok",
        "storage": "unknown",
        "sweeper": app.config_obj.sweeper_mode,
    }

    storage = app.container.resolve(IFileStorageRepository)
    if storage.is_writable():
        health_status["storage"] = "writable"
    else:
        health_status["storage"] = "read-only"
        health_status["status"] = "degraded"

    status_code = 200 if health_status["status"] == "ok" else 503
    return health_status, status_code


def _register_health_endpoint(app: Flask) -> None:

    @app.route("/health", methods=["GET"])
    def health():
        """Health check endpoint."""
        health_status, status_code = _get_health_status(app)
        return jsonify(health_status), status_code
