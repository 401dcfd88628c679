"""
API v1 - slashbin REST API

Versioned JSON endpoints with OpenAPI/Swagger documentation.
"""

import os

from flask import Blueprint
from flask_restx import Api
from werkzeug.exceptions import RequestEntityTooLarge

from slashbin.domain.errors import ErrorCategory, create_error_response

API_VERSION = os.getenv("API_VERSION", "v1")

api_v1_bp = Blueprint("api_v1", __name__, url_prefix=f"/api/{API_VERSION}")

api = Api(
    api_v1_bp,
    version="1.0",
    title="slashbin API",
    description="Anonymous ephemeral file sharing",
    doc="/docs",  # Swagger UI at /api/v1/docs
    license="MIT",
)


@api.errorhandler(RequestEntityTooLarge)
def handle_too_large(error):
    """Oversized bodies on API routes answer JSON like every other API error."""
    return create_error_response(
        ErrorCategory.FILE_TOO_LARGE, str(error), status_code=413
    )


# Import namespaces after api is created to avoid circular imports
from .namespaces import files_ns, stats_ns  # noqa: E402

api.add_namespace(files_ns, path="/files")
api.add_namespace(stats_ns, path="/stats")
