"""
API Models for response documentation
"""

from flask_restx import fields

from slashbin.api.v1 import api

# =============================================================================
# Response Models
# =============================================================================

file_descriptor = api.model(
    "FileDescriptor",
    {
        "url": fields.String(
            description="Download URL", example="http://localhost:3000/k3v9x0qa"
        ),
        "filename": fields.String(
            description="Original filename, or the identifier for raw uploads"
        ),
        "size": fields.Integer(description="Stored size in bytes"),
        "expires": fields.String(
            description="Expiry moment", example="2026-10-22 14:03:11"
        ),
    },
)

file_info = api.model(
    "FileInfo",
    {
        "identifier": fields.String(description="Stored file identifier"),
        "size": fields.Integer(description="Size in bytes"),
        "content_type": fields.String(description="Media type sent on download"),
        "modified": fields.String(description="Last modification moment"),
        "expires": fields.String(description="Moment the sweeper may delete it"),
    },
)

stats_response = api.model(
    "StatsResponse",
    {
        "files": fields.Integer(description="Number of live files"),
        "total_size": fields.Integer(description="Total size in bytes"),
        "human_readable_size": fields.String(description="Total size, e.g. '1.5 MB'"),
    },
)

error_response = api.model(
    "ErrorResponse",
    {
        "error": fields.String(description="Error category"),
        "title": fields.String(description="Short error title"),
        "message": fields.String(description="User-friendly error message"),
        "action": fields.String(description="Suggested action"),
    },
)
