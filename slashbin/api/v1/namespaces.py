"""
API Namespaces - Organized endpoint groups
"""

from flask import current_app
from flask_restx import Namespace, Resource

from slashbin.api.uploads import store_request_body
from slashbin.api.v1.models import error_response, file_descriptor, file_info, stats_response
from slashbin.application.stats_service import StatsService
from slashbin.application.upload_service import UploadService
from slashbin.domain.errors import (
    ErrorCategory,
    NoFileUploadedError,
    StorageIOError,
    StoredFileNotFoundError,
    create_error_response,
)
from slashbin.domain.file_storage import DownloadGateway, resolve_content_type

# =============================================================================
# Files Namespace - Upload and file information
# =============================================================================

files_ns = Namespace("files", description="File upload and information")


@files_ns.route("")
class FileUpload(Resource):
    """Store a file"""

    @files_ns.doc("upload_file")
    @files_ns.response(200, "Success", file_descriptor)
    @files_ns.response(400, "No File Uploaded", error_response)
    @files_ns.response(413, "File Too Large")
    @files_ns.response(500, "Storage Error", error_response)
    def post(self):
        """
        Upload a file

        Send the file as the raw request body, or as the 'file' field of a
        multipart/form-data form. Always answers with the JSON descriptor.
        """
        try:
            descriptor = store_request_body()
        except NoFileUploadedError as e:
            return create_error_response(
                ErrorCategory.NO_FILE_UPLOADED, e.technical_message, status_code=400
            )
        except StorageIOError as e:
            current_app.logger.error(f"API upload failed: {e}")
            return create_error_response(
                ErrorCategory.STORAGE_ERROR, str(e), status_code=500
            )

        return descriptor.to_dict(), 200


@files_ns.route("/<string:identifier>")
@files_ns.param("identifier", "The stored file identifier")
class FileInfo(Resource):
    """Stored file information"""

    @files_ns.doc("get_file_info")
    @files_ns.response(200, "Success", file_info)
    @files_ns.response(404, "File Not Found", error_response)
    def get(self, identifier):
        """
        Get size, content type and expiry of a stored file

        Follows the same rules as downloads: unsafe names are reported as
        not found.
        """
        gateway = current_app.container.resolve(DownloadGateway)
        horizon = current_app.container.resolve(UploadService).expiry_horizon
        try:
            stored = gateway.describe(identifier)
        except StoredFileNotFoundError:
            return create_error_response(
                ErrorCategory.FILE_NOT_FOUND,
                f"File {identifier!r} not found",
                status_code=404,
            )
        except OSError as e:
            current_app.logger.exception(f"Error describing {identifier!r}: {e}")
            return create_error_response(
                ErrorCategory.SYSTEM_ERROR, str(e), status_code=500
            )

        return stored.to_dict(horizon, resolve_content_type(identifier)), 200


# =============================================================================
# Stats Namespace - Storage usage
# =============================================================================

stats_ns = Namespace("stats", description="Storage statistics")


@stats_ns.route("")
class Stats(Resource):
    """Storage usage"""

    @stats_ns.doc("get_stats")
    @stats_ns.response(200, "Success", stats_response)
    @stats_ns.response(500, "Internal Server Error", error_response)
    def get(self):
        """
        Count live files and the space they use
        """
        stats_service = current_app.container.resolve(StatsService)
        try:
            return stats_service.get_stats(), 200
        except OSError as e:
            current_app.logger.exception(f"Could not read storage root: {e}")
            return create_error_response(
                ErrorCategory.SYSTEM_ERROR, str(e), status_code=500
            )
