"""
Web Routes

The short-URL surface: landing page and assets, the up.sh helper,
POST /upload, and GET /<identifier> downloads. Responses here are plain
text or raw bytes; the JSON API lives under /api/v1.
"""

from flask import Blueprint, Response, current_app, jsonify, request, send_from_directory
from werkzeug.wsgi import wrap_file

from slashbin.api.uploads import store_request_body
from slashbin.application.upload_service import build_base_url, wants_plain_text
from slashbin.domain.errors import (
    ERROR_MESSAGES,
    ErrorCategory,
    NoFileUploadedError,
    StorageIOError,
    StoredFileNotFoundError,
)
from slashbin.domain.file_storage import DownloadGateway

web_bp = Blueprint("web", __name__)

NOT_FOUND_MESSAGE = ERROR_MESSAGES[ErrorCategory.FILE_NOT_FOUND]["message"]


def _plain(message: str, status: int) -> Response:
    return Response(message, status=status, mimetype="text/plain")


# =============================================================================
# Static pages
# =============================================================================

@web_bp.route("/", methods=["GET"])
def index():
    return send_from_directory(current_app.static_folder, "index.html")


@web_bp.route("/style.css", methods=["GET"])
def style():
    return send_from_directory(current_app.static_folder, "style.css")


@web_bp.route("/script.js", methods=["GET"])
def script():
    return send_from_directory(
        current_app.static_folder, "script.js", mimetype="application/javascript"
    )


# =============================================================================
# Upload
# =============================================================================

@web_bp.route("/upload", methods=["POST"])
def upload():
    """
    Store the request body and answer with its URL.

    Command line clients (curl, Wget, or ?cli=true) get the bare URL as
    text/plain; everyone else gets the JSON descriptor.
    """
    try:
        descriptor = store_request_body()
    except NoFileUploadedError as e:
        return _plain(e.message, 400)
    except StorageIOError as e:
        current_app.logger.error(f"Upload failed: {e}")
        return _plain(ERROR_MESSAGES[ErrorCategory.STORAGE_ERROR]["message"], 500)

    current_app.logger.info(
        f"HTTP upload from {request.remote_addr} - {descriptor.identifier} "
        f"({descriptor.size} bytes) - Agent: {request.user_agent.string or 'unknown'}"
    )

    if wants_plain_text(request.headers.get("User-Agent"), request.args.get("cli")):
        return _plain(descriptor.url, 200)
    return jsonify(descriptor.to_dict()), 200


# =============================================================================
# Upload helper script
# =============================================================================

UPLOAD_SCRIPT = """#!/bin/sh
# Upload files to {base_url} and print one download URL per file.
# Files expire after {expiry_days} day(s).
#
# Usage: curl -s {base_url}/up.sh | sh -s -- FILE [FILE...]

SERVER="{base_url}"

if [ "$#" -eq 0 ]; then
    echo "usage: up.sh FILE [FILE...]" >&2
    exit 2
fi

status=0
for file in "$@"; do
    if [ ! -f "$file" ]; then
        echo "$file: not a regular file" >&2
        status=1
        continue
    fi
    result=$(curl -s -F "file=@$file" "$SERVER/upload?cli=true")
    case "$result" in
        http*) echo "$result" ;;
        *) echo "$file: upload failed: $result" >&2; status=1 ;;
    esac
done
exit $status
"""


@web_bp.route("/up.sh", methods=["GET"])
def upload_script():
    """Shell helper that uploads each argument and prints its URL."""
    base_url = build_base_url(
        request.scheme,
        request.headers.get("Host"),
        current_app.config["DEFAULT_HOST"],
    )
    script = UPLOAD_SCRIPT.format(
        base_url=base_url,
        expiry_days=current_app.config_obj.file_expiry_days,
    )
    return Response(script, status=200, mimetype="text/x-shellscript")


# =============================================================================
# Download
# =============================================================================

@web_bp.route("/<path:name>", methods=["GET"])
def download(name):
    """
    Stream a stored file.

    Unsafe names answer exactly like missing files.
    """
    gateway = current_app.container.resolve(DownloadGateway)
    try:
        served = gateway.serve(name)
    except StoredFileNotFoundError:
        return _plain(NOT_FOUND_MESSAGE, 404)
    except OSError as e:
        current_app.logger.exception(f"Error serving {name!r}: {e}")
        return _plain(ERROR_MESSAGES[ErrorCategory.SYSTEM_ERROR]["message"], 500)

    response = Response(
        wrap_file(request.environ, served.stream),
        mimetype=served.content_type,
        direct_passthrough=True,
    )
    response.content_length = served.size
    return response


def register_error_handlers(app) -> None:
    """Plain-text answers for transport-level rejections on the web routes."""

    @app.errorhandler(413)
    def request_entity_too_large(error):
        limit = current_app.config.get("MAX_CONTENT_LENGTH")
        return _plain(f"File size exceeds the {limit} byte limit.", 413)
