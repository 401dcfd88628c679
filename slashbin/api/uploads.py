"""
Upload request handling shared by the web routes and API v1.
"""

from typing import Optional

from flask import current_app, request
from werkzeug.utils import secure_filename

from slashbin.application.upload_service import UploadService, build_base_url
from slashbin.domain.errors import NoFileUploadedError
from slashbin.domain.file_storage import FileDescriptor

MULTIPART_FIELD = "file"


def store_request_body() -> FileDescriptor:
    """
    Stream the current request's file into storage.

    A multipart/form-data request contributes its 'file' part and that
    part's filename; anything else is taken as the raw file body.

    Raises:
        NoFileUploadedError: If there is no file part or the body is empty
        StorageIOError: If the file cannot be stored
    """
    upload_service = current_app.container.resolve(UploadService)
    base_url = build_base_url(
        request.scheme,
        request.headers.get("Host"),
        current_app.config["DEFAULT_HOST"],
    )

    if request.mimetype == "multipart/form-data":
        file_part = request.files.get(MULTIPART_FIELD)
        if file_part is None:
            raise NoFileUploadedError(f"No '{MULTIPART_FIELD}' form field")
        filename: Optional[str] = secure_filename(file_part.filename or "") or None
        return upload_service.upload(file_part.stream, base_url, filename=filename)

    return upload_service.upload(request.stream, base_url)
