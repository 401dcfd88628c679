"""
Unit tests for error categories and error responses
"""

from slashbin.domain.errors import (
    ERROR_MESSAGES,
    ApplicationError,
    ErrorCategory,
    InvalidIdentifierError,
    NoFileUploadedError,
    StoredFileNotFoundError,
    SweepEntryError,
    create_error_response,
)


class TestErrorMessages:

    def test_every_category_has_a_message(self):
        for category in ErrorCategory:
            info = ERROR_MESSAGES[category]
            assert {"title", "message", "action"} <= set(info)

    def test_not_found_message(self):
        assert ERROR_MESSAGES[ErrorCategory.FILE_NOT_FOUND]["message"] == "File not found or expired"


class TestApplicationError:

    def test_to_dict(self):
        error = ApplicationError(ErrorCategory.STORAGE_ERROR, "disk full")

        data = error.to_dict()

        assert data["error"] == "storage_error"
        assert data["message"] == "Upload failed."
        assert error.technical_message == "disk full"

    def test_no_file_uploaded(self):
        error = NoFileUploadedError("empty body")

        assert error.message == "No file uploaded"
        assert error.http_status_code == 400
        assert error.category is ErrorCategory.NO_FILE_UPLOADED

    def test_create_error_response(self):
        body, status = create_error_response(
            ErrorCategory.FILE_NOT_FOUND, "missing", status_code=404
        )

        assert status == 404
        assert body["error"] == "file_not_found"
        assert body["title"] == "File Not Found"


class TestDomainErrors:

    def test_invalid_identifier_is_not_found(self):
        assert issubclass(InvalidIdentifierError, StoredFileNotFoundError)

    def test_sweep_entry_error_keeps_name_and_cause(self):
        cause = PermissionError("denied")

        error = SweepEntryError("aaaaaaaa", cause)

        assert error.name == "aaaaaaaa"
        assert error.original_error is cause
        assert "aaaaaaaa" in str(error)
