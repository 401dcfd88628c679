"""
End-to-end tests for the upload / download / expiry workflow

Drives the full Flask application through its test client, against a real
storage root in a temporary directory.
"""

import os
import re
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from io import BytesIO

import pytest

from slashbin.app_factory import create_app
from slashbin.config.app_config import AppConfig
from slashbin.domain.file_storage import ReclamationSweeper
from slashbin.domain.file_storage.entities import EXPIRY_DATE_FORMAT

CURL = {"User-Agent": "curl/8.4.0"}
BROWSER = {"User-Agent": "Mozilla/5.0 (X11; Linux x86_64) Gecko/20100101 Firefox/120.0"}
URL_PATTERN = re.compile(r"http://localhost/([a-z0-9]{8})")


def visible_files(upload_dir):
    return sorted(n for n in os.listdir(upload_dir) if not n.startswith("."))


class TestCommandLineUpload:
    """curl/Wget style uploads answered with a bare URL."""

    def test_curl_upload_returns_bare_url(self, client):
        response = client.post("/upload", data=b"helloworld", headers=CURL)

        assert response.status_code == 200
        assert response.mimetype == "text/plain"
        assert URL_PATTERN.fullmatch(response.get_data(as_text=True))

    def test_wget_upload_returns_bare_url(self, client):
        response = client.post("/upload", data=b"x", headers={"User-Agent": "Wget/1.21.4"})
        assert URL_PATTERN.fullmatch(response.get_data(as_text=True))

    def test_cli_query_flag(self, client):
        response = client.post("/upload?cli=true", data=b"x", headers=BROWSER)
        assert URL_PATTERN.fullmatch(response.get_data(as_text=True))

    def test_upload_then_download_round_trip(self, client):
        payload = os.urandom(200_000)

        url = client.post("/upload", data=payload, headers=CURL).get_data(as_text=True)
        identifier = URL_PATTERN.fullmatch(url).group(1)
        response = client.get(f"/{identifier}")

        assert response.status_code == 200
        assert response.data == payload
        assert response.headers["Content-Length"] == str(len(payload))
        assert response.mimetype == "application/octet-stream"

    def test_url_uses_host_header(self, client):
        response = client.post(
            "/upload", data=b"x", headers={**CURL, "Host": "share.example.org:8080"}
        )
        assert response.get_data(as_text=True).startswith("http://share.example.org:8080/")


class TestBrowserUpload:
    """Uploads from other clients answered with the JSON descriptor."""

    def test_json_descriptor(self, client):
        response = client.post("/upload", data=b"helloworld", headers=BROWSER)

        body = response.get_json()
        assert response.status_code == 200
        assert body["size"] == 10
        assert URL_PATTERN.fullmatch(body["url"])
        assert body["filename"] == body["url"].rsplit("/", 1)[1]
        assert datetime.strptime(body["expires"], EXPIRY_DATE_FORMAT) > datetime.now()

    def test_multipart_upload(self, client):
        response = client.post(
            "/upload",
            data={"file": (BytesIO(b"multipart body"), "notes.txt")},
            content_type="multipart/form-data",
            headers=BROWSER,
        )

        body = response.get_json()
        assert response.status_code == 200
        assert body["filename"] == "notes.txt"
        assert body["size"] == 14

        identifier = body["url"].rsplit("/", 1)[1]
        assert client.get(f"/{identifier}").data == b"multipart body"

    def test_multipart_filename_is_sanitized(self, client):
        response = client.post(
            "/upload",
            data={"file": (BytesIO(b"x"), "../../evil name.txt")},
            content_type="multipart/form-data",
            headers=BROWSER,
        )
        assert response.get_json()["filename"] == "evil_name.txt"

    def test_multipart_without_file_field(self, client):
        response = client.post(
            "/upload",
            data={"other": "value"},
            content_type="multipart/form-data",
            headers=CURL,
        )

        assert response.status_code == 400
        assert response.get_data(as_text=True) == "No file uploaded"


class TestRejectedUploads:
    """Uploads that must leave nothing behind."""

    def test_empty_body(self, client, upload_dir):
        response = client.post("/upload", data=b"", headers=CURL)

        assert response.status_code == 400
        assert response.get_data(as_text=True) == "No file uploaded"
        assert visible_files(upload_dir) == []
        assert os.listdir(upload_dir / ".staging") == []

    def test_oversized_body(self, app_env, upload_dir):
        app_env.setenv("MAX_FILE_SIZE", "16")
        client = create_app(AppConfig(), start_sweeper=False).test_client()

        response = client.post("/upload", data=b"x" * 32, headers=CURL)

        assert response.status_code == 413
        assert "exceeds" in response.get_data(as_text=True)
        assert visible_files(upload_dir) == []
        assert os.listdir(upload_dir / ".staging") == []

    def test_body_at_limit_accepted(self, app_env):
        app_env.setenv("MAX_FILE_SIZE", "16")
        client = create_app(AppConfig(), start_sweeper=False).test_client()

        response = client.post("/upload", data=b"x" * 16, headers=CURL)

        assert response.status_code == 200


class TestDownloads:
    """Download lookups and refusals."""

    def test_unknown_identifier(self, client):
        response = client.get("/zzzzzzzz")

        assert response.status_code == 404
        assert response.get_data(as_text=True) == "File not found or expired"

    @pytest.mark.parametrize(
        "path", ["/../../etc/passwd", "/..%2F..%2Fetc%2Fpasswd", "/a/../../secret"]
    )
    def test_traversal_attempts_read_as_missing(self, client, path):
        response = client.get(path)

        assert response.status_code == 404
        assert response.get_data(as_text=True) == "File not found or expired"

    def test_hidden_names_read_as_missing(self, client, upload_dir):
        (upload_dir / ".secret").write_bytes(b"hidden")

        assert client.get("/.secret").status_code == 404
        assert client.get("/.staging").status_code == 404

    def test_content_type_from_extension(self, client, upload_dir):
        (upload_dir / "page.html").write_bytes(b"<p>hi</p>")

        response = client.get("/page.html")

        assert response.status_code == 200
        assert response.mimetype == "text/html"
        assert response.data == b"<p>hi</p>"


class TestExpiry:
    """Files disappear once swept past the horizon."""

    def test_expired_file_swept(self, app, client, upload_dir):
        url = client.post("/upload", data=b"short lived", headers=CURL).get_data(as_text=True)
        identifier = URL_PATTERN.fullmatch(url).group(1)
        old = time.time() - 4 * 24 * 3600
        os.utime(upload_dir / identifier, (old, old))

        report = app.container.resolve(ReclamationSweeper).sweep()

        assert report.deleted == [identifier]
        assert client.get(f"/{identifier}").status_code == 404

    def test_fresh_file_survives_sweep(self, app, client):
        url = client.post("/upload", data=b"fresh", headers=CURL).get_data(as_text=True)
        identifier = URL_PATTERN.fullmatch(url).group(1)

        app.container.resolve(ReclamationSweeper).sweep()

        assert client.get(f"/{identifier}").data == b"fresh"


class TestConcurrentUploads:

    def test_parallel_uploads_get_distinct_identifiers(self, app):
        payloads = [f"payload number {i}".encode() * 100 for i in range(16)]

        def upload(payload):
            response = app.test_client().post("/upload", data=payload, headers=CURL)
            return URL_PATTERN.fullmatch(response.get_data(as_text=True)).group(1)

        with ThreadPoolExecutor(max_workers=8) as pool:
            identifiers = list(pool.map(upload, payloads))

        assert len(set(identifiers)) == len(payloads)
        client = app.test_client()
        for identifier, payload in zip(identifiers, payloads):
            assert client.get(f"/{identifier}").data == payload


class TestWebPages:

    def test_index(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert b"upload-form" in response.data

    def test_assets(self, client):
        assert client.get("/style.css").status_code == 200
        assert client.get("/script.js").status_code == 200

    def test_cors_headers(self, client):
        response = client.post(
            "/upload", data=b"x", headers={**CURL, "Origin": "http://elsewhere.example"}
        )
        assert response.headers.get("Access-Control-Allow-Origin") == "*"

    def test_cors_wildcard_for_any_origin(self, client):
        for origin in ("http://elsewhere.example", "https://another.example:8443"):
            response = client.get("/", headers={"Origin": origin})
            assert response.headers.get("Access-Control-Allow-Origin") == "*"

    def test_cors_preflight_answers_wildcard(self, client):
        response = client.options(
            "/upload",
            headers={
                "Origin": "http://elsewhere.example",
                "Access-Control-Request-Method": "POST",
            },
        )
        assert response.headers.get("Access-Control-Allow-Origin") == "*"


class TestUploadScript:
    """The up.sh helper served for command line users."""

    def test_script_points_at_requesting_host(self, client):
        response = client.get("/up.sh")

        script = response.get_data(as_text=True)
        assert response.status_code == 200
        assert response.mimetype == "text/x-shellscript"
        assert script.startswith("#!/bin/sh\n")
        assert 'SERVER="http://localhost"' in script
        assert '"$SERVER/upload?cli=true"' in script
        assert "expire after 3 day(s)" in script

    def test_script_uses_forwarded_host_header(self, client):
        response = client.get("/up.sh", headers={"Host": "share.example.org"})
        assert 'SERVER="http://share.example.org"' in response.get_data(as_text=True)

    def test_script_upload_form_is_accepted(self, client):
        response = client.post(
            "/upload?cli=true",
            data={"file": (BytesIO(b"from up.sh"), "notes.txt")},
            content_type="multipart/form-data",
        )

        identifier = URL_PATTERN.fullmatch(response.get_data(as_text=True)).group(1)
        assert client.get(f"/{identifier}").data == b"from up.sh"
