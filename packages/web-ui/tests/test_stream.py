"""Tests for the stream gateway: relay published objects, reject bad paths, hide misses."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from hls_relay_web_ui.config import WebUISettings
from hls_relay_web_ui.main import app


def test_stream_segment_returns_identical_bytes(s3_client, s3_app, segment_set_dir: Path) -> None:
    """Published segment is relayed with video/MP2T and the uploaded bytes."""
    job = s3_app.upload()
    resp = s3_client.get(f"/stream/{job.namespace}/timer0.ts")
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "video/MP2T"
    assert resp.content == (segment_set_dir / "timer0.ts").read_bytes()
    assert resp.headers["content-length"] == str(len(resp.content))


def test_stream_playlist_content_type(s3_client, s3_app, segment_set_dir: Path) -> None:
    job = s3_app.upload()
    resp = s3_client.get(f"/stream/{job.namespace}/timer.m3u8")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("application/vnd.apple.mpegurl")
    assert resp.text == (segment_set_dir / "timer.m3u8").read_text()


def test_stream_missing_segment_is_404(s3_client, s3_app) -> None:
    """A segment past the end of a published namespace is a 404, not a server error."""
    job = s3_app.upload()
    resp = s3_client.get(f"/stream/{job.namespace}/timer99.ts")
    assert resp.status_code == 404
    assert resp.json() == {"error": "object_not_found", "detail": "File not found"}


def test_stream_unknown_namespace_is_404(client: TestClient) -> None:
    resp = client.get("/stream/1700000000000-deadbeef/timer0.ts")
    assert resp.status_code == 404
    assert resp.json()["error"] == "object_not_found"


def test_stream_unpublished_namespace_is_404(client: TestClient, app_with_mocks) -> None:
    """Objects exist but the ready marker does not: nothing is served yet."""
    storage = app_with_mocks.storage
    storage.upload("media-bucket", "videos/ns-1/timer0.ts", b"seg0")
    resp = client.get("/stream/ns-1/timer0.ts")
    assert resp.status_code == 404


def test_stream_without_ready_marker_requirement(client: TestClient, app_with_mocks) -> None:
    storage = app_with_mocks.storage
    storage.upload("media-bucket", "videos/ns-1/timer0.ts", b"seg0")
    app.state.web_settings = WebUISettings(require_ready_marker=False)
    resp = client.get("/stream/ns-1/timer0.ts")
    assert resp.status_code == 200
    assert resp.content == b"seg0"


def test_stream_nested_relative_path(client: TestClient, app_with_mocks) -> None:
    storage = app_with_mocks.storage
    storage.upload("media-bucket", "videos/ns-1/.ready", b"{}")
    storage.upload("media-bucket", "videos/ns-1/720p/timer0.ts", b"nested")
    resp = client.get("/stream/ns-1/720p/timer0.ts")
    assert resp.status_code == 200
    assert resp.content == b"nested"


@pytest.fixture
def spy_client(app_with_mocks):
    """Client whose storage is a MagicMock, to assert it is never reached."""
    spy = MagicMock()
    app.state.object_storage = spy
    return TestClient(app), spy


@pytest.mark.parametrize(
    "path",
    [
        "/stream/ns-1/..%2Fsecret.ts",
        "/stream/ns-1/..%2F..%2Fetc%2Fpasswd",
        "/stream/ns-1/720p%2F..%2F..%2Fother%2Ftimer0.ts",
        "/stream/ns-1/.ready",
        "/stream/.hidden/timer0.ts",
    ],
)
def test_stream_rejects_unsafe_paths_before_storage(spy_client, path: str) -> None:
    client, spy = spy_client
    resp = client.get(path)
    assert resp.status_code == 400
    assert resp.json()["error"] == "invalid_path_segment"
    assert spy.method_calls == []


def test_stream_storage_error_is_generic_404(spy_client) -> None:
    """Storage failures are logged; the client sees the same body as a miss."""
    client, spy = spy_client
    spy.exists.return_value = True
    spy.open_stream.side_effect = ConnectionError("endpoint unreachable")
    resp = client.get("/stream/ns-1/timer0.ts")
    assert resp.status_code == 404
    assert resp.json() == {"error": "object_not_found", "detail": "File not found"}
    assert "unreachable" not in resp.text


def test_stream_checks_publication_with_shared_marker_check(
    client: TestClient, app_with_mocks
) -> None:
    storage = app_with_mocks.storage
    storage.upload("media-bucket", "videos/ns-1/timer0.ts", b"seg0")
    with patch(
        "hls_relay_web_ui.routers.stream.is_namespace_published", return_value=False
    ) as published:
        resp = client.get("/stream/ns-1/timer0.ts")
    assert resp.status_code == 404
    published.assert_called_once_with(storage, "media-bucket", "videos", "ns-1")
