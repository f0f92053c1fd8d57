"""Pytest fixtures: app with in-memory ObjectStorage and a PackagingPipeline on tmp dirs."""

import os
import threading
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from hls_relay_shared import ObjectNotFound, ObjectStream
from moto import mock_aws

from hls_relay_web_ui.config import WebUISettings
from hls_relay_web_ui.main import app
from media_worker.config import PipelineSettings
from media_worker.pipeline import PackagingPipeline

_STATE_ATTRS = ("pipeline", "object_storage", "bucket_name", "collection_root")


class MockObjectStorage:
    """ObjectStorage for tests: in-memory dict of (bucket, key) -> body."""

    def __init__(self) -> None:
        self.objects: dict[tuple[str, str], bytes] = {}
        self._lock = threading.Lock()

    def upload(self, bucket, key, body, *, content_type=None) -> None:
        with self._lock:
            self.objects[(bucket, key)] = body

    def upload_file(self, bucket, key, path, *, content_type=None, public_read=False) -> None:
        with open(path, "rb") as f:
            self.upload(bucket, key, f.read(), content_type=content_type)

    def open_stream(self, bucket, key) -> ObjectStream:
        if (bucket, key) not in self.objects:
            raise ObjectNotFound(key)
        body = self.objects[(bucket, key)]
        return ObjectStream(iter([body]), content_length=len(body))

    def exists(self, bucket, key) -> bool:
        return (bucket, key) in self.objects

    def list_object_keys(self, bucket, prefix) -> list[str]:
        return sorted(k for b, k in self.objects if b == bucket and k.startswith(prefix))


@pytest.fixture
def mock_object_storage() -> MockObjectStorage:
    return MockObjectStorage()


@pytest.fixture
def segment_set_dir(tmp_path: Path) -> Path:
    """Working directory holding timer.m3u8, timer0.ts, timer1.ts."""
    out = tmp_path / "output"
    out.mkdir()
    (out / "timer.m3u8").write_text(
        "#EXTM3U\n#EXT-X-VERSION:3\n#EXT-X-TARGETDURATION:10\n#EXT-X-MEDIA-SEQUENCE:0\n"
        "#EXTINF:10.0,\ntimer0.ts\n#EXTINF:5.0,\ntimer1.ts\n#EXT-X-ENDLIST\n"
    )
    (out / "timer0.ts").write_bytes(b"\x47" + b"segment-zero" * 50)
    (out / "timer1.ts").write_bytes(b"\x47" + b"segment-one" * 20)
    return out


def _install(pipeline: PackagingPipeline) -> None:
    app.state.pipeline = pipeline
    app.state.object_storage = pipeline.storage
    app.state.bucket_name = pipeline.bucket
    app.state.collection_root = pipeline.collection_root


def _reset_state(web_settings: WebUISettings) -> None:
    for attr in _STATE_ATTRS:
        if hasattr(app.state, attr):
            delattr(app.state, attr)
    app.state.web_settings = web_settings


@pytest.fixture
def pipeline_settings(tmp_path: Path, segment_set_dir: Path) -> PipelineSettings:
    return PipelineSettings(
        input_file=str(tmp_path / "video" / "timer.mp4"),
        output_dir=str(segment_set_dir),
    )


@pytest.fixture
def app_with_mocks(mock_object_storage: MockObjectStorage, pipeline_settings: PipelineSettings):
    """Set app.state so routes use the in-memory storage; bucket name fixed."""
    original = app.state.web_settings
    pipeline = PackagingPipeline(pipeline_settings, mock_object_storage, "media-bucket")
    _install(pipeline)
    app.state.web_settings = WebUISettings(require_ready_marker=True)
    yield pipeline
    _reset_state(original)


@pytest.fixture
def client(app_with_mocks) -> TestClient:
    """TestClient for the app (requires app_with_mocks to set app.state)."""
    return TestClient(app)


@pytest.fixture(scope="function")
def aws_credentials() -> None:
    """Set fake AWS credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"


@pytest.fixture
def s3_app(aws_credentials: None, pipeline_settings: PipelineSettings):
    """App wired to a moto-backed S3 bucket through S3ObjectStorage."""
    import boto3

    from hls_relay_aws_adapters import S3ObjectStorage

    original = app.state.web_settings
    with mock_aws():
        boto3.client("s3", region_name="us-east-1").create_bucket(Bucket="test-media-bucket")
        storage = S3ObjectStorage(region_name="us-east-1")
        pipeline = PackagingPipeline(pipeline_settings, storage, "test-media-bucket")
        _install(pipeline)
        app.state.web_settings = WebUISettings(require_ready_marker=True)
        yield pipeline
    _reset_state(original)


@pytest.fixture
def s3_client(s3_app) -> TestClient:
    return TestClient(app)
