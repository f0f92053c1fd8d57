"""Pytest fixtures for media-worker tests: in-memory storage, moto S3, sample videos."""

import os
import subprocess
import threading
from pathlib import Path

import pytest
from hls_relay_shared import ObjectNotFound, ObjectStream
from moto import mock_aws


class InMemoryObjectStorage:
    """ObjectStorage for tests: thread-safe dict of (bucket, key) -> (body, content_type, acl)."""

    def __init__(self, fail_keys: set[str] | None = None) -> None:
        self.objects: dict[tuple[str, str], tuple[bytes, str | None, bool]] = {}
        self.fail_keys = fail_keys or set()
        self.calls: list[str] = []
        self._lock = threading.Lock()

    def upload(self, bucket, key, body, *, content_type=None) -> None:
        with self._lock:
            self.calls.append(key)
            self.objects[(bucket, key)] = (body, content_type, False)

    def upload_file(self, bucket, key, path, *, content_type=None, public_read=False) -> None:
        with self._lock:
            self.calls.append(key)
        if key in self.fail_keys:
            raise ConnectionError(f"simulated failure for {key}")
        with open(path, "rb") as f:
            body = f.read()
        with self._lock:
            self.objects[(bucket, key)] = (body, content_type, public_read)

    def open_stream(self, bucket, key) -> ObjectStream:
        if (bucket, key) not in self.objects:
            raise ObjectNotFound(key)
        body = self.objects[(bucket, key)][0]
        return ObjectStream(iter([body]), content_length=len(body))

    def exists(self, bucket, key) -> bool:
        return (bucket, key) in self.objects

    def list_object_keys(self, bucket, prefix) -> list[str]:
        return sorted(k for b, k in self.objects if b == bucket and k.startswith(prefix))


@pytest.fixture
def memory_storage() -> InMemoryObjectStorage:
    return InMemoryObjectStorage()


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


@pytest.fixture(scope="function")
def aws_credentials() -> None:
    """Set fake AWS credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"


@pytest.fixture
def s3_bucket(aws_credentials: None):
    """moto-backed bucket; yields its name."""
    import boto3

    with mock_aws():
        boto3.client("s3", region_name="us-east-1").create_bucket(Bucket="test-media-bucket")
        yield "test-media-bucket"


def _make_test_video(path: str | Path, duration_sec: float) -> bool:
    """
    Create an H.264 MP4 with a keyframe every second using ffmpeg.
    Returns True if the file was created, False if ffmpeg is not available.
    """
    path = Path(path)
    try:
        subprocess.run(
            [
                "ffmpeg",
                "-y",
                "-f",
                "lavfi",
                "-i",
                f"testsrc=size=160x120:rate=10:duration={duration_sec}",
                "-pix_fmt",
                "yuv420p",
                "-c:v",
                "libx264",
                "-g",
                "10",
                "-f",
                "mp4",
                str(path),
            ],
            check=True,
            capture_output=True,
        )
    except (subprocess.CalledProcessError, FileNotFoundError):
        return False
    return path.exists()


@pytest.fixture
def make_video():
    """Factory: make_video(path, duration_sec) -> bool (False when ffmpeg/libx264 is missing)."""
    return _make_test_video


@pytest.fixture
def storage_factory():
    """Factory for InMemoryObjectStorage, e.g. storage_factory(fail_keys={...})."""
    return InMemoryObjectStorage
