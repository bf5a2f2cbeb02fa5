"""
Shared fixtures for unit tests.

No test here touches the network or a real bucket: HTTP goes through
httpx.MockTransport and storage through InMemoryS3Client.
"""

import io
from typing import Callable

import httpx
import pytest
from PIL import Image

from geobucket.config.settings import get_settings
from geobucket.infrastructure.storage.client import InMemoryS3Client


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Drop cached settings so env changes in one test don't leak into another."""
    for name in (
        "GEOLOCATION_URL", "GEOLOCATION_FIELDS", "EXCHANGE_RATE_URL", "UPLOAD_DIR",
        "S3_BUCKET_NAME", "S3_ACCESS_KEY_ID", "S3_SECRET_ACCESS_KEY",
        "S3_ENDPOINT_URL", "S3_REGION", "S3_MOCK_MODE",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def s3() -> InMemoryS3Client:
    return InMemoryS3Client()


@pytest.fixture
def mock_http() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient]:
    """Build an AsyncClient whose requests are answered by `handler`."""
    def factory(handler):
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return factory


def make_png(width: int, height: int) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color=(0, 120, 200)).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def png_10x20() -> bytes:
    return make_png(10, 20)


@pytest.fixture
def fixed_ids() -> Callable[[], str]:
    """Deterministic id generator: id-0000000000001, id-0000000000002, ..."""
    counter = {"n": 0}

    def next_id() -> str:
        counter["n"] += 1
        return f"id-{counter['n']:013d}"

    return next_id
