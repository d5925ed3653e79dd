"""
Pytest fixtures for thumbgen tests.
"""

import io
import logging

import pytest
from PIL import Image


@pytest.fixture
def make_image_bytes():
    """Fixture providing a factory for encoded test images."""
    def _make(width=100, height=100, fmt='JPEG', mode='RGB', color='red'):
        img = Image.new(mode, (width, height), color=color)
        buffer = io.BytesIO()
        img.save(buffer, format=fmt)
        return buffer.getvalue()
    return _make


@pytest.fixture
def sample_image_bytes(make_image_bytes):
    """Fixture providing sample JPEG image bytes."""
    return make_image_bytes(100, 100, 'JPEG')


@pytest.fixture
def sample_png_bytes(make_image_bytes):
    """Fixture providing sample PNG image bytes with transparency."""
    return make_image_bytes(100, 100, 'PNG', mode='RGBA', color=(255, 0, 0, 128))


@pytest.fixture
def s3_config():
    """Fixture providing S3 configuration."""
    from thumbgen.s3_config import S3Config

    return S3Config(
        endpoint='https://test-endpoint.example.com:9000',
        access_key='test-access-key',
        secret_key='test-secret-key',
        region='us-east-1',
    )


@pytest.fixture
def mock_store(sample_image_bytes):
    """Fixture providing a mock object store."""
    from unittest.mock import MagicMock
    mock = MagicMock()
    mock.download.return_value = sample_image_bytes
    mock.upload.return_value = None
    mock.exists.return_value = False
    return mock


@pytest.fixture
def local_root(tmp_path):
    """Fixture providing a local storage root with one bucket."""
    (tmp_path / 'b').mkdir()
    return tmp_path


@pytest.fixture
def logger():
    """Fixture providing a logger."""
    return logging.getLogger('test')


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep handler and S3 settings from the environment out of tests."""
    for name in (
        'THUMB_MAX_WIDTH', 'THUMB_MAX_HEIGHT', 'THUMB_ALLOW_ENLARGEMENT',
        'THUMB_PREFIX', 'THUMB_QUALITY', 'LOG_LEVEL',
        'S3_ENDPOINT', 'S3_ACCESS_KEY', 'S3_SECRET_KEY', 'S3_REGION', 'S3_VERIFY_SSL',
    ):
        monkeypatch.delenv(name, raising=False)
