"""
Unit tests for configuration and the storage client factory.
"""

import pytest

from geobucket.config import get_settings
from geobucket.infrastructure.storage import (
    InMemoryS3Client,
    MissingParameterError,
    StorageConfig,
    create_s3_client,
    create_s3_client_from_settings,
)


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self):
        settings = get_settings()

        assert settings.upload_dir == "./uploads/"
        assert settings.upload_field_key == "file"
        assert settings.fallback_currency == "USD"
        assert "currency" in settings.geolocation_fields_list

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("UPLOAD_DIR", "/tmp/staging/")
        monkeypatch.setenv("S3_BUCKET_NAME", "media")
        get_settings.cache_clear()

        settings = get_settings()

        assert settings.upload_dir == "/tmp/staging/"
        assert settings.s3_bucket_name == "media"

    def test_bucket_required_outside_mock_mode(self, monkeypatch):
        monkeypatch.setenv("S3_MOCK_MODE", "false")
        get_settings.cache_clear()

        assert "S3_BUCKET_NAME" in get_settings().validate_required_fields()

    def test_nothing_required_in_mock_mode(self, monkeypatch):
        monkeypatch.setenv("S3_MOCK_MODE", "true")
        get_settings.cache_clear()

        assert get_settings().validate_required_fields() == []


class TestCreateS3Client:
    """Tests for the client factory."""

    def test_mock_mode_returns_in_memory_client(self):
        assert isinstance(create_s3_client(mock_mode=True), InMemoryS3Client)

    def test_config_required_outside_mock_mode(self):
        with pytest.raises(ValueError, match="config is required"):
            create_s3_client()

    def test_builds_boto3_client_for_custom_endpoint(self):
        config = StorageConfig(
            bucket_name="media",
            access_key_id="key",
            secret_access_key="secret",
            endpoint_url="http://localhost:9000",
            region="us-east-1",
        )

        client = create_s3_client(config)

        assert client.meta.endpoint_url == "http://localhost:9000"

    def test_config_from_settings(self, monkeypatch):
        monkeypatch.setenv("S3_BUCKET_NAME", "media")
        monkeypatch.setenv("S3_ENDPOINT_URL", "http://minio:9000")
        get_settings.cache_clear()

        config = StorageConfig.from_settings()

        assert config.bucket_name == "media"
        assert config.endpoint_url == "http://minio:9000"


class TestCreateS3ClientFromSettings:
    """Tests for the settings-driven client factory."""

    def test_mock_mode_from_env(self, monkeypatch):
        monkeypatch.setenv("S3_MOCK_MODE", "true")
        get_settings.cache_clear()

        assert isinstance(create_s3_client_from_settings(), InMemoryS3Client)

    def test_missing_bucket_raises(self, monkeypatch):
        monkeypatch.setenv("S3_MOCK_MODE", "false")
        get_settings.cache_clear()

        with pytest.raises(MissingParameterError, match="S3_BUCKET_NAME"):
            create_s3_client_from_settings()

    def test_access_key_without_secret_raises(self, monkeypatch):
        monkeypatch.setenv("S3_BUCKET_NAME", "media")
        monkeypatch.setenv("S3_ACCESS_KEY_ID", "key")
        get_settings.cache_clear()

        with pytest.raises(MissingParameterError, match="S3_SECRET_ACCESS_KEY"):
            create_s3_client_from_settings()

    def test_builds_real_client_when_configured(self, monkeypatch):
        monkeypatch.setenv("S3_BUCKET_NAME", "media")
        monkeypatch.setenv("S3_ENDPOINT_URL", "http://minio:9000")
        monkeypatch.setenv("S3_ACCESS_KEY_ID", "key")
        monkeypatch.setenv("S3_SECRET_ACCESS_KEY", "secret")
        monkeypatch.setenv("S3_REGION", "us-east-1")
        get_settings.cache_clear()

        client = create_s3_client_from_settings()

        assert client.meta.endpoint_url == "http://minio:9000"
