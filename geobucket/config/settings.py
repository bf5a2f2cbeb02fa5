"""
Library configuration using Pydantic settings.

Configuration is loaded from environment variables with sensible defaults.
Using Pydantic's BaseSettings means we get:
- Type validation on first use (fail fast if config is wrong)
- Documentation of what's required vs optional
- Easy testing with different configurations

Mock mode enables local development without a real bucket.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Library settings loaded from environment variables.

    All settings can be overridden via environment variables.
    Every operation also accepts explicit arguments, so settings
    only supply defaults.
    """

    # Geolocation / exchange-rate providers
    geolocation_url: str = Field(
        default="http://ip-api.com/json",
        description="Base URL of the IP geolocation provider. The IP address is appended as a path segment."
    )
    geolocation_fields: str = Field(
        default=(
            "status,country,countryCode,region,regionName,city,district,"
            "zip,lat,lon,timezone,offset,currency,query"
        ),
        description="Comma-separated field list requested from the geolocation provider."
    )
    exchange_rate_url: str = Field(
        default="https://api.exchangerate-api.com/v4/latest",
        description="Base URL of the exchange-rate provider. The base currency is appended as a path segment."
    )
    http_timeout_seconds: float = Field(
        default=5.0,
        description="Timeout for provider calls and URL downloads. Matches the httpx default."
    )
    fallback_currency: str = Field(
        default="USD",
        description="Currency returned when a location lookup fails."
    )
    fallback_timezone: str = Field(
        default="UTC",
        description="Timezone returned when a location lookup fails."
    )

    # Uploads
    upload_dir: str = Field(
        default="./uploads/",
        description="Local staging directory for files before they are sent to the bucket."
    )
    upload_field_key: str = Field(
        default="file",
        description="Request field holding the uploaded files."
    )

    # S3-compatible storage
    s3_access_key_id: str = Field(
        default="",
        description="Access key ID. Empty means boto3 resolves credentials itself."
    )
    s3_secret_access_key: str = Field(
        default="",
        description="Secret access key."
    )
    s3_bucket_name: str = Field(
        default="",
        description="Default bucket name"
    )
    s3_endpoint_url: Optional[str] = Field(
        default=None,
        description="Endpoint URL for S3-compatible providers (MinIO, R2). None means AWS."
    )
    s3_region: Optional[str] = Field(
        default=None,
        description="Region name passed to boto3"
    )
    s3_mock_mode: bool = Field(
        default=False,
        description="Use in-memory mock instead of a real bucket. Enables local dev without object storage."
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @property
    def geolocation_fields_list(self) -> list[str]:
        """Parse comma-separated geolocation fields into a list."""
        return [name.strip() for name in self.geolocation_fields.split(",") if name.strip()]

    def validate_required_fields(self) -> list[str]:
        """
        Validate that required storage fields are set.

        Returns list of missing required fields. Nothing is required
        in mock mode.
        """
        missing = []

        if not self.s3_mock_mode:
            if not self.s3_bucket_name:
                missing.append("S3_BUCKET_NAME")
            if self.s3_access_key_id and not self.s3_secret_access_key:
                missing.append("S3_SECRET_ACCESS_KEY")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache means we only load settings once per process.
    For tests, call get_settings.cache_clear() to reset.
    """
    return Settings()
