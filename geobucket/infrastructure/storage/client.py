"""
S3-compatible object storage client.

The bulk helpers in this package take a boto3 `s3` client and a bucket
name. This module builds that client from configuration and provides an
in-memory stand-in with the same call surface for local development and
tests.

Mock mode stores objects in a dict, enabling the full upload/copy/delete
flow without provisioning a bucket.
"""

import logging
from dataclasses import dataclass
from typing import Any, BinaryIO, Optional, Protocol

from ...config.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when storage operations fail."""
    pass


class MissingParameterError(StorageError, ValueError):
    """Raised when a required argument (client, bucket, prefix...) is missing."""
    pass


class NoValidKeysError(StorageError):
    """Raised when no key survives prefix validation on delete."""
    pass


class NoUploadInputError(StorageError):
    """Raised when an upload request carries neither files nor URLs."""
    pass


def require(**params: Any) -> None:
    """Raise MissingParameterError naming every falsy parameter."""
    missing = [name for name, value in params.items() if not value]
    if missing:
        raise MissingParameterError(f"{', '.join(params)} are required (missing: {', '.join(missing)}).")


@dataclass
class StorageConfig:
    """
    Configuration for an S3-compatible bucket.

    Empty credentials mean boto3 falls back to its own credential chain
    (env vars, shared config, instance role).
    """
    bucket_name: str
    access_key_id: str = ""
    secret_access_key: str = ""
    endpoint_url: Optional[str] = None
    region: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "StorageConfig":
        settings = settings or get_settings()
        return cls(
            bucket_name=settings.s3_bucket_name,
            access_key_id=settings.s3_access_key_id,
            secret_access_key=settings.s3_secret_access_key,
            endpoint_url=settings.s3_endpoint_url,
            region=settings.s3_region,
        )


class S3Client(Protocol):
    """
    The subset of the boto3 S3 client the helpers call.

    Using a protocol means tests can provide the in-memory client and
    any S3-compatible backend works without changes.
    """

    def list_objects_v2(self, **kwargs: Any) -> dict: ...

    def delete_objects(self, **kwargs: Any) -> dict: ...

    def copy_object(self, **kwargs: Any) -> dict: ...

    def upload_fileobj(
        self,
        Fileobj: BinaryIO,
        Bucket: str,
        Key: str,
        ExtraArgs: Optional[dict] = None,
    ) -> None: ...


# ---------------------------------------------------------------------------
# Mock Storage for Local Development
# ---------------------------------------------------------------------------

class InMemoryS3Client:
    """
    In-memory bucket store mimicking the boto3 calls used here.

    Listings are sorted by key and paginated with `page_size`, and the
    continuation token is the last key of the previous page. Every call is
    recorded in `calls` as (method name, kwargs) so tests can assert on
    what was issued.

    Not suitable for production, but perfect for development and testing.
    """

    def __init__(self, page_size: int = 1000) -> None:
        # {bucket: {key: (body, content_type)}}
        self._buckets: dict[str, dict[str, tuple[bytes, Optional[str]]]] = {}
        self.page_size = page_size
        self.calls: list[tuple[str, dict]] = []
        logger.info("Initialized mock storage client (in-memory)")

    def put(self, bucket: str, key: str, body: bytes = b"", content_type: Optional[str] = None) -> None:
        """Seed an object directly, without recording a call."""
        self._buckets.setdefault(bucket, {})[key] = (body, content_type)

    def keys(self, bucket: str) -> list[str]:
        return sorted(self._buckets.get(bucket, {}))

    def get(self, bucket: str, key: str) -> bytes:
        try:
            return self._buckets[bucket][key][0]
        except KeyError:
            raise StorageError(f"Object not found: {bucket}/{key}")

    def content_type(self, bucket: str, key: str) -> Optional[str]:
        return self._buckets.get(bucket, {}).get(key, (b"", None))[1]

    def list_objects_v2(self, **kwargs: Any) -> dict:
        self.calls.append(("list_objects_v2", kwargs))
        bucket = kwargs["Bucket"]
        prefix = kwargs.get("Prefix", "")
        token = kwargs.get("ContinuationToken")
        limit = kwargs.get("MaxKeys", self.page_size)

        matching = [
            key for key in self.keys(bucket)
            if key.startswith(prefix) and (token is None or key > token)
        ]
        page = matching[:limit]
        truncated = len(matching) > len(page)

        response: dict[str, Any] = {
            "IsTruncated": truncated,
            "KeyCount": len(page),
            "Prefix": prefix,
        }
        if page:
            response["Contents"] = [
                {"Key": key, "Size": len(self._buckets[bucket][key][0])}
                for key in page
            ]
        if truncated:
            response["NextContinuationToken"] = page[-1]
        return response

    def delete_objects(self, **kwargs: Any) -> dict:
        self.calls.append(("delete_objects", kwargs))
        bucket = self._buckets.get(kwargs["Bucket"], {})
        deleted = []
        for obj in kwargs["Delete"]["Objects"]:
            bucket.pop(obj["Key"], None)
            deleted.append({"Key": obj["Key"]})
        return {"Deleted": deleted}

    def copy_object(self, **kwargs: Any) -> dict:
        self.calls.append(("copy_object", kwargs))
        source = kwargs["CopySource"]
        body, content_type = (
            self.get(source["Bucket"], source["Key"]),
            self.content_type(source["Bucket"], source["Key"]),
        )
        self.put(kwargs["Bucket"], kwargs["Key"], body, content_type)
        return {"CopyObjectResult": {}}

    def upload_fileobj(
        self,
        Fileobj: BinaryIO,
        Bucket: str,
        Key: str,
        ExtraArgs: Optional[dict] = None,
    ) -> None:
        self.calls.append(("upload_fileobj", {"Bucket": Bucket, "Key": Key, "ExtraArgs": ExtraArgs}))
        content_type = (ExtraArgs or {}).get("ContentType")
        self.put(Bucket, Key, Fileobj.read(), content_type)

    def calls_to(self, method: str) -> list[dict]:
        return [kwargs for name, kwargs in self.calls if name == method]


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_s3_client(
    config: Optional[StorageConfig] = None,
    mock_mode: bool = False,
) -> S3Client:
    """
    Create an S3 client based on configuration.

    Args:
        config: Storage configuration (required if not mock_mode)
        mock_mode: If True, return the in-memory client

    Returns:
        boto3 S3 client or InMemoryS3Client
    """
    if mock_mode:
        return InMemoryS3Client()

    if config is None:
        raise ValueError("config is required when not in mock mode")

    import boto3
    from botocore.config import Config

    boto_config = Config(
        signature_version="s3v4",
        s3={"addressing_style": "path"} if config.endpoint_url else {},
    )

    client_kwargs: dict[str, Any] = {
        "endpoint_url": config.endpoint_url,
        "region_name": config.region,
        "config": boto_config,
    }
    if config.access_key_id:
        client_kwargs["aws_access_key_id"] = config.access_key_id
        client_kwargs["aws_secret_access_key"] = config.secret_access_key

    client = boto3.client("s3", **client_kwargs)

    logger.info(
        "Initialized S3 storage client",
        extra={
            "bucket": config.bucket_name,
            "endpoint": config.endpoint_url,
        }
    )
    return client


def create_s3_client_from_settings(settings: Optional[Settings] = None) -> S3Client:
    """
    Create an S3 client from environment settings.

    Honors S3_MOCK_MODE, and refuses to build a real client when required
    storage settings are missing.
    """
    settings = settings or get_settings()

    missing = settings.validate_required_fields()
    if missing:
        logger.error(
            "Missing required storage configuration",
            extra={"missing_fields": missing}
        )
        raise MissingParameterError(f"Missing storage settings: {', '.join(missing)}")

    if settings.s3_mock_mode:
        return create_s3_client(mock_mode=True)

    return create_s3_client(StorageConfig.from_settings(settings))
