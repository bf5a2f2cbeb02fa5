"""
Object storage helpers for S3-compatible buckets.

Supports AWS S3 and S3-compatible providers (MinIO, R2) via boto3.
Includes an in-memory client for local development without credentials.
"""

from .client import (
    InMemoryS3Client,
    MissingParameterError,
    NoUploadInputError,
    NoValidKeysError,
    S3Client,
    StorageConfig,
    StorageError,
    create_s3_client,
    create_s3_client_from_settings,
)
from .intake import uploaded_file_from_upload_file
from .operations import copy_s3_directory, delete_s3_files, empty_s3_directory
from .uploads import upload_s3_files

__all__ = [
    "InMemoryS3Client",
    "MissingParameterError",
    "NoUploadInputError",
    "NoValidKeysError",
    "S3Client",
    "StorageConfig",
    "StorageError",
    "copy_s3_directory",
    "create_s3_client",
    "create_s3_client_from_settings",
    "delete_s3_files",
    "empty_s3_directory",
    "upload_s3_files",
    "uploaded_file_from_upload_file",
]
