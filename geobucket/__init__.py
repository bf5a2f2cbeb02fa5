"""
geobucket - IP-based pricing lookups and S3 bucket helpers.

This package re-exports everything as one flat namespace:
- core: file records, id generation, price conversion
- infrastructure: geolocation/exchange-rate APIs and S3 storage
- config: library configuration
"""

from .core.files import (
    FileRecord,
    IdGenerator,
    PdfExtraction,
    UploadedFile,
    UploadRequest,
    ensure_directory_existence,
    generate_id,
    get_s3_file_object,
    get_s3_image_object,
)
from .core.pricing import convert_price
from .infrastructure.geo import (
    LocationInfo,
    get_currency_by_ip,
    get_exchange_rate,
    get_location_info,
)
from .infrastructure.storage import (
    InMemoryS3Client,
    MissingParameterError,
    NoUploadInputError,
    NoValidKeysError,
    StorageConfig,
    StorageError,
    copy_s3_directory,
    create_s3_client,
    create_s3_client_from_settings,
    delete_s3_files,
    empty_s3_directory,
    upload_s3_files,
    uploaded_file_from_upload_file,
)

__version__ = "0.1.0"

__all__ = [
    # pricing
    "LocationInfo",
    "convert_price",
    "get_currency_by_ip",
    "get_exchange_rate",
    "get_location_info",
    # file metadata
    "FileRecord",
    "IdGenerator",
    "PdfExtraction",
    "UploadedFile",
    "UploadRequest",
    "ensure_directory_existence",
    "generate_id",
    "get_s3_file_object",
    "get_s3_image_object",
    # storage
    "InMemoryS3Client",
    "MissingParameterError",
    "NoUploadInputError",
    "NoValidKeysError",
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
