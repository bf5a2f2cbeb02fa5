"""
File metadata: upload inputs, the records built from them, and id generation.
"""

from .metadata import (
    IdGenerator,
    ensure_directory_existence,
    generate_id,
    get_image_dimensions,
    get_s3_file_object,
    get_s3_image_object,
)
from .models import FileRecord, PdfExtraction, UploadedFile, UploadRequest

__all__ = [
    "FileRecord",
    "IdGenerator",
    "PdfExtraction",
    "UploadedFile",
    "UploadRequest",
    "ensure_directory_existence",
    "generate_id",
    "get_image_dimensions",
    "get_s3_file_object",
    "get_s3_image_object",
]
