"""
Builders for FileRecord plus the local filesystem helper used before staging.

Image records carry pixel dimensions decoded with Pillow. Identifiers come
from an injectable generator so tests can pin them.
"""

import io
from pathlib import Path
from typing import Callable, Union
from uuid import uuid4

from PIL import Image

from .models import FileRecord, UploadedFile

IdGenerator = Callable[[], str]

ID_LENGTH = 16


def generate_id() -> str:
    """Random 16-character hex identifier."""
    return uuid4().hex[:ID_LENGTH]


def ensure_directory_existence(file_path: Union[str, Path]) -> None:
    """Create every missing parent directory of `file_path`."""
    Path(file_path).parent.mkdir(parents=True, exist_ok=True)


def get_image_dimensions(data: bytes) -> tuple[int, int]:
    """
    Decode (width, height) from raw image bytes.

    Only the header is parsed; Pillow does not load pixel data here.
    Raises PIL.UnidentifiedImageError for bytes that are not an image.
    """
    with Image.open(io.BytesIO(data)) as img:
        return img.size


def get_s3_image_object(
    file: UploadedFile,
    file_name: str,
    key_path: str,
    id_generator: IdGenerator = generate_id,
) -> FileRecord:
    width, height = get_image_dimensions(file.data)
    return FileRecord(
        id=id_generator(),
        type="image",
        name=file_name,
        key=key_path,
        mime=file.mimetype,
        size=file.size,
        width=width,
        height=height,
    )


def get_s3_file_object(
    file: UploadedFile,
    file_name: str,
    key_path: str,
    id_generator: IdGenerator = generate_id,
) -> FileRecord:
    return FileRecord(
        id=id_generator(),
        type="file",
        name=file_name,
        key=key_path,
        mime=file.mimetype,
        size=file.size,
    )
