"""
Models for uploaded files and the records built from them.

FileRecord is what callers get back from an upload. UploadedFile and
UploadRequest describe what callers hand in. None of these depend on
boto3 or on any HTTP framework; the FastAPI adapter lives in
infrastructure.storage.intake.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union


@dataclass(frozen=True)
class PdfExtraction:
    """Text and document info pulled out of an uploaded PDF."""
    num_pages: int
    text: str
    info: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class FileRecord:
    """
    Metadata for one file stored in the bucket.

    Frozen because a record describes an object that already exists.
    Extraction results are attached with dataclasses.replace before
    the record leaves the upload call.
    """
    id: str
    type: str  # "image" or "file"
    name: str
    key: str
    mime: str
    size: int
    width: Optional[int] = None
    height: Optional[int] = None
    pdf_data: Optional[PdfExtraction] = None
    text_data: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Plain mapping, leaving out optional fields that were never set."""
        data: dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "name": self.name,
            "key": self.key,
            "mime": self.mime,
            "size": self.size,
        }
        if self.width is not None:
            data["width"] = self.width
        if self.height is not None:
            data["height"] = self.height
        if self.pdf_data is not None:
            data["pdf_data"] = {
                "num_pages": self.pdf_data.num_pages,
                "text": self.pdf_data.text,
                "info": dict(self.pdf_data.info),
            }
        if self.text_data is not None:
            data["text_data"] = self.text_data
        return data


@dataclass
class UploadedFile:
    """
    A file received in a multipart request.

    `data` holds the raw bytes; `mv` writes them to a staging path.
    """
    name: str
    mimetype: str
    size: int
    data: bytes = b""

    async def mv(self, path: Union[str, Path]) -> None:
        """Write the file contents to `path`."""
        with open(path, "wb") as fh:
            fh.write(self.data)


@dataclass
class UploadRequest:
    """
    Input for upload_s3_files.

    Either `files` (field name -> one file or a list of files) or
    `file_urls` is used; `files` wins when the field is present, even
    if its list is empty.
    """
    files: Optional[dict[str, Union[UploadedFile, list[UploadedFile]]]] = None
    file_urls: Optional[list[str]] = None

    def has_files_for(self, key: str) -> bool:
        """True when `key` is present in `files`, even with an empty list."""
        return self.files is not None and self.files.get(key) is not None

    def files_for(self, key: str) -> list[UploadedFile]:
        """Files under `key`, always as a list."""
        if not self.has_files_for(key):
            return []
        value = self.files[key]
        return list(value) if isinstance(value, list) else [value]
