"""
Multi-file upload to a bucket.

Two input modes, never mixed in one call:
1. Local multipart files (request.files[key]): optional type allow-list,
   staging on disk, optional PDF/text extraction, then upload.
2. Remote URLs (request.file_urls): streamed to staging, then uploaded
   as JPEG.

Files are handled one at a time, in order. Each staged copy is removed
once its upload finishes, whether or not the upload succeeded.
"""

import logging
import os
import posixpath
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional
from urllib.parse import urlsplit

import httpx

from ...config.settings import get_settings
from ...core.files.metadata import (
    IdGenerator,
    ensure_directory_existence,
    generate_id,
    get_s3_file_object,
    get_s3_image_object,
)
from ...core.files.models import FileRecord, UploadedFile, UploadRequest
from .client import NoUploadInputError, S3Client, require
from .extraction import PDF_MIME, TEXT_MIMES, extract_pdf_file, read_text_file, sniff_mime

logger = logging.getLogger(__name__)

URL_UPLOAD_MIME = "image/jpeg"


def utc_millis() -> int:
    """Current UTC time as epoch milliseconds."""
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def timestamped_name(original_name: str) -> str:
    return f"{utc_millis()}-{original_name}"


def is_allowed_type(mimetype: str, file_types: Iterable[str]) -> bool:
    """
    Check a MIME type against an allow-list of full types or major types.

    An empty allow-list allows everything.
    """
    allowed = list(file_types)
    if not allowed:
        return True
    major_type = mimetype.split("/")[0]
    return mimetype in allowed or major_type in allowed


def _upload_staged(
    client: S3Client,
    bucket: str,
    key_path: str,
    upload_path: Path,
    content_type: str,
) -> None:
    try:
        with open(upload_path, "rb") as fh:
            client.upload_fileobj(fh, bucket, key_path, ExtraArgs={"ContentType": content_type})
    finally:
        os.remove(upload_path)


async def _upload_local_file(
    file: UploadedFile,
    *,
    client: S3Client,
    bucket: str,
    s3_key_prefix: str,
    file_types: Iterable[str],
    extract_pdf_text: bool,
    extract_text: bool,
    upload_dir: str,
    id_generator: IdGenerator,
) -> Optional[FileRecord]:
    if not is_allowed_type(file.mimetype, file_types):
        logger.warning(
            "Skipping file with disallowed type",
            extra={"file_name": file.name, "mime": file.mimetype}
        )
        return None

    sniff_mime(file.data, file.mimetype)

    file_name = timestamped_name(file.name)
    key_path = f"{s3_key_prefix}{file_name}"
    upload_path = Path(upload_dir) / key_path
    ensure_directory_existence(upload_path)

    if file.mimetype.startswith("image"):
        record = get_s3_image_object(file, file_name, key_path, id_generator)
    else:
        record = get_s3_file_object(file, file_name, key_path, id_generator)

    await file.mv(upload_path)

    try:
        if file.mimetype == PDF_MIME and extract_pdf_text:
            record = replace(record, pdf_data=extract_pdf_file(upload_path))

        if file.mimetype in TEXT_MIMES and extract_text:
            record = replace(record, text_data=read_text_file(upload_path))
    except Exception:
        os.remove(upload_path)
        raise

    _upload_staged(client, bucket, key_path, upload_path, file.mimetype)

    logger.debug(
        "Uploaded file",
        extra={"key": key_path, "mime": file.mimetype, "size_bytes": file.size}
    )
    return record


async def _download_to(http_client: httpx.AsyncClient, url: str, path: Path) -> int:
    """Stream `url` into `path`. Returns the number of bytes written."""
    written = 0
    async with http_client.stream("GET", url) as response:
        response.raise_for_status()
        with open(path, "wb") as fh:
            async for chunk in response.aiter_bytes():
                fh.write(chunk)
                written += len(chunk)
    return written


async def _upload_urls(
    urls: list[str],
    *,
    client: S3Client,
    bucket: str,
    s3_key_prefix: str,
    upload_dir: str,
    id_generator: IdGenerator,
    http_client: httpx.AsyncClient,
) -> list[FileRecord]:
    records = []

    for url in urls:
        parts = urlsplit(url)
        # bare host URLs have no basename
        name_part = (
            posixpath.basename(parts.path.rstrip("/")).split(".")[0]
            or (parts.hostname or "").split(".")[0]
        )
        file_name = timestamped_name(f"{name_part}.jpeg")
        key_path = f"{s3_key_prefix}{file_name}"
        upload_path = Path(upload_dir) / key_path
        ensure_directory_existence(upload_path)

        try:
            size = await _download_to(http_client, url, upload_path)
        except Exception:
            if upload_path.exists():
                os.remove(upload_path)
            raise

        file = UploadedFile(name=file_name, mimetype=URL_UPLOAD_MIME, size=size)
        record = get_s3_file_object(file, file_name, key_path, id_generator)

        _upload_staged(client, bucket, key_path, upload_path, URL_UPLOAD_MIME)

        logger.debug(
            "Uploaded file from URL",
            extra={"url": url, "key": key_path, "size_bytes": size}
        )
        records.append(record)

    return records


async def upload_s3_files(
    request: UploadRequest,
    *,
    client: S3Client,
    bucket: str,
    key: Optional[str] = None,
    s3_key_prefix: str = "",
    file_types: Iterable[str] = (),
    extract_pdf_text: bool = False,
    extract_text: bool = False,
    upload_dir: Optional[str] = None,
    id_generator: Optional[IdGenerator] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> list[FileRecord]:
    """
    Upload the files or URLs in `request` and return one record per stored object.

    Args:
        request: Files under `request.files[key]`, or `request.file_urls`
        client: boto3 S3 client (or InMemoryS3Client)
        bucket: Target bucket
        key: Request field holding the files (default from settings: "file")
        s3_key_prefix: Prepended to every generated filename
        file_types: Allowed MIME types or major types; empty allows all
        extract_pdf_text: Attach PdfExtraction for application/pdf files
        extract_text: Attach contents for text/plain and text/csv files
        upload_dir: Local staging directory (default from settings)
        id_generator: Record id factory, for deterministic ids in tests
        http_client: Client used to download `file_urls`

    Raises:
        MissingParameterError: client or bucket missing
        NoUploadInputError: neither files nor file_urls supplied
    """
    require(client=client, bucket=bucket)

    settings = get_settings()
    key = key or settings.upload_field_key
    upload_dir = upload_dir or settings.upload_dir
    id_generator = id_generator or generate_id

    if request.has_files_for(key):
        files = request.files_for(key)
        records = []
        for file in files:
            record = await _upload_local_file(
                file,
                client=client,
                bucket=bucket,
                s3_key_prefix=s3_key_prefix,
                file_types=file_types,
                extract_pdf_text=extract_pdf_text,
                extract_text=extract_text,
                upload_dir=upload_dir,
                id_generator=id_generator,
            )
            if record is not None:
                records.append(record)
        logger.info(
            "Uploaded local files",
            extra={"bucket": bucket, "received": len(files), "uploaded": len(records)}
        )
        return records

    if request.file_urls is not None:
        if http_client is not None:
            records = await _upload_urls(
                request.file_urls,
                client=client,
                bucket=bucket,
                s3_key_prefix=s3_key_prefix,
                upload_dir=upload_dir,
                id_generator=id_generator,
                http_client=http_client,
            )
        else:
            async with httpx.AsyncClient(
                timeout=settings.http_timeout_seconds,
                follow_redirects=True,
            ) as owned:
                records = await _upload_urls(
                    request.file_urls,
                    client=client,
                    bucket=bucket,
                    s3_key_prefix=s3_key_prefix,
                    upload_dir=upload_dir,
                    id_generator=id_generator,
                    http_client=owned,
                )
        logger.info(
            "Uploaded files from URLs",
            extra={"bucket": bucket, "uploaded": len(records)}
        )
        return records

    raise NoUploadInputError("No files or file_urls provided.")
