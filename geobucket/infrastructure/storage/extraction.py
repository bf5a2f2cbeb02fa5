"""
Content extraction for staged uploads.

- PDF: page text and document info via pypdf
- Plain text / CSV: file contents as UTF-8
- Type sniffing: magic-number detection, used for diagnostics only
"""

import logging
from io import BytesIO
from pathlib import Path
from typing import Optional, Union

import filetype
from pypdf import PdfReader

from ...core.files.models import PdfExtraction

logger = logging.getLogger(__name__)

PDF_MIME = "application/pdf"
TEXT_MIMES = ("text/plain", "text/csv")


def extract_pdf(pdf_bytes: bytes) -> PdfExtraction:
    """Extract page text and document info from PDF bytes."""
    reader = PdfReader(BytesIO(pdf_bytes))

    pages = []
    for page in reader.pages:
        pages.append(page.extract_text() or "")

    info = {}
    if reader.metadata:
        for name, value in reader.metadata.items():
            if value is None:
                continue
            info[str(name).lstrip("/")] = str(value)

    return PdfExtraction(num_pages=len(reader.pages), text="\n".join(pages), info=info)


def extract_pdf_file(path: Union[str, Path]) -> PdfExtraction:
    return extract_pdf(Path(path).read_bytes())


def read_text_file(path: Union[str, Path]) -> str:
    """Read as UTF-8; undecodable bytes become U+FFFD instead of raising."""
    return Path(path).read_text(encoding="utf-8", errors="replace")


def sniff_mime(data: bytes, declared_mime: str = "") -> Optional[str]:
    """
    Detect the MIME type from leading bytes.

    Never raises: detection failures are logged and return None. A mismatch
    with the declared type is logged but does not reject anything.
    """
    try:
        kind = filetype.guess(data)
    except Exception as e:
        logger.error("Unable to detect file type", extra={"error": str(e)})
        return None

    detected = kind.mime if kind is not None else None
    if detected and declared_mime and detected != declared_mime:
        logger.debug(
            "Detected type differs from declared type",
            extra={"declared": declared_mime, "detected": detected}
        )
    return detected
