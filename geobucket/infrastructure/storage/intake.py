"""
Adapter from FastAPI multipart uploads to UploadedFile.
"""

from fastapi import UploadFile

from ...core.files.models import UploadedFile


async def uploaded_file_from_upload_file(upload: UploadFile) -> UploadedFile:
    """
    Build an UploadedFile from a FastAPI/Starlette UploadFile.

    Reads the whole body into memory, same as a multipart parser
    that keeps files in memory.
    """
    data = await upload.read()
    return UploadedFile(
        name=upload.filename or "upload",
        mimetype=upload.content_type or "application/octet-stream",
        size=upload.size if upload.size is not None else len(data),
        data=data,
    )
