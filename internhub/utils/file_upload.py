"""
File Upload Utility - validate resume and logo uploads.

Resumes: PDF only, max 5MB, must open as a PDF (PyPDF2)
Logos:   any image/* content type, max 2MB
"""

import io
import os
import re
from typing import Tuple
from fastapi import UploadFile, HTTPException
from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError

MB = 1024 * 1024
RESUME_MAX_MB = 5
LOGO_MAX_MB = 2
PDF_CONTENT_TYPE = "application/pdf"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


def safe_filename(filename: str) -> str:
    """Strip directories and anything that is not a plain filename character."""
    name = os.path.basename(filename.replace("\\", "/")) or "file"
    return _UNSAFE_CHARS.sub("_", name)


async def _read_capped(file: UploadFile, max_mb: int) -> bytes:
    content = await file.read()
    if len(content) > max_mb * MB:
        raise HTTPException(status_code=413, detail=f"File size must be less than {max_mb}MB")
    if not content:
        raise HTTPException(status_code=400, detail="File is empty")
    return content


def is_pdf(content: bytes) -> bool:
    """True when PyPDF2 can open the bytes and finds at least one page."""
    try:
        return len(PdfReader(io.BytesIO(content)).pages) > 0
    except (PdfReadError, ValueError, KeyError, OSError):
        return False


async def read_resume(file: UploadFile) -> Tuple[bytes, str]:
    """
    Validate an uploaded resume.

    Returns:
        Tuple of (content, safe filename)

    Raises:
        HTTPException on validation errors
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="No filename provided")
    if file.content_type != PDF_CONTENT_TYPE and get_file_extension(file.filename) != ".pdf":
        raise HTTPException(status_code=400, detail="Please upload a PDF file")

    content = await _read_capped(file, RESUME_MAX_MB)
    if not is_pdf(content):
        raise HTTPException(status_code=400, detail="Please upload a PDF file")
    return content, safe_filename(file.filename)


async def read_logo(file: UploadFile) -> Tuple[bytes, str]:
    """Validate an uploaded company logo."""
    if not file.filename:
        raise HTTPException(status_code=400, detail="No filename provided")
    if not (file.content_type or "").startswith("image/"):
        raise HTTPException(status_code=400, detail="Please upload an image file")

    content = await _read_capped(file, LOGO_MAX_MB)
    return content, safe_filename(file.filename)
