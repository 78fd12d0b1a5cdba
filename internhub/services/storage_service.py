"""
Storage Service - local filesystem buckets.

Buckets:
- resumes (private): read through signed, expiring URLs
- logos   (public):  read through a stable public URL

Objects are keyed "<account_id>/<unix_ms>_<filename>" under STORAGE_DIR.
Signed URLs carry a short-lived JWT naming the bucket and key.
"""

import logging
import time
from datetime import timedelta
from pathlib import Path
from typing import Optional

from internhub.core.auth import create_access_token, decode_token
from internhub.core.config import get_settings
from internhub.core.errors import AccessDenied, NotFound
from internhub.schemas.schemas import SignedUrlResponse, UploadResponse

logger = logging.getLogger(__name__)

RESUMES = "resumes"
LOGOS = "logos"
PUBLIC_BUCKETS = {LOGOS}
BUCKETS = {RESUMES, LOGOS}

STORAGE_TOKEN_TYPE = "storage"


def _bucket_root(bucket: str) -> Path:
    if bucket not in BUCKETS:
        raise NotFound(f"Unknown bucket '{bucket}'")
    return Path(get_settings().storage_dir).resolve() / bucket


def object_path(bucket: str, key: str) -> Path:
    """Resolve a key inside its bucket, refusing anything that escapes it."""
    root = _bucket_root(bucket)
    path = (root / key).resolve()
    if root not in path.parents:
        raise AccessDenied("Invalid object path")
    return path


def make_key(account_id: str, filename: str) -> str:
    return f"{account_id}/{int(time.time() * 1000)}_{filename}"


def object_url(bucket: str, key: str) -> str:
    return f"{get_settings().public_base_url.rstrip('/')}/api/storage/{bucket}/{key}"


def upload(bucket: str, account_id: str, filename: str, content: bytes) -> UploadResponse:
    key = make_key(account_id, filename)
    path = object_path(bucket, key)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    logger.info("Stored %s/%s (%d bytes)", bucket, key, len(content))

    # private objects are referenced by key; readers ask for a signed URL
    url = object_url(bucket, key) if bucket in PUBLIC_BUCKETS else key
    return UploadResponse(bucket=bucket, path=key, url=url)


def create_signed_url(bucket: str, key: str, expires_in: Optional[int] = None) -> SignedUrlResponse:
    expires_in = expires_in or get_settings().signed_url_expire_seconds
    if not object_path(bucket, key).is_file():
        raise NotFound("File not found")
    token = create_access_token(
        {"typ": STORAGE_TOKEN_TYPE, "bucket": bucket, "path": key},
        expires_delta=timedelta(seconds=expires_in),
    )
    return SignedUrlResponse(url=f"{object_url(bucket, key)}?token={token}", expires_in=expires_in)


def resolve_resume_url(resume_url: Optional[str]) -> SignedUrlResponse:
    """Stored http(s) URLs are returned as-is; storage keys get a signed URL."""
    if not resume_url:
        raise NotFound("No resume uploaded")
    if resume_url.startswith("http://") or resume_url.startswith("https://"):
        return SignedUrlResponse(url=resume_url)
    return create_signed_url(RESUMES, resume_url)


def open_object(bucket: str, key: str, token: Optional[str] = None) -> Path:
    """Path of an object the caller may read; private buckets need a valid token."""
    if bucket not in PUBLIC_BUCKETS:
        claims = decode_token(token) if token else None
        if (not claims or claims.get("typ") != STORAGE_TOKEN_TYPE
                or claims.get("bucket") != bucket or claims.get("path") != key):
            raise AccessDenied("Invalid or expired link")
    path = object_path(bucket, key)
    if not path.is_file():
        raise NotFound("File not found")
    return path
