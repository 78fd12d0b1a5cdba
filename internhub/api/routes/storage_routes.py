"""
Storage Routes

GET /storage/{bucket}/{path} - Read a stored object (private buckets need ?token=)
"""

from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import FileResponse

from internhub.services import storage_service

router = APIRouter(prefix="/storage", tags=["Storage"])


@router.get("/{bucket}/{path:path}")
async def get_object(bucket: str, path: str, token: Optional[str] = Query(None)):
    return FileResponse(storage_service.open_object(bucket, path, token))
