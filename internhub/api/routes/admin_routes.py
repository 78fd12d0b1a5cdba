"""
Admin Routes

GET    /admin/stats              - Platform totals
GET    /admin/users              - All accounts, newest first
GET    /admin/internships        - All internships (active or not)
DELETE /admin/internships/{id}   - Remove an internship
"""

from typing import List

from fastapi import APIRouter, Depends

from internhub.core.auth import require_admin
from internhub.core.session import SessionContext
from internhub.services import account_service, internship_service
from internhub.schemas.schemas import AccountResponse, AdminStatsResponse, InternshipResponse, MessageResponse

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(require_admin)])


@router.get("/stats", response_model=AdminStatsResponse)
async def get_stats():
    return account_service.admin_stats()


@router.get("/users", response_model=List[AccountResponse])
async def get_users():
    return account_service.list_accounts()


@router.get("/internships", response_model=List[InternshipResponse])
async def get_internships():
    return internship_service.list_all_internships()


@router.delete("/internships/{internship_id}", response_model=MessageResponse)
async def delete_internship(internship_id: str, session: SessionContext = Depends(require_admin)):
    internship_service.delete_internship(internship_id, session)
    return MessageResponse(message="Internship deleted")
