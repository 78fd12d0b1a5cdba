"""
Internship Routes

GET    /internships                          - Search active internships
GET    /internships/{id}                     - Get internship details
POST   /internships                          - Create internship (company only)
PUT    /internships/{id}                     - Update internship (owning company)
DELETE /internships/{id}                     - Delete internship (owning company or admin)
GET    /internships/{id}/application-status  - Has the student applied? (student only)
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from internhub.core.auth import (
    CompanySession, StudentSession, get_current_company, get_current_session, get_current_student,
)
from internhub.core.session import SessionContext
from internhub.services import application_workflow, internship_service, profile_service
from internhub.schemas.schemas import (
    InternshipCreate, InternshipUpdate, InternshipFilter, InternshipResponse, ApplyStatusResponse,
    MessageResponse, UserRole
)

router = APIRouter(prefix="/internships", tags=["Internships"])


@router.get("", response_model=List[InternshipResponse])
async def list_internships(
    keyword: Optional[str] = Query(None, description="Search in title and description"),
    q: Optional[str] = Query(None, description="Alias for keyword"),
    location: Optional[str] = Query(None),
    industry: Optional[str] = Query(None),
    is_remote: Optional[bool] = Query(None, description="true = remote only; omit for all"),
    is_paid: Optional[bool] = Query(None, description="true = paid only; omit for all"),
):
    """List active internships matching the filters, newest first."""
    filters = InternshipFilter(
        keyword=keyword or q,
        location=location,
        industry=industry,
        is_remote=is_remote,
        is_paid=is_paid,
    )
    return internship_service.search_internships(filters)


@router.get("/{internship_id}", response_model=InternshipResponse)
async def get_internship(internship_id: str):
    """Get details of a specific internship with its company."""
    return internship_service.get_internship(internship_id)


@router.post("", response_model=InternshipResponse, status_code=201)
async def create_internship(data: InternshipCreate, company: CompanySession = Depends(get_current_company)):
    """Create a new internship posting. Only companies can create postings."""
    return internship_service.create_internship(company.company_id, data)


@router.put("/{internship_id}", response_model=InternshipResponse)
async def update_internship(
    internship_id: str, update: InternshipUpdate, company: CompanySession = Depends(get_current_company)
):
    """Update an internship posting. Only the owning company can update."""
    return internship_service.update_internship(internship_id, company.company_id, update)


@router.delete("/{internship_id}", response_model=MessageResponse)
async def delete_internship(internship_id: str, session: SessionContext = Depends(get_current_session)):
    """Delete an internship posting and its applications."""
    if session.role == UserRole.admin:
        internship_service.delete_internship(internship_id, session)
    elif session.role == UserRole.company:
        company = profile_service.require_company_profile(session.account_id)
        internship_service.delete_internship(internship_id, session, company_id=company.id)
    else:
        raise HTTPException(status_code=403, detail="Companies only", headers={"Location": "/"})
    return MessageResponse(message="Internship deleted")


@router.get("/{internship_id}/application-status", response_model=ApplyStatusResponse)
async def application_status(internship_id: str, student: StudentSession = Depends(get_current_student)):
    return ApplyStatusResponse(
        internship_id=internship_id,
        has_applied=application_workflow.has_applied(student.student_id, internship_id),
    )
