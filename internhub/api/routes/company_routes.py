"""
Company Routes

GET /companies/profile                      - Get own profile
PUT /companies/profile                      - Create or update profile
POST /companies/logo                        - Upload logo (image, max 2MB)
GET /companies/internships                  - Get company's internships
GET /companies/applications                 - Get applications received
GET /companies/applications/{id}            - Get one application with applicant
GET /companies/applications/{id}/resume     - Signed URL for the applicant's resume
PUT /companies/applications/{id}/status     - Update application status
GET /companies/dashboard                    - Hiring counts + recent applications
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile

from internhub.core.auth import CompanySession, get_current_company, require_company
from internhub.core.session import SessionContext
from internhub.services import application_workflow, internship_service, profile_service, storage_service
from internhub.utils.file_upload import read_logo
from internhub.schemas.schemas import (
    CompanyProfileUpdate, CompanyProfileResponse, InternshipResponse, ApplicationResponse,
    ApplicationStatus, ApplicationStatusUpdate, CompanyDashboardResponse, SignedUrlResponse, UploadResponse
)

router = APIRouter(prefix="/companies", tags=["Companies"])

RECENT_APPLICATIONS = 5


@router.get("/profile", response_model=CompanyProfileResponse)
async def get_profile(session: SessionContext = Depends(require_company)):
    """Get current company's profile."""
    return profile_service.require_company_profile(session.account_id)


@router.put("/profile", response_model=CompanyProfileResponse)
async def save_profile(data: CompanyProfileUpdate, session: SessionContext = Depends(require_company)):
    """Save company profile. The first save creates it."""
    return profile_service.save_company_profile(session.account_id, data)


@router.post("/logo", response_model=UploadResponse)
async def upload_logo(
    file: UploadFile = File(..., description="Logo image"),
    company: CompanySession = Depends(get_current_company),
):
    """Upload a logo to the public bucket and set it on the profile."""
    content, filename = await read_logo(file)
    stored = storage_service.upload(storage_service.LOGOS, company.account_id, filename, content)
    profile_service.set_company_logo(company.account_id, stored.url)
    return stored


@router.get("/internships", response_model=List[InternshipResponse])
async def get_company_internships(company: CompanySession = Depends(get_current_company)):
    """Get all internships posted by this company, active or not."""
    return internship_service.list_company_internships(company.company_id)


@router.get("/applications", response_model=List[ApplicationResponse])
async def get_applications(
    internship_id: Optional[str] = Query(None),
    status: Optional[ApplicationStatus] = Query(None),
    company: CompanySession = Depends(get_current_company),
):
    """Get all applications for company's internship postings."""
    return application_workflow.list_company_applications(company.company_id, internship_id, status)


@router.get("/applications/{application_id}", response_model=ApplicationResponse)
async def get_application(application_id: str, company: CompanySession = Depends(get_current_company)):
    return application_workflow.get_company_application(company.company_id, application_id)


@router.get("/applications/{application_id}/resume", response_model=SignedUrlResponse)
async def get_applicant_resume(application_id: str, company: CompanySession = Depends(get_current_company)):
    """Link to the applicant's resume; storage paths get a signed, expiring URL."""
    application = application_workflow.get_company_application(company.company_id, application_id)
    return storage_service.resolve_resume_url(application.student.resume_url)


@router.put("/applications/{application_id}/status", response_model=ApplicationResponse)
async def update_application_status(
    application_id: str,
    update: ApplicationStatusUpdate,
    company: CompanySession = Depends(get_current_company),
):
    """Update status of an internship application."""
    return application_workflow.update_status(company.company_id, application_id, update.status)


@router.get("/dashboard", response_model=CompanyDashboardResponse)
async def get_dashboard(company: CompanySession = Depends(get_current_company)):
    """Counts over the company's postings; pending means status 'applied'."""
    postings = internship_service.list_company_internships(company.company_id)
    return CompanyDashboardResponse(
        profile=profile_service.require_company_profile(company.account_id),
        total_internships=len(postings),
        active_internships=sum(1 for p in postings if p.is_active),
        total_applications=application_workflow.count_company_applications(company.company_id),
        pending_applications=application_workflow.count_company_applications(
            company.company_id, ApplicationStatus.applied
        ),
        recent_applications=application_workflow.list_company_applications(
            company.company_id, limit=RECENT_APPLICATIONS
        ),
    )
