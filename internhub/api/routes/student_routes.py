"""
Student Routes

GET  /students/profile       - Get own profile
PUT  /students/profile       - Create or update profile
POST /students/resume        - Upload resume (PDF, max 5MB)
POST /students/applications  - Apply to an internship
GET  /students/applications  - Get my applications
GET  /students/dashboard     - Status counts + recent applications
"""

from typing import List

from fastapi import APIRouter, Depends, File, UploadFile

from internhub.core.auth import StudentSession, get_current_student, require_student
from internhub.core.session import SessionContext
from internhub.services import application_workflow, profile_service, storage_service
from internhub.utils.file_upload import read_resume
from internhub.schemas.schemas import (
    StudentProfileUpdate, StudentProfileResponse, ApplicationCreate, ApplicationResponse,
    StudentDashboardResponse, UploadResponse
)

router = APIRouter(prefix="/students", tags=["Students"])

RECENT_APPLICATIONS = 5


@router.get("/profile", response_model=StudentProfileResponse)
async def get_profile(session: SessionContext = Depends(require_student)):
    """Get current student's profile."""
    return profile_service.require_student_profile(session.account_id)


@router.put("/profile", response_model=StudentProfileResponse)
async def save_profile(data: StudentProfileUpdate, session: SessionContext = Depends(require_student)):
    """Save profile. The first save creates it."""
    return profile_service.save_student_profile(session.account_id, data)


@router.post("/resume", response_model=UploadResponse)
async def upload_resume(
    file: UploadFile = File(..., description="Resume file (PDF)"),
    session: SessionContext = Depends(require_student),
):
    """
    Upload a resume to the private bucket and attach it to the profile.

    The stored value is the storage path; companies read it through a
    signed URL.
    """
    content, filename = await read_resume(file)
    stored = storage_service.upload(storage_service.RESUMES, session.account_id, filename, content)
    profile_service.set_student_resume(session.account_id, stored.path)
    return stored


@router.post("/applications", response_model=ApplicationResponse, status_code=201)
async def apply(data: ApplicationCreate, student: StudentSession = Depends(get_current_student)):
    """Apply to an internship. Cannot apply twice to the same internship."""
    return application_workflow.submit_application(student.student_id, data)


@router.get("/applications", response_model=List[ApplicationResponse])
async def get_my_applications(student: StudentSession = Depends(get_current_student)):
    """Get all internship applications for current student, newest first."""
    return application_workflow.list_student_applications(student.student_id)


@router.get("/dashboard", response_model=StudentDashboardResponse)
async def get_dashboard(student: StudentSession = Depends(get_current_student)):
    return StudentDashboardResponse(
        profile=profile_service.require_student_profile(student.account_id),
        counts=application_workflow.count_student_applications(student.student_id),
        recent_applications=application_workflow.list_student_applications(
            student.student_id, limit=RECENT_APPLICATIONS
        ),
    )
