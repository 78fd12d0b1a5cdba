"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from internhub.api.routes.auth_routes import router as auth_router
from internhub.api.routes.student_routes import router as student_router
from internhub.api.routes.company_routes import router as company_router
from internhub.api.routes.internship_routes import router as internship_router
from internhub.api.routes.admin_routes import router as admin_router
from internhub.api.routes.storage_routes import router as storage_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(student_router)
api_router.include_router(company_router)
api_router.include_router(internship_router)
api_router.include_router(admin_router)
api_router.include_router(storage_router)
