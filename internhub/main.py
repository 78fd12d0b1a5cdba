"""
InternHub - Main Application

FastAPI backend with:
- PostgreSQL (SQLite for local runs) for accounts, profiles, internships, applications
- JWT authentication with revocable sessions
- Local filesystem buckets for resumes and logos

Run: uvicorn internhub.main:app --reload
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from internhub import __version__
from internhub.api.routes import api_router
from internhub.core.config import get_settings
from internhub.core.errors import register_error_handlers
from internhub.core.logging import setup_logging
from internhub.core.session import AuthEventBus, log_auth_event
from internhub.db.session import dispose_engine, init_schema, test_database_connection

logger = logging.getLogger(__name__)

setup_logging()

# Create FastAPI app
app = FastAPI(
    title="InternHub",
    description="""
    A job board connecting students and companies around internship postings.

    ## Features
    - **Authentication**: JWT-based auth for students, companies and admins
    - **Students**: Profile management, resume upload, applications
    - **Companies**: Internship postings and applicant tracking
    - **Internships**: Search and filter active postings
    - **Admin**: Platform totals and moderation
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.on_event("startup")
async def startup_event():
    """Create tables and the auth event bus."""
    init_schema()
    events = AuthEventBus()
    events.subscribe(log_auth_event)
    app.state.auth_events = events
    logger.info("InternHub %s started", __version__)


@app.on_event("shutdown")
async def shutdown_event():
    """Dispose the auth event bus and close pooled connections."""
    events = getattr(app.state, "auth_events", None)
    if events is not None:
        events.dispose()
    dispose_engine()


@app.get("/", tags=["Health"])
async def root():
    return {"status": "healthy", "app": "InternHub", "version": __version__}


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    connected = test_database_connection()
    return {
        "status": "healthy" if connected else "degraded",
        "database": "connected" if connected else "disconnected",
    }
