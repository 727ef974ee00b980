"""API route modules for FastAPI endpoints."""

from civic_reporter.routes.departments import router as departments_router
from civic_reporter.routes.issues import router as issues_router

__all__ = ["departments_router", "issues_router"]
