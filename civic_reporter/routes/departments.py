from fastapi import APIRouter

from civic_reporter.departments import list_departments
from civic_reporter.schemas import DepartmentListResponse

router = APIRouter(prefix="/api/v1", tags=["departments"])


@router.get("/departments", response_model=DepartmentListResponse)
async def get_departments():
    """List the departments an issue can be filed against."""
    return DepartmentListResponse(departments=list_departments())
