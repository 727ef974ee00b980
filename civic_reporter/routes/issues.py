from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, Request, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from civic_reporter import issue_service
from civic_reporter.auth import Requester, get_requester
from civic_reporter.database.config import get_db
from civic_reporter.errors import NotAuthenticatedError
from civic_reporter.schemas import (
    IssueCreatedResponse,
    IssueDetailResponse,
    IssueListResponse,
    IssueResponse,
    IssueUpdate,
    IssueUpdatedResponse,
    MediaResponse,
)
from civic_reporter.storage import LocalMediaStorage, get_media_storage
from civic_reporter.tasks.notifications import notify_issue_creation

router = APIRouter(prefix="/api/v1", tags=["issues"])

DEFAULT_TITLE = "Untitled"


@router.post("/create-issue", response_model=IssueCreatedResponse, status_code=status.HTTP_200_OK)
async def create_issue(
    request: Request,
    background_tasks: BackgroundTasks,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    issue_type: Optional[str] = Form(None, alias="issueType"),
    department: Optional[str] = Form(None),
    files: list[UploadFile] = File(default=[]),
    requester: Requester = Depends(get_requester),
    db: AsyncSession = Depends(get_db),
    storage: LocalMediaStorage = Depends(get_media_storage),
):
    """Report a new issue with optional image/video attachments."""
    if not requester.citizen_id:
        raise NotAuthenticatedError()

    # Form() turns "" into the default; only an absent title becomes DEFAULT_TITLE
    form = await request.form()
    title = form.get("title", DEFAULT_TITLE)

    submission = issue_service.validate_submission(
        title=title,
        description=description,
        location=location,
        issue_type=issue_type,
        department=department,
    )
    issue, media = await issue_service.create_issue(
        db, storage, requester.citizen_id, submission, files
    )

    # Notify on creation
    background_tasks.add_task(notify_issue_creation, issue=issue)

    return IssueCreatedResponse(
        message="Issue created",
        issue=IssueResponse.model_validate(issue),
        media=[MediaResponse.model_validate(item) for item in media],
    )


@router.get("/issues", response_model=IssueListResponse)
async def list_issues(
    requester: Requester = Depends(get_requester),
    db: AsyncSession = Depends(get_db),
):
    """List issues; administrators only see their own department's."""
    issues = await issue_service.list_issues(db, requester)
    return IssueListResponse(issues=issues)


@router.get("/issues/{issue_id}", response_model=IssueDetailResponse)
async def get_issue(issue_id: str, db: AsyncSession = Depends(get_db)):
    """Get issue by ID, with all of its media"""
    issue, media = await issue_service.get_issue(db, issue_id)
    return IssueDetailResponse(
        issue=IssueResponse.model_validate(issue),
        media=[MediaResponse.model_validate(item) for item in media],
    )


@router.patch("/issues/{issue_id}", response_model=IssueUpdatedResponse)
async def update_issue(
    issue_id: str,
    payload: IssueUpdate,
    requester: Requester = Depends(get_requester),
    db: AsyncSession = Depends(get_db),
):
    """Update status or claim an issue (department administrators only)"""
    issue = await issue_service.update_issue(db, requester, issue_id, payload)
    return IssueUpdatedResponse(message="Issue updated", issue=IssueResponse.model_validate(issue))
