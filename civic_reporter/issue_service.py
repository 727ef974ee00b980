"""Issue intake, listing and administration workflows."""

import asyncio
import json
import logging
from typing import Any, Optional

from fastapi import UploadFile
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from civic_reporter import config
from civic_reporter.auth import Requester
from civic_reporter.database import models
from civic_reporter.departments import is_valid_department, list_departments
from civic_reporter.errors import (
    DuplicateTitleError,
    ForbiddenError,
    InternalServerError,
    InvalidDepartmentError,
    InvalidLocationError,
    MissingFieldsError,
    NotFoundError,
    SchemaValidationError,
)
from civic_reporter.schemas import IssueCreate, IssueSummary, IssueUpdate, MediaType
from civic_reporter.sequence import allocate_issue_code
from civic_reporter.storage import LocalMediaStorage

logger = logging.getLogger(__name__)

ANONYMOUS_REPORTER = "Anonymous"


def parse_location(location: Any) -> Any:
    """Decode a JSON-encoded location; mappings and ``None`` pass through."""
    if isinstance(location, str):
        try:
            return json.loads(location)
        except json.JSONDecodeError:
            raise InvalidLocationError()
    return location


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def find_missing_fields(
    title: Any,
    description: Any,
    location: Any,
    issue_type: Any,
    department: Any,
) -> dict[str, bool]:
    """Map each required field to whether it is missing."""
    location_missing = (
        not isinstance(location, dict)
        or _is_blank(location.get("latitude"))
        or _is_blank(location.get("longitude"))
    )
    return {
        "title": _is_blank(title),
        "description": _is_blank(description),
        "location": location_missing,
        "issueType": _is_blank(issue_type),
        "department": _is_blank(department),
    }


def validate_submission(
    title: Any,
    description: Any,
    location: Any,
    issue_type: Any,
    department: Any,
) -> IssueCreate:
    """
    Check a raw submission before anything touches storage.

    Raises:
        InvalidLocationError: location is a string that is not valid JSON
        MissingFieldsError: one or more required fields are absent
        InvalidDepartmentError: department is not a known department
        SchemaValidationError: a field is present but out of range
    """
    parsed_location = parse_location(location)

    missing = find_missing_fields(title, description, parsed_location, issue_type, department)
    if any(missing.values()):
        raise MissingFieldsError(missing)

    if not is_valid_department(department):
        raise InvalidDepartmentError(department, list_departments())

    try:
        return IssueCreate(
            title=title,
            description=description,
            issue_type=issue_type,
            department=department,
            location=parsed_location,
        )
    except ValidationError as e:
        raise SchemaValidationError.from_pydantic(e.errors())


def classify_media(content_type: Optional[str]) -> MediaType:
    if content_type and content_type.startswith("video"):
        return MediaType.VIDEO
    return MediaType.IMAGE


def _internal_error(exc: Exception) -> InternalServerError:
    return InternalServerError(error=str(exc) if config.DEBUG else None)


async def create_issue(
    db: AsyncSession,
    storage: LocalMediaStorage,
    citizen_id: str,
    submission: IssueCreate,
    uploads: list[UploadFile],
) -> tuple[models.Issue, list[models.Media]]:
    """
    Persist a validated submission and its media.

    The title pre-check only gives a fast answer; the unique constraint on
    ``issues.title`` is what actually guarantees uniqueness, and its
    violation is reported the same way. The issue and its media rows are
    committed together.
    """
    try:
        citizen = await db.get(models.Citizen, citizen_id)
        if citizen is None:
            raise NotFoundError("Citizen not found")

        result = await db.execute(
            select(models.Issue.id).where(models.Issue.title == submission.title)
        )
        if result.first() is not None:
            raise DuplicateTitleError()

        code = await allocate_issue_code(db)

        stored = await asyncio.gather(*(storage.save(upload) for upload in uploads))

        issue = models.Issue(
            code=code,
            citizen_id=citizen_id,
            issue_type=submission.issue_type.value,
            title=submission.title,
            description=submission.description,
            status="Reported",
            latitude=submission.location.latitude,
            longitude=submission.location.longitude,
            address=submission.location.address,
            department=submission.department,
        )
        db.add(issue)
        await db.flush()

        media = [
            models.Media(
                issue_id=issue.id,
                position=position,
                file_type=classify_media(item.content_type).value,
                url=item.url,
                filename=item.filename,
            )
            for position, item in enumerate(stored)
        ]
        db.add_all(media)
        await db.commit()

    except IntegrityError:
        # Ranges, department and citizen are checked above, so only the unique
        # title or code constraints can fail here.
        await db.rollback()
        logger.warning(
            "Duplicate key while creating issue",
            extra={"title": submission.title},
        )
        raise DuplicateTitleError()
    except (SQLAlchemyError, OSError) as exc:
        await db.rollback()
        logger.exception("Error creating issue", extra={"title": submission.title})
        raise _internal_error(exc)

    logger.info(
        f"Issue {issue.code} created",
        extra={"issue_id": issue.id, "department": issue.department, "media_count": len(media)},
    )
    return issue, media


async def list_issues(db: AsyncSession, requester: Requester) -> list[IssueSummary]:
    """
    List issues as summaries, scoped to the administrator's department.

    Non-administrators (and administrators without an admin reference)
    see every issue.
    """
    query = select(models.Issue, models.Citizen.full_name).outerjoin(
        models.Citizen, models.Citizen.id == models.Issue.citizen_id
    )

    try:
        if requester.is_admin and requester.admin_id:
            admin = await db.get(models.Admin, requester.admin_id)
            if admin is None:
                raise NotFoundError("Admin not found")
            query = query.where(models.Issue.department == admin.department)

        rows = (await db.execute(query)).all()

        thumbnails: dict[str, str] = {}
        issue_ids = [issue.id for issue, _ in rows]
        if issue_ids:
            media_rows = await db.execute(
                select(models.Media.issue_id, models.Media.url)
                .where(models.Media.issue_id.in_(issue_ids))
                .order_by(models.Media.issue_id, models.Media.position)
            )
            for issue_id, url in media_rows:
                thumbnails.setdefault(issue_id, url)

    except SQLAlchemyError:
        logger.exception("Error fetching issues")
        raise InternalServerError("Something went wrong")

    return [
        IssueSummary(
            id=issue.id,
            title=issue.title,
            description=issue.description,
            type=issue.issue_type,
            location=issue.location,
            department=issue.department,
            reported_by=full_name or ANONYMOUS_REPORTER,
            reported_at=issue.created_at,
            image=thumbnails.get(issue.id),
            status=issue.status,
        )
        for issue, full_name in rows
    ]


async def get_issue(db: AsyncSession, issue_id: str) -> tuple[models.Issue, list[models.Media]]:
    issue = await db.get(models.Issue, issue_id)
    if issue is None:
        raise NotFoundError("Issue not found")

    result = await db.execute(
        select(models.Media)
        .where(models.Media.issue_id == issue_id)
        .order_by(models.Media.position)
    )
    return issue, list(result.scalars().all())


async def update_issue(
    db: AsyncSession,
    requester: Requester,
    issue_id: str,
    payload: IssueUpdate,
) -> models.Issue:
    """Change status and/or claim an issue on behalf of its department's admin."""
    if not requester.is_admin:
        raise ForbiddenError("Only administrators can update issues")

    admin = await db.get(models.Admin, requester.admin_id) if requester.admin_id else None
    if admin is None:
        raise NotFoundError("Admin not found")

    issue = await db.get(models.Issue, issue_id)
    if issue is None:
        raise NotFoundError("Issue not found")

    if issue.department != admin.department:
        raise ForbiddenError("Issue belongs to another department")

    if payload.status is not None:
        issue.status = payload.status.value
    if payload.assign_to_me:
        issue.handled_by = admin.id

    await db.commit()
    await db.refresh(issue)

    logger.info(
        f"Issue {issue.code} updated",
        extra={"issue_id": issue.id, "status": issue.status, "admin_id": admin.id},
    )
    return issue
