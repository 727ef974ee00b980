from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class IssueStatus(str, Enum):
    REPORTED = "Reported"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"
    REJECTED = "Rejected"
    PENDING = "Pending"

class IssueType(str, Enum):
    ROAD_INFRASTRUCTURE = "Road Infrastructure"
    WASTE_MANAGEMENT = "Waste Management"
    ENVIRONMENTAL_ISSUES = "Environmental Issues"
    UTILITIES_AND_INFRASTRUCTURE = "Utilities & Infrastructure"
    PUBLIC_SAFETY = "Public Safety"
    OTHER = "Other"

class MediaType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


class CamelModel(BaseModel):
    """Base for wire models: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class Location(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    address: Optional[str] = None

class IssueCreate(CamelModel):
    title: str = Field(min_length=5, max_length=100)
    description: str = Field(min_length=1)
    issue_type: IssueType = IssueType.ROAD_INFRASTRUCTURE
    department: str
    location: Location

class IssueUpdate(CamelModel):
    status: Optional[IssueStatus] = None
    assign_to_me: bool = False


class IssueResponse(CamelModel):
    id: str = Field(alias="_id")
    code: str = Field(alias="customIssueId")
    citizen_id: str
    issue_type: IssueType
    title: str
    description: str
    status: IssueStatus
    location: Location
    department: str
    handled_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime

class MediaResponse(CamelModel):
    id: str = Field(alias="_id")
    issue_id: str = Field(alias="issueID")
    file_type: MediaType
    url: str
    filename: str
    created_at: datetime

class IssueSummary(CamelModel):
    id: str = Field(alias="_id")
    title: str
    description: str
    type: IssueType
    location: Location
    department: str
    reported_by: str
    reported_at: datetime
    image: Optional[str] = None
    status: IssueStatus


class IssueCreatedResponse(BaseModel):
    message: str
    issue: IssueResponse
    media: list[MediaResponse]

class IssueDetailResponse(BaseModel):
    issue: IssueResponse
    media: list[MediaResponse]

class IssueUpdatedResponse(BaseModel):
    message: str
    issue: IssueResponse

class IssueListResponse(BaseModel):
    issues: list[IssueSummary]

class DepartmentListResponse(BaseModel):
    departments: list[str]
