import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import validates

from civic_reporter.database.config import Base
from civic_reporter.departments import DEPARTMENTS
from civic_reporter.schemas import IssueStatus, IssueType, MediaType


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def department_type() -> Enum:
    return Enum(*DEPARTMENTS, name="department", create_constraint=True)


class Department(Base):
    __tablename__ = "departments"
    __table_args__ = (
        CheckConstraint("length(access_code) = 8", name="ck_departments_access_code_length"),
    )

    id = Column(String, primary_key=True, default=_new_id)
    name = Column(department_type(), unique=True, nullable=False)
    access_code = Column(String(8), unique=True, nullable=False)

    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)


class Citizen(Base):
    __tablename__ = "citizens"

    id = Column(String, primary_key=True, default=_new_id)
    full_name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)


class Admin(Base):
    __tablename__ = "admins"

    id = Column(String, primary_key=True, default=_new_id)
    full_name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    department = Column(department_type(), nullable=False)
    access_code = Column(Integer, unique=True, nullable=False)

    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    @validates("email")
    def _lowercase_email(self, key, value):
        return value.lower() if value else value


class Issue(Base):
    __tablename__ = "issues"
    __table_args__ = (
        CheckConstraint("latitude >= -90 AND latitude <= 90", name="ck_issues_latitude"),
        CheckConstraint("longitude >= -180 AND longitude <= 180", name="ck_issues_longitude"),
    )

    id = Column(String, primary_key=True, index=True, default=_new_id)
    code = Column(String, unique=True, index=True, nullable=False)
    citizen_id = Column(String, ForeignKey("citizens.id"), nullable=False)

    issue_type = Column(
        Enum(*[t.value for t in IssueType], name="issue_type"),
        nullable=False,
        default=IssueType.ROAD_INFRASTRUCTURE.value,
    )
    title = Column(String(100), unique=True, nullable=False)
    description = Column(Text, nullable=False)
    status = Column(
        Enum(*[s.value for s in IssueStatus], name="issue_status"),
        nullable=False,
        default=IssueStatus.REPORTED.value,
    )

    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    address = Column(String, nullable=True)

    department = Column(department_type(), nullable=False, index=True)
    handled_by = Column(String, ForeignKey("admins.id"), nullable=True)

    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    @property
    def location(self) -> dict:
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "address": self.address,
        }


class Media(Base):
    __tablename__ = "media"

    id = Column(String, primary_key=True, default=_new_id)
    issue_id = Column(String, ForeignKey("issues.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    file_type = Column(Enum(*[m.value for m in MediaType], name="media_type"), nullable=False)
    url = Column(String, nullable=False)
    filename = Column(String, nullable=False)

    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)


class SequenceCounter(Base):
    __tablename__ = "counters"

    name = Column(String, primary_key=True)
    value = Column(Integer, nullable=False, default=0)
