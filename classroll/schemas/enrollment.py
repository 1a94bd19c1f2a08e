"""Enrollment request/response schemas."""

from typing import Optional
from uuid import UUID

from pydantic import Field

from classroll.schemas.common import CamelModel, Pagination


class EnrollmentCreate(CamelModel):
    user_id: UUID
    class_id: UUID


class EnrollmentUpdate(CamelModel):
    is_active: Optional[bool] = None


class EnrollmentResponse(CamelModel):
    enrollment_id: str
    user_id: str
    class_id: str
    enrolled_at: str
    enrollment: str
    is_active: bool


class EnrollmentEnvelope(CamelModel):
    message: str
    enrollment: EnrollmentResponse


class EnrolledUser(CamelModel):
    name: str
    email: str


class EnrolledClass(CamelModel):
    name: str
    semester: str
    schedule: str


class EnrollmentListItem(EnrollmentResponse):
    user: EnrolledUser
    class_: EnrolledClass = Field(alias="class")


class EnrollmentListResponse(CamelModel):
    enrollments: list[EnrollmentListItem]
    pagination: Pagination
