"""Class request/response schemas."""

from typing import Optional
from uuid import UUID

from pydantic import Field

from classroll.schemas.common import CamelModel, Pagination


class ClassCreate(CamelModel):
    course_id: UUID
    teacher_id: UUID
    name: str = Field(min_length=1, max_length=100)
    semester: str = Field(min_length=1, max_length=20)
    schedule: str = Field(min_length=1, max_length=200)


class ClassUpdate(CamelModel):
    course_id: Optional[UUID] = None
    teacher_id: Optional[UUID] = None
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    semester: Optional[str] = Field(default=None, min_length=1, max_length=20)
    schedule: Optional[str] = Field(default=None, min_length=1, max_length=200)


class ClassResponse(CamelModel):
    id: str
    course_id: str
    teacher_id: str
    name: str
    semester: str
    schedule: str
    created_at: str


class ClassEnvelope(CamelModel):
    message: str
    class_: ClassResponse = Field(alias="class")


class ClassSummary(ClassResponse):
    course_title: str
    teacher_name: str
    active_enrollments: int = 0


class ClassListResponse(CamelModel):
    classes: list[ClassSummary]
    pagination: Pagination


class ClassDetailResponse(CamelModel):
    class_: ClassSummary = Field(alias="class")
