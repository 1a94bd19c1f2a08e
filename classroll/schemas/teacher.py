"""Teacher request/response schemas."""

from typing import Literal, Optional

from pydantic import EmailStr, Field

from classroll.schemas.common import CamelModel, Pagination


class TeacherCreate(CamelModel):
    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6)


class TeacherUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=6)
    role: Optional[Literal["teacher", "admin"]] = None


class TeacherResponse(CamelModel):
    id: str
    name: str
    email: str
    role: str


class TeacherEnvelope(CamelModel):
    message: str
    teacher: TeacherResponse


class TeacherSummary(TeacherResponse):
    course_count: int = 0
    class_count: int = 0


class TeacherListResponse(CamelModel):
    teachers: list[TeacherSummary]
    pagination: Pagination


class TeacherDetailResponse(CamelModel):
    teacher: TeacherSummary
