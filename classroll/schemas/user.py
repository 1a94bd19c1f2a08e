"""User request/response schemas."""

from typing import Literal, Optional

from pydantic import EmailStr, Field

from classroll.schemas.common import CamelModel, Pagination


class UserCreate(CamelModel):
    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6)
    role: Literal["student", "admin"] = "student"


class UserUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=6)
    role: Optional[Literal["student", "admin"]] = None


class UserResponse(CamelModel):
    id: str
    name: str
    email: str
    role: str


class UserEnvelope(CamelModel):
    message: str
    user: UserResponse


class UserListResponse(CamelModel):
    users: list[UserResponse]
    pagination: Pagination


# ── Detail view: the user with their active enrollments ─────────────────────

class EnrollmentTeacherInfo(CamelModel):
    id: str
    name: str
    email: str


class EnrollmentCourseInfo(CamelModel):
    id: str
    title: str
    description: str
    workload: str
    department: str
    teacher: EnrollmentTeacherInfo


class EnrollmentClassInfo(CamelModel):
    id: str
    name: str
    semester: str
    schedule: str
    course: EnrollmentCourseInfo


class UserEnrollmentDetail(CamelModel):
    enrollment_id: str
    enrolled_at: str
    enrollment_number: str
    is_active: bool
    class_: EnrollmentClassInfo = Field(alias="class")


class UserDetail(UserResponse):
    enrollments: list[UserEnrollmentDetail]


class UserDetailResponse(CamelModel):
    user: UserDetail
