"""Course request/response schemas."""

from typing import Optional

from pydantic import Field

from classroll.schemas.common import CamelModel, Pagination


class CourseCreate(CamelModel):
    title: str = Field(min_length=3, max_length=100)
    description: str = Field(max_length=500)
    department: str = Field(min_length=2, max_length=50)
    workload: str = Field(max_length=100)


class CourseUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=3, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    department: Optional[str] = Field(default=None, min_length=2, max_length=50)
    workload: Optional[str] = Field(default=None, max_length=100)


class CourseCreated(CamelModel):
    course_id: str = Field(alias="courseID")
    title: str
    message: str


class CourseUpdated(CamelModel):
    course_id: str = Field(alias="courseID")
    message: str
    updated_fields: list[str]


class CourseResponse(CamelModel):
    id: str
    title: str
    description: str
    department: str
    workload: str
    teachers_id: str
    class_count: int = 0
    created_at: str
    updated_at: str


class CourseListResponse(CamelModel):
    courses: list[CourseResponse]
    pagination: Pagination


class CourseDetailResponse(CamelModel):
    course: CourseResponse
