"""Courses router — catalogue management."""

from typing import Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from classroll.config import settings
from classroll.database import get_db
from classroll.errors import internal_errors
from classroll.middleware.auth import Principal, ensure_can_manage, get_current_principal, require_teacher
from classroll.models.course import Course
from classroll.schemas.common import DeletedResponse, Pagination
from classroll.schemas.course import (
    CourseCreate,
    CourseUpdate,
    CourseCreated,
    CourseUpdated,
    CourseResponse,
    CourseListResponse,
    CourseDetailResponse,
)
from classroll.services import course_service
from classroll.services.pagination import pagination_info

router = APIRouter(prefix="/courses", tags=["courses"])


def _course_to_response(course: Course, class_count: int) -> CourseResponse:
    return CourseResponse(
        id=course.id,
        title=course.title,
        description=course.description,
        department=course.department,
        workload=course.workload,
        teachers_id=course.teachers_id,
        class_count=class_count,
        created_at=course.created_at.isoformat(),
        updated_at=course.updated_at.isoformat(),
    )


@router.post("", response_model=CourseCreated, status_code=201)
def create_course(
    req: CourseCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_teacher),
):
    """Create a course owned by the calling teacher."""
    with internal_errors("Internal server error while creating course", "COURSE_CREATION_FAILED"):
        course = course_service.create_course(
            db,
            teacher_id=principal.id,
            title=req.title,
            description=req.description,
            department=req.department,
            workload=req.workload,
        )
        return CourseCreated(course_id=course.id, title=course.title, message="Course successfully created")


@router.get("", response_model=CourseListResponse)
def list_courses(
    search: Optional[str] = None,
    order_by: Literal["id", "title", "createdAt", "updatedAt"] = Query(default="title", alias="orderBy"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    """List courses with an optional title search; each carries its class count."""
    with internal_errors("Internal server error while fetching courses", "COURSES_FETCH_FAILED"):
        rows, total = course_service.list_courses(db, search, order_by, page, limit)
        return CourseListResponse(
            courses=[_course_to_response(course, count) for course, count in rows],
            pagination=Pagination(**pagination_info(page, limit, total)),
        )


@router.get("/{course_id}", response_model=CourseDetailResponse)
def get_course(course_id: UUID, db: Session = Depends(get_db)):
    with internal_errors("Internal server error while fetching course", "COURSE_FETCH_FAILED"):
        course = course_service.get_course(db, str(course_id))
        return CourseDetailResponse(
            course=_course_to_response(course, course_service.count_classes(db, course.id))
        )


@router.put("/{course_id}", response_model=CourseUpdated)
def update_course(
    course_id: UUID,
    req: CourseUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Update a course (owning teacher or admin)."""
    with internal_errors("Internal server error while updating course", "COURSE_UPDATE_FAILED"):
        course = course_service.get_course(db, str(course_id))
        ensure_can_manage(principal, course.teachers_id, "You can only update courses that you created")

        changes = req.model_dump(exclude_unset=True, exclude_none=True)
        course = course_service.update_course(db, course, changes)
        return CourseUpdated(
            course_id=course.id,
            message="Course successfully updated",
            updated_fields=sorted(changes),
        )


@router.delete("/{course_id}", response_model=DeletedResponse)
def delete_course(
    course_id: UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Delete a course (owning teacher or admin). Refused (409) while it has classes."""
    with internal_errors("Internal server error", "COURSE_DELETION_FAILED"):
        course = course_service.get_course(db, str(course_id))
        ensure_can_manage(principal, course.teachers_id, "You can only delete courses that you created")

        deleted_id = course_service.delete_course(db, course)
        return DeletedResponse(message="Course successfully deleted", deleted_id=deleted_id)
