"""Classes router — create, list, update and delete class offerings."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from classroll.config import settings
from classroll.database import get_db
from classroll.errors import internal_errors
from classroll.middleware.auth import (
    Principal,
    ensure_can_manage,
    get_current_principal,
    require_teacher_or_admin,
)
from classroll.models.class_ import Class
from classroll.schemas.class_ import (
    ClassCreate,
    ClassUpdate,
    ClassResponse,
    ClassEnvelope,
    ClassSummary,
    ClassListResponse,
    ClassDetailResponse,
)
from classroll.schemas.common import DeletedResponse, Pagination
from classroll.services import class_service, course_service, enrollment_service
from classroll.services.pagination import pagination_info

router = APIRouter(prefix="/classes", tags=["classes"])


def _class_to_response(cls: Class) -> ClassResponse:
    return ClassResponse(
        id=cls.id,
        course_id=cls.course_id,
        teacher_id=cls.teacher_id,
        name=cls.name,
        semester=cls.semester,
        schedule=cls.schedule,
        created_at=cls.created_at.isoformat(),
    )


@router.post("", response_model=ClassEnvelope, status_code=201)
def create_class(
    req: ClassCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_teacher_or_admin),
):
    """Create a class. Teachers may only create classes they teach, under courses they own."""
    with internal_errors("Internal server error while creating class", "CLASS_CREATION_FAILED"):
        ensure_can_manage(principal, str(req.teacher_id), "Teachers can only create their own classes")
        course = course_service.get_course(db, str(req.course_id))
        ensure_can_manage(principal, course.teachers_id, "You can only create classes for your own courses")
        cls = class_service.create_class(
            db,
            course_id=str(req.course_id),
            teacher_id=str(req.teacher_id),
            name=req.name,
            semester=req.semester,
            schedule=req.schedule,
        )
        return ClassEnvelope(message="Class successfully created", class_=_class_to_response(cls))


@router.get("", response_model=ClassListResponse)
def list_classes(
    course_id: Optional[UUID] = Query(default=None, alias="courseId"),
    teacher_id: Optional[UUID] = Query(default=None, alias="teacherId"),
    semester: Optional[str] = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    with internal_errors("Internal server error while fetching classes", "CLASSES_FETCH_FAILED"):
        rows, total = class_service.list_classes(
            db,
            course_id=str(course_id) if course_id else None,
            teacher_id=str(teacher_id) if teacher_id else None,
            semester=semester,
            page=page,
            limit=limit,
        )
        return ClassListResponse(
            classes=[
                ClassSummary(
                    **_class_to_response(cls).model_dump(),
                    course_title=course_title,
                    teacher_name=teacher_name,
                    active_enrollments=active,
                )
                for cls, course_title, teacher_name, active in rows
            ],
            pagination=Pagination(**pagination_info(page, limit, total)),
        )


@router.get("/{class_id}", response_model=ClassDetailResponse)
def get_class(class_id: UUID, db: Session = Depends(get_db)):
    with internal_errors("Internal server error while fetching class", "CLASS_FETCH_FAILED"):
        cls = class_service.get_class(db, str(class_id))
        return ClassDetailResponse(
            class_=ClassSummary(
                **_class_to_response(cls).model_dump(),
                course_title=cls.course.title,
                teacher_name=cls.teacher.name,
                active_enrollments=enrollment_service.count_active_for_class(db, cls.id),
            )
        )


@router.put("/{class_id}", response_model=ClassEnvelope)
def update_class(
    class_id: UUID,
    req: ClassUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Update a class (its teacher or an admin)."""
    with internal_errors("Internal server error while updating class", "CLASS_UPDATE_FAILED"):
        cls = class_service.get_class(db, str(class_id))
        ensure_can_manage(principal, cls.teacher_id, "You can only update classes that you teach")

        changes = {
            key: str(value) if isinstance(value, UUID) else value
            for key, value in req.model_dump(exclude_unset=True, exclude_none=True).items()
        }
        if "teacher_id" in changes:
            ensure_can_manage(principal, changes["teacher_id"], "Teachers can only assign classes to themselves")
        if "course_id" in changes:
            course = course_service.get_course(db, changes["course_id"])
            ensure_can_manage(principal, course.teachers_id, "You can only move classes to your own courses")
        cls = class_service.update_class(db, cls, changes)
        return ClassEnvelope(message="Class successfully updated", class_=_class_to_response(cls))


@router.delete("/{class_id}", response_model=DeletedResponse)
def delete_class(
    class_id: UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Delete a class (its teacher or an admin). Refused (409) while it has active enrollments."""
    with internal_errors("Internal server error while deleting class", "CLASS_DELETION_FAILED"):
        cls = class_service.get_class(db, str(class_id))
        ensure_can_manage(principal, cls.teacher_id, "You can only delete classes that you teach")

        deleted_id = class_service.delete_class(db, cls)
        return DeletedResponse(message="Class successfully deleted", deleted_id=deleted_id)
