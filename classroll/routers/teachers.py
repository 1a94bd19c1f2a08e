"""Teachers router — teacher accounts and guarded deletion."""

from typing import Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from classroll.config import settings
from classroll.database import get_db
from classroll.errors import ForbiddenError, internal_errors
from classroll.middleware.auth import Principal, ensure_can_manage, get_current_principal
from classroll.models.teacher import Teacher
from classroll.schemas.common import DeletedResponse, Pagination
from classroll.schemas.teacher import (
    TeacherCreate,
    TeacherUpdate,
    TeacherResponse,
    TeacherEnvelope,
    TeacherSummary,
    TeacherListResponse,
    TeacherDetailResponse,
)
from classroll.services import teacher_service
from classroll.services.pagination import pagination_info

router = APIRouter(prefix="/teachers", tags=["teachers"])


def _teacher_to_response(teacher: Teacher) -> TeacherResponse:
    return TeacherResponse(id=teacher.id, name=teacher.name, email=teacher.email, role=teacher.role)


def _teacher_to_summary(db: Session, teacher: Teacher) -> TeacherSummary:
    return TeacherSummary(
        **_teacher_to_response(teacher).model_dump(),
        course_count=teacher_service.count_courses(db, teacher.id),
        class_count=teacher_service.count_classes(db, teacher.id),
    )


@router.post("", response_model=TeacherEnvelope, status_code=201)
def create_teacher(req: TeacherCreate, db: Session = Depends(get_db)):
    with internal_errors("Internal server error while creating teacher", "TEACHER_CREATION_FAILED"):
        teacher = teacher_service.create_teacher(db, req.name, req.email, req.password)
        return TeacherEnvelope(message="Teacher successfully created", teacher=_teacher_to_response(teacher))


@router.get("", response_model=TeacherListResponse)
def list_teachers(
    search: Optional[str] = None,
    order_by: Literal["name", "email", "role"] = Query(default="name", alias="orderBy"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    with internal_errors("Internal server error while fetching teachers", "TEACHERS_FETCH_FAILED"):
        teachers, total = teacher_service.list_teachers(db, search, order_by, page, limit)
        return TeacherListResponse(
            teachers=[_teacher_to_summary(db, t) for t in teachers],
            pagination=Pagination(**pagination_info(page, limit, total)),
        )


@router.get("/{teacher_id}", response_model=TeacherDetailResponse)
def get_teacher(teacher_id: UUID, db: Session = Depends(get_db)):
    with internal_errors("Internal server error while fetching teacher", "TEACHER_FETCH_FAILED"):
        teacher = teacher_service.get_teacher(db, str(teacher_id))
        return TeacherDetailResponse(teacher=_teacher_to_summary(db, teacher))


@router.put("/{teacher_id}", response_model=TeacherEnvelope)
def update_teacher(
    teacher_id: UUID,
    req: TeacherUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Teachers update themselves; admins update anyone. Only admins change roles."""
    with internal_errors("Internal server error while updating Teacher", "TEACHER_UPDATE_FAILED"):
        ensure_can_manage(principal, str(teacher_id), "You can only update your own teacher profile")
        changes = req.model_dump(exclude_unset=True, exclude_none=True)
        if "role" in changes and not principal.is_admin:
            raise ForbiddenError("Only admins can change roles")

        teacher = teacher_service.update_teacher(db, str(teacher_id), changes)
        return TeacherEnvelope(message="Teacher successfully updated", teacher=_teacher_to_response(teacher))


@router.delete("/{teacher_id}", response_model=DeletedResponse)
def delete_teacher(
    teacher_id: UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Delete a teacher. Refused (409) while they own courses or classes."""
    with internal_errors("Internal server error", "TEACHER_DELETION_FAILED"):
        ensure_can_manage(principal, str(teacher_id), "You can only delete your own teacher account")
        deleted_id = teacher_service.delete_teacher(db, str(teacher_id))
        return DeletedResponse(message="Teacher successfully deleted", deleted_id=deleted_id)
