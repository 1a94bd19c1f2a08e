"""Enrollments router — create, list, toggle and delete enrollments."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from classroll.config import settings
from classroll.database import get_db
from classroll.errors import internal_errors
from classroll.middleware.auth import Principal, get_current_principal
from classroll.models.enrollment import Enrollment
from classroll.schemas.common import DeletedResponse, Pagination
from classroll.schemas.enrollment import (
    EnrollmentCreate,
    EnrollmentUpdate,
    EnrollmentResponse,
    EnrollmentEnvelope,
    EnrollmentListItem,
    EnrollmentListResponse,
    EnrolledUser,
    EnrolledClass,
)
from classroll.services import enrollment_service
from classroll.services.pagination import pagination_info

router = APIRouter(prefix="/enrollments", tags=["enrollments"])


def _enrollment_to_response(enrollment: Enrollment) -> EnrollmentResponse:
    return EnrollmentResponse(
        enrollment_id=enrollment.enrollment_id,
        user_id=enrollment.user_id,
        class_id=enrollment.class_id,
        enrolled_at=enrollment.enrolled_at.isoformat(),
        enrollment=enrollment.enrollment,
        is_active=enrollment.is_active,
    )


@router.post("", response_model=EnrollmentEnvelope, status_code=201)
def create_enrollment(
    req: EnrollmentCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Enroll a user in a class. 404 for unknown user/class, 409 if already actively enrolled."""
    with internal_errors("Internal server error while creating enrollment", "ENROLLMENT_CREATION_FAILED"):
        enrollment = enrollment_service.create_enrollment(db, str(req.user_id), str(req.class_id))
        return EnrollmentEnvelope(
            message="Enrollment successfully created",
            enrollment=_enrollment_to_response(enrollment),
        )


@router.get("", response_model=EnrollmentListResponse)
def list_enrollments(
    user_id: Optional[UUID] = Query(default=None, alias="userId"),
    class_id: Optional[UUID] = Query(default=None, alias="classId"),
    is_active: Optional[bool] = Query(default=None, alias="isActive"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """List enrollments with optional filters, ordered by enrollment date."""
    with internal_errors("Internal server error while fetching enrollments", "ENROLLMENTS_FETCH_FAILED"):
        rows, total = enrollment_service.list_enrollments(
            db,
            user_id=str(user_id) if user_id else None,
            class_id=str(class_id) if class_id else None,
            is_active=is_active,
            page=page,
            limit=limit,
        )
        items = [
            EnrollmentListItem(
                **_enrollment_to_response(enrollment).model_dump(),
                user=EnrolledUser(name=user.name, email=user.email),
                class_=EnrolledClass(name=cls.name, semester=cls.semester, schedule=cls.schedule),
            )
            for enrollment, user, cls in rows
        ]
        return EnrollmentListResponse(
            enrollments=items,
            pagination=Pagination(**pagination_info(page, limit, total)),
        )


@router.put("/{enrollment_id}", response_model=EnrollmentEnvelope)
def update_enrollment(
    enrollment_id: UUID,
    req: EnrollmentUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Activate or deactivate an enrollment."""
    with internal_errors("Internal server error while updating enrollment", "ENROLLMENT_UPDATE_FAILED"):
        enrollment = enrollment_service.update_enrollment(db, str(enrollment_id), req.is_active)
        return EnrollmentEnvelope(
            message="Enrollment successfully updated",
            enrollment=_enrollment_to_response(enrollment),
        )


@router.delete("/{enrollment_id}", response_model=DeletedResponse)
def delete_enrollment(
    enrollment_id: UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Permanently delete an enrollment record."""
    with internal_errors("Internal server error while deleting enrollment", "ENROLLMENT_DELETION_FAILED"):
        deleted_id = enrollment_service.delete_enrollment(db, str(enrollment_id))
        return DeletedResponse(message="Enrollment successfully deleted", deleted_id=deleted_id)
