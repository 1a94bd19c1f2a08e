"""Users router — registration, listing, profile and guarded deletion."""

from typing import Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from classroll.config import settings
from classroll.database import get_db
from classroll.errors import ForbiddenError, internal_errors
from classroll.middleware.auth import Principal, get_current_principal, get_optional_principal
from classroll.models.user import User
from classroll.schemas.common import DeletedResponse, Pagination
from classroll.schemas.user import (
    UserCreate,
    UserUpdate,
    UserResponse,
    UserEnvelope,
    UserListResponse,
    UserDetail,
    UserDetailResponse,
    UserEnrollmentDetail,
    EnrollmentClassInfo,
    EnrollmentCourseInfo,
    EnrollmentTeacherInfo,
)
from classroll.services import user_service
from classroll.services.pagination import pagination_info

router = APIRouter(prefix="/users", tags=["users"])


def _user_to_response(user: User) -> UserResponse:
    return UserResponse(id=user.id, name=user.name, email=user.email, role=user.role)


def _ensure_self_or_admin(principal: Principal, user_id: str, message: str) -> None:
    is_self = principal.account_type == "user" and principal.id == user_id
    if not (is_self or principal.is_admin):
        raise ForbiddenError(message)


@router.post("", response_model=UserEnvelope, status_code=201)
def create_user(
    req: UserCreate,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_optional_principal),
):
    """Register a new user. Anyone may sign up as a student; only admins create admins."""
    with internal_errors("Internal server error while creating user", "USER_CREATION_FAILED"):
        if req.role != "student" and not (principal and principal.is_admin):
            raise ForbiddenError("Only admins can create admin accounts")
        user = user_service.create_user(db, req.name, req.email, req.password, req.role)
        return UserEnvelope(message="User successfully created", user=_user_to_response(user))


@router.get("", response_model=UserListResponse)
def list_users(
    search: Optional[str] = None,
    order_by: Literal["name", "email", "role"] = Query(default="name", alias="orderBy"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    with internal_errors("Internal server error while fetching users", "USERS_FETCH_FAILED"):
        users, total = user_service.list_users(db, search, order_by, page, limit)
        return UserListResponse(
            users=[_user_to_response(u) for u in users],
            pagination=Pagination(**pagination_info(page, limit, total)),
        )


@router.get("/{user_id}", response_model=UserDetailResponse)
def get_user(
    user_id: UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """A user with their active enrollments, each with class, course and teacher."""
    with internal_errors("Internal server error while fetching user", "USER_FETCH_FAILED"):
        user = user_service.get_user(db, str(user_id))
        rows = user_service.active_enrollment_details(db, user.id)
        enrollments = [
            UserEnrollmentDetail(
                enrollment_id=enrollment.enrollment_id,
                enrolled_at=enrollment.enrolled_at.isoformat(),
                enrollment_number=enrollment.enrollment,
                is_active=enrollment.is_active,
                class_=EnrollmentClassInfo(
                    id=cls.id,
                    name=cls.name,
                    semester=cls.semester,
                    schedule=cls.schedule,
                    course=EnrollmentCourseInfo(
                        id=course.id,
                        title=course.title,
                        description=course.description,
                        workload=course.workload,
                        department=course.department,
                        teacher=EnrollmentTeacherInfo(id=teacher.id, name=teacher.name, email=teacher.email),
                    ),
                ),
            )
            for enrollment, cls, course, teacher in rows
        ]
        return UserDetailResponse(
            user=UserDetail(**_user_to_response(user).model_dump(), enrollments=enrollments)
        )


@router.put("/{user_id}", response_model=UserEnvelope)
def update_user(
    user_id: UUID,
    req: UserUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Users update their own profile; admins update anyone. Only admins change roles."""
    with internal_errors("Internal server error while updating user", "USER_UPDATE_FAILED"):
        _ensure_self_or_admin(principal, str(user_id), "You can only update your own profile")
        changes = req.model_dump(exclude_unset=True, exclude_none=True)
        if "role" in changes and not principal.is_admin:
            raise ForbiddenError("Only admins can change roles")

        user = user_service.update_user(db, str(user_id), changes)
        return UserEnvelope(message="User successfully updated", user=_user_to_response(user))


@router.delete("/{user_id}", response_model=DeletedResponse)
def delete_user(
    user_id: UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Delete a user. Refused (409) while they hold active enrollments."""
    with internal_errors("Internal server error", "USER_DELETION_FAILED"):
        _ensure_self_or_admin(principal, str(user_id), "Only admins can delete other users")
        deleted_id = user_service.delete_user(db, str(user_id))
        return DeletedResponse(message="User successfully deleted", deleted_id=deleted_id)
