"""User service — accounts, profile updates, guarded deletion."""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from classroll.errors import ConflictError, not_found
from classroll.middleware.auth import hash_password
from classroll.models.class_ import Class
from classroll.models.course import Course
from classroll.models.enrollment import Enrollment
from classroll.models.teacher import Teacher
from classroll.models.user import User
from classroll.services import enrollment_service
from classroll.services.pagination import page_offset

logger = logging.getLogger(__name__)

USER_ORDER_FIELDS = {"name": User.name, "email": User.email, "role": User.role}


def get_user(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise not_found("User", user_id)
    return user


def create_user(db: Session, name: str, email: str, password: str, role: str = "student") -> User:
    if db.query(User).filter(User.email == email).first():
        raise ConflictError(
            "User with this email already exists",
            suggestedAction="Use a different email or login with existing account",
        )

    user = User(name=name, email=email, password=hash_password(password), role=role or "student")
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"User created: {user.id}")
    return user


def list_users(
    db: Session,
    search: Optional[str] = None,
    order_by: str = "name",
    page: int = 1,
    limit: int = 10,
) -> tuple[list[User], int]:
    query = db.query(User)
    if search:
        query = query.filter(User.name.ilike(f"%{search}%"))

    total = query.count()
    users = (
        query.order_by(USER_ORDER_FIELDS.get(order_by, User.name).asc())
        .limit(limit)
        .offset(page_offset(page, limit))
        .all()
    )
    return users, total


def active_enrollment_details(db: Session, user_id: str) -> list[tuple[Enrollment, Class, Course, Teacher]]:
    """Active enrollments of a user joined with class, course and the class teacher."""
    return (
        db.query(Enrollment, Class, Course, Teacher)
        .join(Class, Enrollment.class_id == Class.id)
        .join(Course, Class.course_id == Course.id)
        .join(Teacher, Class.teacher_id == Teacher.id)
        .filter(Enrollment.user_id == user_id, Enrollment.is_active.is_(True))
        .order_by(Enrollment.enrolled_at.asc())
        .all()
    )


def update_user(db: Session, user_id: str, changes: dict) -> User:
    user = get_user(db, user_id)

    new_email = changes.get("email")
    if new_email and new_email != user.email:
        duplicate = (
            db.query(User)
            .filter(User.email == new_email, User.id != user_id)
            .first()
        )
        if duplicate:
            raise ConflictError(
                "User with this email already exists",
                suggestedAction="Use a different email",
            )

    if changes.get("password"):
        changes["password"] = hash_password(changes["password"])

    for key, value in changes.items():
        setattr(user, key, value)
    db.commit()
    db.refresh(user)
    logger.info(f"User updated: {user_id}")
    return user


def delete_user(db: Session, user_id: str) -> str:
    """Refused with 409 while the user holds active enrollments."""
    user = get_user(db, user_id)

    enrollment_count = enrollment_service.count_active_for_user(db, user_id)
    if enrollment_count > 0:
        raise ConflictError(
            "User has active enrollments",
            message="Cannot delete a user that has active course enrollments",
            enrollmentCount=enrollment_count,
        )

    db.delete(user)
    db.commit()
    logger.info(f"User deleted: {user_id}")
    return user_id
