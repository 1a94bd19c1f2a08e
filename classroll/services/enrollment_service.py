"""Enrollment service — the consistency rules around enrollment writes.

Every write runs its existence/uniqueness checks and the write itself inside
one session transaction. The partial unique index on active (user, class)
pairs is still the source of truth: if a concurrent request slips in between
the pre-check and the insert, the resulting ``IntegrityError`` is classified
and reported as the same 409 the pre-check would have produced.
"""

import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from classroll.config import settings
from classroll.errors import ConflictError, InternalError, not_found
from classroll.models.class_ import Class
from classroll.models.enrollment import Enrollment
from classroll.models.user import User
from classroll.services.enrollment_number import generate_enrollment_number
from classroll.services.pagination import page_offset

logger = logging.getLogger(__name__)


def duplicate_enrollment() -> ConflictError:
    return ConflictError(
        "Enrollment already exists",
        suggestedAction="User is already enrolled in this class",
    )


def _active_enrollment(
    db: Session, user_id: str, class_id: str, exclude_id: Optional[str] = None
) -> Optional[Enrollment]:
    query = db.query(Enrollment).filter(
        Enrollment.user_id == user_id,
        Enrollment.class_id == class_id,
        Enrollment.is_active.is_(True),
    )
    if exclude_id:
        query = query.filter(Enrollment.enrollment_id != exclude_id)
    return query.first()


def get_enrollment(db: Session, enrollment_id: str) -> Enrollment:
    enrollment = db.query(Enrollment).filter(Enrollment.enrollment_id == enrollment_id).first()
    if not enrollment:
        raise not_found("Enrollment", enrollment_id)
    return enrollment


def create_enrollment(db: Session, user_id: str, class_id: str) -> Enrollment:
    """Enroll a user in a class.

    Checks, in order: the user exists (404), the class exists (404), no active
    enrollment for the pair (409). The enrollment code is generated here; a
    code collision is retried with a fresh code a bounded number of times.
    """
    if not db.query(User).filter(User.id == user_id).first():
        raise not_found("User", user_id)

    if not db.query(Class).filter(Class.id == class_id).first():
        raise not_found("Class", class_id)

    if _active_enrollment(db, user_id, class_id):
        raise duplicate_enrollment()

    attempts = max(settings.ENROLLMENT_CODE_MAX_ATTEMPTS, 1)
    for attempt in range(1, attempts + 1):
        enrollment = Enrollment(
            user_id=user_id,
            class_id=class_id,
            enrollment=generate_enrollment_number(),
            is_active=True,
        )
        db.add(enrollment)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            if _active_enrollment(db, user_id, class_id):
                raise duplicate_enrollment()
            logger.warning(
                "Enrollment code collision on attempt %d/%d for user %s, class %s",
                attempt, attempts, user_id, class_id,
            )
            continue
        db.refresh(enrollment)
        logger.info(f"Enrollment created: {enrollment.enrollment_id}")
        return enrollment

    raise InternalError(
        "Internal server error while creating enrollment",
        "ENROLLMENT_CREATION_FAILED",
    )


def list_enrollments(
    db: Session,
    user_id: Optional[str] = None,
    class_id: Optional[str] = None,
    is_active: Optional[bool] = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[tuple[Enrollment, User, Class]], int]:
    """Return one page of (enrollment, user, class) rows plus the filtered total."""
    conditions = []
    if user_id:
        conditions.append(Enrollment.user_id == user_id)
    if class_id:
        conditions.append(Enrollment.class_id == class_id)
    if is_active is not None:
        conditions.append(Enrollment.is_active.is_(is_active))

    rows = (
        db.query(Enrollment, User, Class)
        .join(User, Enrollment.user_id == User.id)
        .join(Class, Enrollment.class_id == Class.id)
        .filter(*conditions)
        .order_by(Enrollment.enrolled_at, Enrollment.enrollment_id)
        .limit(limit)
        .offset(page_offset(page, limit))
        .all()
    )
    total = db.query(func.count(Enrollment.enrollment_id)).filter(*conditions).scalar() or 0
    return rows, total


def update_enrollment(db: Session, enrollment_id: str, is_active: Optional[bool]) -> Enrollment:
    """Toggle ``is_active``. Re-activating is refused while another active row exists."""
    enrollment = get_enrollment(db, enrollment_id)

    if is_active is None:
        return enrollment

    if is_active and not enrollment.is_active:
        if _active_enrollment(db, enrollment.user_id, enrollment.class_id, exclude_id=enrollment_id):
            raise duplicate_enrollment()

    enrollment.is_active = is_active
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise duplicate_enrollment()
    db.refresh(enrollment)
    logger.info(f"Enrollment updated: {enrollment_id} (isActive={is_active})")
    return enrollment


def delete_enrollment(db: Session, enrollment_id: str) -> str:
    """Hard delete. Enrollments are leaves, so nothing to guard."""
    enrollment = get_enrollment(db, enrollment_id)
    db.delete(enrollment)
    db.commit()
    logger.info(f"Enrollment deleted: {enrollment_id}")
    return enrollment_id


def count_active_for_user(db: Session, user_id: str) -> int:
    return (
        db.query(func.count(Enrollment.enrollment_id))
        .filter(Enrollment.user_id == user_id, Enrollment.is_active.is_(True))
        .scalar()
        or 0
    )


def count_active_for_class(db: Session, class_id: str) -> int:
    return (
        db.query(func.count(Enrollment.enrollment_id))
        .filter(Enrollment.class_id == class_id, Enrollment.is_active.is_(True))
        .scalar()
        or 0
    )
