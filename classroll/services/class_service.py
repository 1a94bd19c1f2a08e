"""Class service — class writes with referential and (course, name, semester) checks."""

import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from classroll.errors import ConflictError, not_found
from classroll.models.class_ import Class
from classroll.models.course import Course
from classroll.models.enrollment import Enrollment
from classroll.models.teacher import Teacher
from classroll.services import enrollment_service
from classroll.services.course_service import get_course
from classroll.services.pagination import page_offset
from classroll.services.teacher_service import get_teacher

logger = logging.getLogger(__name__)


def get_class(db: Session, class_id: str) -> Class:
    cls = db.query(Class).filter(Class.id == class_id).first()
    if not cls:
        raise not_found("Class", class_id)
    return cls


def _conflicting_class(
    db: Session, course_id: str, name: str, semester: str, exclude_id: Optional[str] = None
) -> Optional[Class]:
    query = db.query(Class).filter(
        Class.course_id == course_id,
        Class.name == name,
        Class.semester == semester,
    )
    if exclude_id:
        query = query.filter(Class.id != exclude_id)
    return query.first()


def create_class(
    db: Session,
    course_id: str,
    teacher_id: str,
    name: str,
    semester: str,
    schedule: str,
) -> Class:
    get_course(db, course_id)
    get_teacher(db, teacher_id)

    if _conflicting_class(db, course_id, name, semester):
        raise ConflictError(
            "Class already exists",
            suggestedAction="Use a different name or semester for this course",
        )

    cls = Class(
        course_id=course_id,
        teacher_id=teacher_id,
        name=name,
        semester=semester,
        schedule=schedule,
    )
    db.add(cls)
    db.commit()
    db.refresh(cls)
    logger.info(f"Class created: {cls.id}")
    return cls


def list_classes(
    db: Session,
    course_id: Optional[str] = None,
    teacher_id: Optional[str] = None,
    semester: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[tuple[Class, str, str, int]], int]:
    """One page of (class, course title, teacher name, active enrollments) plus the total."""
    conditions = []
    if course_id:
        conditions.append(Class.course_id == course_id)
    if teacher_id:
        conditions.append(Class.teacher_id == teacher_id)
    if semester:
        conditions.append(Class.semester == semester)

    active_count = func.count(Enrollment.enrollment_id).label("active_enrollments")
    rows = (
        db.query(Class, Course.title, Teacher.name, active_count)
        .join(Course, Class.course_id == Course.id)
        .join(Teacher, Class.teacher_id == Teacher.id)
        .outerjoin(
            Enrollment,
            (Enrollment.class_id == Class.id) & Enrollment.is_active.is_(True),
        )
        .filter(*conditions)
        .group_by(Class.id, Course.title, Teacher.name)
        .order_by(Class.created_at.asc(), Class.id.asc())
        .limit(limit)
        .offset(page_offset(page, limit))
        .all()
    )
    total = db.query(func.count(Class.id)).filter(*conditions).scalar() or 0
    return [tuple(row) for row in rows], total


def update_class(db: Session, cls: Class, changes: dict) -> Class:
    """Apply ``changes`` to a loaded class.

    A changed course or teacher must exist (404). When any part of the
    (course, name, semester) key changes, the merged key must be free (409).
    """
    new_course_id = changes.get("course_id")
    if new_course_id and new_course_id != cls.course_id:
        get_course(db, new_course_id)

    new_teacher_id = changes.get("teacher_id")
    if new_teacher_id and new_teacher_id != cls.teacher_id:
        get_teacher(db, new_teacher_id)

    if any(changes.get(key) for key in ("name", "semester", "course_id")):
        name = changes.get("name") or cls.name
        semester = changes.get("semester") or cls.semester
        course_id = new_course_id or cls.course_id
        if _conflicting_class(db, course_id, name, semester, exclude_id=cls.id):
            raise ConflictError(
                "Class conflict",
                suggestedAction="A class with this name already exists for the same course and semester",
            )

    for key, value in changes.items():
        setattr(cls, key, value)
    db.commit()
    db.refresh(cls)
    logger.info(f"Class updated: {cls.id}")
    return cls


def delete_class(db: Session, cls: Class) -> str:
    """Refused with 409 while the class has active enrollments."""
    enrollment_count = enrollment_service.count_active_for_class(db, cls.id)
    if enrollment_count > 0:
        raise ConflictError(
            "Class has active enrollments",
            message="Cannot delete a class that has active enrollments",
            enrollmentCount=enrollment_count,
        )

    class_id = cls.id
    db.delete(cls)
    db.commit()
    logger.info(f"Class deleted: {class_id}")
    return class_id
