"""Course service — catalogue writes with (title, teacher) uniqueness."""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from classroll.errors import ConflictError, not_found
from classroll.models.class_ import Class
from classroll.models.course import Course
from classroll.services.pagination import page_offset
from classroll.services.teacher_service import get_teacher

logger = logging.getLogger(__name__)

COURSE_ORDER_FIELDS = {
    "id": Course.id,
    "title": Course.title,
    "createdAt": Course.created_at,
    "updatedAt": Course.updated_at,
}


def duplicate_title() -> ConflictError:
    return ConflictError(
        "Course with this title already exists",
        suggestedAction="Use a different title or update the existing course",
    )


def get_course(db: Session, course_id: str) -> Course:
    course = db.query(Course).filter(Course.id == course_id).first()
    if not course:
        raise not_found("Course", course_id)
    return course


def count_classes(db: Session, course_id: str) -> int:
    return db.query(func.count(Class.id)).filter(Class.course_id == course_id).scalar() or 0


def create_course(
    db: Session,
    teacher_id: str,
    title: str,
    description: str,
    department: str,
    workload: str,
) -> Course:
    get_teacher(db, teacher_id)

    existing = (
        db.query(Course)
        .filter(Course.title == title, Course.teachers_id == teacher_id)
        .first()
    )
    if existing:
        raise duplicate_title()

    course = Course(
        title=title,
        description=description,
        department=department,
        workload=workload,
        teachers_id=teacher_id,
    )
    db.add(course)
    db.commit()
    db.refresh(course)
    logger.info(f"Course created: {course.id}")
    return course


def list_courses(
    db: Session,
    search: Optional[str] = None,
    order_by: str = "title",
    page: int = 1,
    limit: int = 10,
) -> tuple[list[tuple[Course, int]], int]:
    """One page of (course, class count) pairs plus the filtered total."""
    conditions = []
    if search:
        conditions.append(Course.title.ilike(f"%{search}%"))

    class_count = func.count(Class.id).label("class_count")
    rows = (
        db.query(Course, class_count)
        .outerjoin(Class, Class.course_id == Course.id)
        .filter(*conditions)
        .group_by(Course.id)
        .order_by(COURSE_ORDER_FIELDS.get(order_by, Course.title).asc())
        .limit(limit)
        .offset(page_offset(page, limit))
        .all()
    )
    total = db.query(func.count(Course.id)).filter(*conditions).scalar() or 0
    return [(course, count) for course, count in rows], total


def update_course(db: Session, course: Course, changes: dict) -> Course:
    """Apply ``changes`` to an already-loaded course; 409 when the new title collides."""
    new_title = changes.get("title")
    if new_title and new_title != course.title:
        duplicate = (
            db.query(Course)
            .filter(
                Course.title == new_title,
                Course.teachers_id == course.teachers_id,
                Course.id != course.id,
            )
            .first()
        )
        if duplicate:
            raise duplicate_title()

    for key, value in changes.items():
        setattr(course, key, value)
    course.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(course)
    logger.info(f"Course updated: {course.id}")
    return course


def delete_course(db: Session, course: Course) -> str:
    """Refused with 409 while any class belongs to the course."""
    class_count = count_classes(db, course.id)
    if class_count > 0:
        raise ConflictError(
            "Course has classes",
            message="Cannot delete a course that still has classes",
            classCount=class_count,
        )

    course_id = course.id
    db.delete(course)
    db.commit()
    logger.info(f"Course deleted: {course_id}")
    return course_id
