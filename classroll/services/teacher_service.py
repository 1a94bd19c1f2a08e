"""Teacher service — teacher accounts and the course/class cascade guard."""

import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from classroll.errors import ConflictError, not_found
from classroll.middleware.auth import hash_password
from classroll.models.class_ import Class
from classroll.models.course import Course
from classroll.models.teacher import Teacher
from classroll.services.pagination import page_offset

logger = logging.getLogger(__name__)

TEACHER_ORDER_FIELDS = {"name": Teacher.name, "email": Teacher.email, "role": Teacher.role}


def get_teacher(db: Session, teacher_id: str) -> Teacher:
    teacher = db.query(Teacher).filter(Teacher.id == teacher_id).first()
    if not teacher:
        raise not_found("Teacher", teacher_id)
    return teacher


def count_courses(db: Session, teacher_id: str) -> int:
    return db.query(func.count(Course.id)).filter(Course.teachers_id == teacher_id).scalar() or 0


def count_classes(db: Session, teacher_id: str) -> int:
    return db.query(func.count(Class.id)).filter(Class.teacher_id == teacher_id).scalar() or 0


def create_teacher(db: Session, name: str, email: str, password: str) -> Teacher:
    if db.query(Teacher).filter(Teacher.email == email).first():
        raise ConflictError(
            "Teacher with this email already exists",
            suggestedAction="Use a different email or update the existing teacher",
        )

    teacher = Teacher(name=name, email=email, password=hash_password(password))
    db.add(teacher)
    db.commit()
    db.refresh(teacher)
    logger.info(f"Teacher created: {teacher.id}")
    return teacher


def list_teachers(
    db: Session,
    search: Optional[str] = None,
    order_by: str = "name",
    page: int = 1,
    limit: int = 10,
) -> tuple[list[Teacher], int]:
    query = db.query(Teacher)
    if search:
        query = query.filter(Teacher.name.ilike(f"%{search}%"))

    total = query.count()
    teachers = (
        query.order_by(TEACHER_ORDER_FIELDS.get(order_by, Teacher.name).asc())
        .limit(limit)
        .offset(page_offset(page, limit))
        .all()
    )
    return teachers, total


def update_teacher(db: Session, teacher_id: str, changes: dict) -> Teacher:
    teacher = get_teacher(db, teacher_id)

    new_email = changes.get("email")
    if new_email and new_email != teacher.email:
        duplicate = (
            db.query(Teacher)
            .filter(Teacher.email == new_email, Teacher.id != teacher_id)
            .first()
        )
        if duplicate:
            raise ConflictError(
                "Teacher with this email already exists",
                suggestedAction="Use a different email or update the existing teacher",
            )

    if changes.get("password"):
        changes["password"] = hash_password(changes["password"])

    for key, value in changes.items():
        setattr(teacher, key, value)
    db.commit()
    db.refresh(teacher)
    logger.info(f"Teacher updated: {teacher_id}")
    return teacher


def delete_teacher(db: Session, teacher_id: str) -> str:
    """Refused with 409 while the teacher owns any course or class."""
    teacher = get_teacher(db, teacher_id)

    course_count = count_courses(db, teacher_id)
    class_count = count_classes(db, teacher_id)
    if course_count > 0 or class_count > 0:
        raise ConflictError(
            "Teacher has associated courses or classes",
            message="Cannot delete a teacher that has associated courses or classes",
            courseCount=course_count,
            classCount=class_count,
        )

    db.delete(teacher)
    db.commit()
    logger.info(f"Teacher deleted: {teacher_id}")
    return teacher_id
