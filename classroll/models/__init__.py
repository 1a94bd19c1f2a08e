"""SQLAlchemy ORM models."""

from classroll.models.user import User
from classroll.models.teacher import Teacher
from classroll.models.course import Course
from classroll.models.class_ import Class
from classroll.models.enrollment import Enrollment

__all__ = [
    "User",
    "Teacher",
    "Course",
    "Class",
    "Enrollment",
]
