"""Class model — one offering of a course in a given semester."""

from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from classroll.database import Base
from classroll.ids import new_id


class Class(Base):
    __tablename__ = "classes"

    id = Column(String(36), primary_key=True, default=new_id)
    course_id = Column(
        String(36), ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    teacher_id = Column(
        String(36), ForeignKey("teachers.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(100), nullable=False)  # e.g. "Turma A"
    semester = Column(String(20), nullable=False)  # e.g. "2025.1"
    schedule = Column(String(200), nullable=False)  # e.g. "Mon & Wed 19h-21h"
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("course_id", "name", "semester", name="ux_classes_course_name_semester"),
    )

    # Relationships
    course = relationship("Course", back_populates="classes")
    teacher = relationship("Teacher", back_populates="classes")
    enrollments = relationship("Enrollment", back_populates="class_", cascade="all, delete", passive_deletes=True)
