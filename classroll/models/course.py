"""Course model — a catalogue entry owned by a teacher."""

from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from classroll.database import Base
from classroll.ids import new_id


class Course(Base):
    __tablename__ = "courses"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    department = Column(String(50), nullable=False)
    workload = Column(String(100), nullable=False)
    teachers_id = Column(
        String(36), ForeignKey("teachers.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc),
                        onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("title", "teachers_id", name="ux_courses_title_teacher"),
    )

    # Relationships
    teacher = relationship("Teacher", back_populates="courses")
    classes = relationship("Class", back_populates="course", cascade="all, delete", passive_deletes=True)
