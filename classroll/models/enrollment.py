"""Enrollment model — a user's seat in a class."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, true
from sqlalchemy.orm import relationship

from classroll.database import Base
from classroll.ids import new_id
from classroll.services.enrollment_number import generate_enrollment_number


class Enrollment(Base):
    __tablename__ = "enrollments"

    enrollment_id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    class_id = Column(
        String(36), ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    enrolled_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    enrollment = Column(String(16), unique=True, nullable=False, default=generate_enrollment_number)
    is_active = Column(Boolean, nullable=False, default=True)

    # Only one *active* row per (user, class); deactivated rows stay as history.
    __table_args__ = (
        Index(
            "ux_enrollments_user_class_active",
            "user_id",
            "class_id",
            unique=True,
            postgresql_where=is_active == true(),
            sqlite_where=is_active == true(),
        ),
    )

    # Relationships
    user = relationship("User", back_populates="enrollments")
    class_ = relationship("Class", back_populates="enrollments")
