"""User (student/admin) model."""

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from classroll.database import Base
from classroll.ids import new_id


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)  # bcrypt hash
    role = Column(String(20), nullable=False, default="student")  # student | admin

    # Relationships
    enrollments = relationship("Enrollment", back_populates="user", cascade="all, delete", passive_deletes=True)
