"""Teacher model."""

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from classroll.database import Base
from classroll.ids import new_id


class Teacher(Base):
    __tablename__ = "teachers"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="teacher")  # teacher | admin

    # Relationships
    courses = relationship("Course", back_populates="teacher", cascade="all, delete", passive_deletes=True)
    classes = relationship("Class", back_populates="teacher", cascade="all, delete", passive_deletes=True)
