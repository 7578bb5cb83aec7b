"""Lecturer database model.

The lecturer whose username equals config.ADMIN_USERNAME is the administrator.
"""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from .base import Base


class LecturerModel(Base):
    """Lecturer database model."""

    __tablename__ = "lecturers"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(255), unique=True, index=True, nullable=False)  # lower-cased
    password = Column(String(255), nullable=False)  # as produced by the CredentialVerifier
    name = Column(String(255), nullable=False)

    courses = relationship("CourseModel", back_populates="lecturer")
