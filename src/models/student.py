"""Student database model."""

from sqlalchemy import Column, Integer, String
from .base import Base


class StudentModel(Base):
    """Student database model.

    ``id`` is the internal identity, ``student_id`` the public ID ('S-001').
    """

    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    password = Column(String(255), nullable=False)
