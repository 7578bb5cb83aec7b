"""Attendance code database model.

Every issuance inserts a new row. The current code of a course is the row
with the greatest issued_at, ties broken by the greater id.
"""

from sqlalchemy import BigInteger, Column, ForeignKey, Index, Integer, String
from .base import Base


class AttendanceCodeModel(Base):
    """Attendance code database model."""

    __tablename__ = "attendance_codes"
    __table_args__ = (
        Index("ix_attendance_codes_course_issued", "course_id", "issued_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False)
    code = Column(String(6), nullable=False)
    issued_at = Column(BigInteger, nullable=False)  # epoch milliseconds
