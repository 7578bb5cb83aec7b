"""Attendance record database model."""

from sqlalchemy import BigInteger, Column, ForeignKey, Integer, UniqueConstraint
from .base import Base


class AttendanceRecordModel(Base):
    """One row per (student, course); a second insert violates the constraint."""

    __tablename__ = "attendance_records"
    __table_args__ = (
        UniqueConstraint("student_id", "course_id", name="attendance_student_course_unique"),
    )

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), index=True, nullable=False)
    course_id = Column(Integer, ForeignKey("courses.id"), index=True, nullable=False)
    timestamp = Column(BigInteger, nullable=False)  # epoch milliseconds
