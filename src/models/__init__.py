from .base import Base
from .lecturer import LecturerModel
from .course import CourseModel
from .student import StudentModel
from .enrollment import EnrollmentModel
from .attendance_code import AttendanceCodeModel
from .attendance_record import AttendanceRecordModel

__all__ = [
    "Base",
    "LecturerModel",
    "CourseModel",
    "StudentModel",
    "EnrollmentModel",
    "AttendanceCodeModel",
    "AttendanceRecordModel",
]
