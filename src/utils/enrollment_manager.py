"""Enrollment management utilities."""

import logging
from dataclasses import dataclass
from typing import List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from core.exceptions import ConflictError, NotFoundError
from models.course import CourseModel
from models.enrollment import EnrollmentModel
from models.lecturer import LecturerModel
from models.student import StudentModel
from utils.validation import normalize_course_code

logger = logging.getLogger(__name__)

NO_LECTURER = "N/A"


@dataclass(frozen=True)
class EnrolledCourse:
    code: str
    name: str
    lecturer: str


class EnrollmentManager:
    """Manages which students take which courses."""

    def __init__(self, db: Session):
        self.db = db

    def enroll(self, student_db_id: int, course_code: str) -> EnrolledCourse:
        """Enroll a student in a course.

        Args:
            student_db_id: Internal ID of the student.
            course_code: Code of the course.

        Returns:
            EnrolledCourse with the lecturer's display name resolved.

        Raises:
            NotFoundError: If the student or course does not exist.
            ConflictError: If the student is already enrolled.
        """
        student = self.db.query(StudentModel).filter(StudentModel.id == student_db_id).first()
        if not student:
            raise NotFoundError("Student not found.")

        course = (
            self.db.query(CourseModel)
            .filter(CourseModel.code == normalize_course_code(course_code))
            .first()
        )
        if not course:
            raise NotFoundError("Course not found.")

        if self.is_enrolled(student.id, course.id):
            raise ConflictError("You are already enrolled in this course.")

        try:
            self.db.add(EnrollmentModel(student_id=student.id, course_id=course.id))
            self.db.commit()
        except IntegrityError as e:
            # Lost a race against an identical request
            self.db.rollback()
            raise ConflictError("You are already enrolled in this course.") from e
        except SQLAlchemyError:
            self.db.rollback()
            raise

        lecturer_name = course.lecturer.name if course.lecturer else NO_LECTURER
        logger.info("Enrolled %s in %s", student.student_id, course.code)
        return EnrolledCourse(code=course.code, name=course.name, lecturer=lecturer_name)

    def is_enrolled(self, student_db_id: int, course_db_id: int) -> bool:
        return (
            self.db.query(EnrollmentModel.id)
            .filter(
                EnrollmentModel.student_id == student_db_id,
                EnrollmentModel.course_id == course_db_id,
            )
            .first()
            is not None
        )

    def list_for_student(self, student_db_id: int) -> List[dict]:
        query = (
            self.db.query(CourseModel, LecturerModel)
            .join(EnrollmentModel, EnrollmentModel.course_id == CourseModel.id)
            .outerjoin(LecturerModel, LecturerModel.id == CourseModel.lecturer_id)
            .filter(EnrollmentModel.student_id == student_db_id)
            .order_by(CourseModel.code.asc())
        )
        return [
            {
                "code": course.code,
                "name": course.name,
                "lecturerName": lecturer.name if lecturer else NO_LECTURER,
                "courseId": course.id,
            }
            for course, lecturer in query.all()
        ]

    def list_students(self, course_db_id: int) -> List[dict]:
        """List students enrolled in a course ordered by name."""
        query = (
            self.db.query(StudentModel)
            .join(EnrollmentModel, EnrollmentModel.student_id == StudentModel.id)
            .filter(EnrollmentModel.course_id == course_db_id)
            .order_by(StudentModel.name.asc())
        )
        return [
            {"student_id": student.student_id, "studentName": student.name}
            for student in query.all()
        ]

    def list_all(self) -> List[dict]:
        """List every enrollment ordered by course code, then student name."""
        query = (
            self.db.query(StudentModel, CourseModel, LecturerModel)
            .select_from(EnrollmentModel)
            .join(StudentModel, StudentModel.id == EnrollmentModel.student_id)
            .join(CourseModel, CourseModel.id == EnrollmentModel.course_id)
            .outerjoin(LecturerModel, LecturerModel.id == CourseModel.lecturer_id)
            .order_by(CourseModel.code.asc(), StudentModel.name.asc())
        )
        return [
            {
                "student_id": student.student_id,
                "studentName": student.name,
                "courseCode": course.code,
                "courseName": course.name,
                "lecturerName": lecturer.name if lecturer else NO_LECTURER,
            }
            for student, course, lecturer in query.all()
        ]
