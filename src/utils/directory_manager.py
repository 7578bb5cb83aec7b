"""Directory management utilities.

Admin operations over students, lecturers and courses. Deletes remove every
dependent row and the entity itself inside one transaction.
"""

import logging
import re
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from config import ADMIN_USERNAME, STUDENT_ID_PREFIX, STUDENT_ID_WIDTH
from core.exceptions import ConflictError, InvalidError, NotFoundError
from core.security import CredentialVerifier, PlaintextCredentialVerifier
from models.attendance_code import AttendanceCodeModel
from models.attendance_record import AttendanceRecordModel
from models.course import CourseModel
from models.enrollment import EnrollmentModel
from models.lecturer import LecturerModel
from models.student import StudentModel
from utils.validation import (
    normalize_course_code,
    normalize_student_id,
    normalize_username,
    require_text,
)

logger = logging.getLogger(__name__)

_STUDENT_ID_PATTERN = re.compile(rf"^{re.escape(STUDENT_ID_PREFIX)}(\d+)$")


def next_student_id(existing_ids: List[str]) -> str:
    """Compute the next public student ID.

    Takes the largest numeric suffix among IDs shaped like 'S-<digits>' and
    adds one, zero-padding to three digits ('S-001'). Other IDs are ignored.

    Args:
        existing_ids: Public IDs already in use.

    Returns:
        The next free public ID.
    """
    highest = 0
    for student_id in existing_ids:
        match = _STUDENT_ID_PATTERN.match(student_id)
        if match:
            highest = max(highest, int(match.group(1)))
    return f"{STUDENT_ID_PREFIX}{highest + 1:0{STUDENT_ID_WIDTH}d}"


def default_student_password(student_id: str) -> str:
    """Initial password of a new student: the public ID reversed."""
    return student_id[::-1]


class DirectoryManager:
    """Manages students, lecturers and courses."""

    def __init__(self, db: Session, verifier: Optional[CredentialVerifier] = None):
        """Initialize DirectoryManager.

        Args:
            db: SQLAlchemy Session.
            verifier: Encodes passwords before they are stored.
        """
        self.db = db
        self.verifier = verifier or PlaintextCredentialVerifier()

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    # --- Students ---

    def list_students(self) -> List[StudentModel]:
        return self.db.query(StudentModel).order_by(StudentModel.student_id.asc()).all()

    def get_student(self, student_db_id: int) -> StudentModel:
        model = self.db.query(StudentModel).filter(StudentModel.id == student_db_id).first()
        if not model:
            raise NotFoundError("Student not found.")
        return model

    def add_student(self, name: Optional[str]) -> StudentModel:
        """Add a student with an auto-assigned public ID.

        Args:
            name: Display name of the student.

        Returns:
            The created StudentModel. Its initial password is the reversed
            public ID.

        Raises:
            InvalidError: If the name is blank.
            ConflictError: If a student with this name already exists.
        """
        name = require_text(name, "Student Name is required.")

        existing_ids = [
            row.student_id
            for row in self.db.query(StudentModel.student_id)
            .filter(StudentModel.student_id.like(f"{STUDENT_ID_PREFIX}%"))
            .all()
        ]
        student_id = next_student_id(existing_ids)

        if self.db.query(StudentModel.id).filter(StudentModel.name == name).first():
            raise ConflictError("A student with this name already exists.")

        model = StudentModel(
            student_id=student_id,
            name=name,
            password=self.verifier.encode(default_student_password(student_id)),
        )
        try:
            self.db.add(model)
            self.db.commit()
        except IntegrityError as e:
            # Another request took the same public ID
            self.db.rollback()
            raise ConflictError(
                f"Student ID {student_id} was just assigned, please retry."
            ) from e
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(model)
        logger.info("Added student %s (%s)", student_id, name)
        return model

    def rename_student(self, student_db_id: int, new_name: Optional[str]) -> StudentModel:
        new_name = require_text(new_name, "New student name is required.")
        model = self.get_student(student_db_id)
        model.name = new_name
        self._commit()
        logger.info("Renamed student %s to %s", model.student_id, new_name)
        return model

    def delete_student(self, student_public_id: str) -> None:
        """Delete a student with its enrollments and attendance records.

        Raises:
            NotFoundError: If no student has this public ID.
        """
        model = (
            self.db.query(StudentModel)
            .filter(StudentModel.student_id == normalize_student_id(student_public_id))
            .first()
        )
        if not model:
            raise NotFoundError("Student not found.")

        self.db.query(AttendanceRecordModel).filter(
            AttendanceRecordModel.student_id == model.id
        ).delete(synchronize_session=False)
        self.db.query(EnrollmentModel).filter(
            EnrollmentModel.student_id == model.id
        ).delete(synchronize_session=False)
        self.db.delete(model)
        self._commit()
        logger.info("Deleted student %s", student_public_id)

    # --- Lecturers ---

    def list_lecturers_with_courses(self) -> List[LecturerModel]:
        """List lecturers, without the admin account, with their courses loaded."""
        return (
            self.db.query(LecturerModel)
            .filter(LecturerModel.username != ADMIN_USERNAME)
            .order_by(LecturerModel.id.asc())
            .all()
        )

    def add_lecturer(
        self, username: Optional[str], password: Optional[str], name: Optional[str]
    ) -> LecturerModel:
        """Add a lecturer account.

        Raises:
            InvalidError: If any field is blank.
            ConflictError: If the username is taken.
        """
        message = "Username, password, and name are required."
        require_text(username, message)
        require_text(password, message)
        name = require_text(name, message)
        username = normalize_username(username)

        if self.db.query(LecturerModel.id).filter(LecturerModel.username == username).first():
            raise ConflictError("Lecturer with this username already exists.")

        model = LecturerModel(
            username=username,
            password=self.verifier.encode(password),
            name=name,
        )
        try:
            self.db.add(model)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError("Lecturer with this username already exists.") from e
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(model)
        logger.info("Added lecturer %s", username)
        return model

    def delete_lecturer(self, lecturer_id: int) -> None:
        """Delete a lecturer together with every course they own.

        Raises:
            InvalidError: If the lecturer is the administrator.
            NotFoundError: If the lecturer does not exist.
        """
        model = self.db.query(LecturerModel).filter(LecturerModel.id == lecturer_id).first()
        if model and model.username == ADMIN_USERNAME:
            raise InvalidError("Cannot delete the main administrator account.")
        if not model:
            raise NotFoundError("Lecturer not found.")

        username = model.username
        for course in list(model.courses):
            self._delete_course_rows(course)
        self.db.delete(model)
        self._commit()
        logger.info("Deleted lecturer %s and their courses", username)

    # --- Courses ---

    def list_courses(self) -> List[CourseModel]:
        return self.db.query(CourseModel).order_by(CourseModel.code.asc()).all()

    def get_course(self, course_code: str) -> CourseModel:
        model = (
            self.db.query(CourseModel)
            .filter(CourseModel.code == normalize_course_code(course_code))
            .first()
        )
        if not model:
            raise NotFoundError("Course not found.")
        return model

    def add_course(
        self, code: Optional[str], name: Optional[str], lecturer_id: Optional[int] = None
    ) -> CourseModel:
        """Create a course, optionally assigned to a lecturer.

        Raises:
            InvalidError: If code or name is blank.
            NotFoundError: If the lecturer does not exist.
            ConflictError: If the course code is taken.
        """
        code = normalize_course_code(require_text(code, "Course code and name are required."))
        name = require_text(name, "Course code and name are required.")
        if lecturer_id is not None:
            self._require_lecturer(lecturer_id)

        if self.db.query(CourseModel.id).filter(CourseModel.code == code).first():
            raise ConflictError(f"Course {code} already exists.")

        model = CourseModel(code=code, name=name, lecturer_id=lecturer_id)
        try:
            self.db.add(model)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError(f"Course {code} already exists.") from e
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(model)
        logger.info("Added course %s", code)
        return model

    def assign_lecturer(self, course_code: str, lecturer_id: int) -> CourseModel:
        course = self.get_course(course_code)
        self._require_lecturer(lecturer_id, "New lecturer not found.")
        course.lecturer_id = lecturer_id
        self._commit()
        logger.info("Assigned course %s to lecturer %s", course.code, lecturer_id)
        return course

    def delete_course(self, course_code: str) -> None:
        """Delete a course with its codes, attendance records and enrollments."""
        course = self.get_course(course_code)
        code = course.code
        self._delete_course_rows(course)
        self._commit()
        logger.info("Deleted course %s", code)

    def _delete_course_rows(self, course: CourseModel) -> None:
        """Stage deletion of a course and its dependents; caller commits."""
        for model in (AttendanceCodeModel, AttendanceRecordModel, EnrollmentModel):
            self.db.query(model).filter(model.course_id == course.id).delete(
                synchronize_session=False
            )
        self.db.delete(course)

    def _require_lecturer(
        self, lecturer_id: int, message: str = "Lecturer not found."
    ) -> LecturerModel:
        model = self.db.query(LecturerModel).filter(LecturerModel.id == lecturer_id).first()
        if not model:
            raise NotFoundError(message)
        return model
