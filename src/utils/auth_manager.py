"""Login and password-change utilities.

Password comparison is delegated to the configured CredentialVerifier.
"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config import ADMIN_USERNAME
from core.exceptions import InvalidError, NotFoundError, UnauthorizedError
from core.security import CredentialVerifier, PlaintextCredentialVerifier
from models.course import CourseModel
from models.lecturer import LecturerModel
from models.student import StudentModel
from utils.validation import normalize_student_id, normalize_username, require_text

logger = logging.getLogger(__name__)


class AuthManager:
    """Checks student and lecturer credentials."""

    def __init__(self, db: Session, verifier: Optional[CredentialVerifier] = None):
        """Initialize AuthManager.

        Args:
            db: SQLAlchemy Session.
            verifier: Compares submitted passwords with stored ones.
        """
        self.db = db
        self.verifier = verifier or PlaintextCredentialVerifier()

    def login_student(self, student_id: str, password: str) -> StudentModel:
        """Authenticate a student by public ID and password.

        Raises:
            UnauthorizedError: If the ID is unknown or the password is wrong.
                Both cases report the same message.
        """
        model = (
            self.db.query(StudentModel)
            .filter(StudentModel.student_id == normalize_student_id(student_id))
            .first()
        )
        if not model or not self.verifier.verify(password or "", model.password):
            logger.info("Failed student login for %s", student_id)
            raise UnauthorizedError("Invalid Student ID or password.")
        return model

    def change_student_password(
        self, student_id: str, old_password: str, new_password: str
    ) -> None:
        """Replace a student's password after checking the old one.

        Raises:
            NotFoundError: If the student does not exist.
            UnauthorizedError: If the old password is wrong.
            InvalidError: If the new password is blank.
        """
        model = (
            self.db.query(StudentModel)
            .filter(StudentModel.student_id == normalize_student_id(student_id))
            .first()
        )
        if not model:
            raise NotFoundError("Student not found.")
        if not self.verifier.verify(old_password or "", model.password):
            raise UnauthorizedError("Incorrect old password.")
        new_password = require_text(new_password, "New password is required.")

        model.password = self.verifier.encode(new_password)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        logger.info("Password changed for student %s", model.student_id)

    def login_lecturer(self, username: str, password: str) -> dict:
        """Authenticate a lecturer or the administrator.

        Returns:
            Dict with id, name, username and the lecturer's courses. The
            administrator gets an empty course list.

        Raises:
            UnauthorizedError: If the credentials do not match.
        """
        model = (
            self.db.query(LecturerModel)
            .filter(LecturerModel.username == normalize_username(username))
            .first()
        )
        if not model or not self.verifier.verify(password or "", model.password):
            logger.info("Failed lecturer login for %s", username)
            raise UnauthorizedError("Invalid credentials")

        courses = []
        if model.username != ADMIN_USERNAME:
            courses = [
                {"id": course.id, "code": course.code, "name": course.name}
                for course in self.db.query(CourseModel)
                .filter(CourseModel.lecturer_id == model.id)
                .order_by(CourseModel.code.asc())
                .all()
            ]
        return {
            "id": model.id,
            "name": model.name,
            "username": model.username,
            "courses": courses,
        }
