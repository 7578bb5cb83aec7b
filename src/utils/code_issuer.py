"""Attendance code issuance.

A lecturer issues a fresh code for a course they own. Old codes are never
deleted; the most recently issued one is the only code that can be redeemed.
"""

import logging
import secrets
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config import CODE_ALPHABET, CODE_LENGTH, CODE_VALIDITY_MS
from core.exceptions import NotFoundError, UnauthorizedError
from models.attendance_code import AttendanceCodeModel
from models.course import CourseModel
from utils.time_utils import Clock, now_ms
from utils.validation import normalize_course_code

logger = logging.getLogger(__name__)


def generate_attendance_code(length: int = CODE_LENGTH) -> str:
    """Generate a random upper-case alphanumeric attendance code."""
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def latest_code_for_course(db: Session, course_id: int) -> Optional[AttendanceCodeModel]:
    """Return the most recently issued code of a course, expired or not.

    Rows issued in the same millisecond are ordered by insertion.
    """
    return (
        db.query(AttendanceCodeModel)
        .filter(AttendanceCodeModel.course_id == course_id)
        .order_by(AttendanceCodeModel.issued_at.desc(), AttendanceCodeModel.id.desc())
        .first()
    )


def is_code_expired(code: AttendanceCodeModel, now: int) -> bool:
    return now - code.issued_at > CODE_VALIDITY_MS


class CodeIssuer:
    """Issues attendance codes and reports the active one."""

    def __init__(self, db: Session, clock: Clock = now_ms):
        """Initialize CodeIssuer.

        Args:
            db: SQLAlchemy Session.
            clock: Returns the current time in epoch milliseconds.
        """
        self.db = db
        self.clock = clock

    def issue_code(
        self, course_code: str, lecturer_id: int, code: Optional[str] = None
    ) -> AttendanceCodeModel:
        """Issue a new attendance code for a course.

        Args:
            course_code: Code of the course, e.g. 'OSD-001'.
            lecturer_id: Internal ID of the requesting lecturer.
            code: Explicit code value; a random one is generated when omitted.

        Returns:
            The stored AttendanceCodeModel.

        Raises:
            UnauthorizedError: If the course does not exist or is not owned by
                the lecturer. Nothing is written in that case.
        """
        course = (
            self.db.query(CourseModel)
            .filter(
                CourseModel.code == normalize_course_code(course_code),
                CourseModel.lecturer_id == lecturer_id,
            )
            .first()
        )
        if not course:
            logger.warning(
                "Lecturer %s denied code issuance for course %s", lecturer_id, course_code
            )
            raise UnauthorizedError(
                "Unauthorized access to this course or course not found"
            )

        model = AttendanceCodeModel(
            course_id=course.id,
            code=(code or generate_attendance_code()).upper(),
            issued_at=self.clock(),
        )
        try:
            self.db.add(model)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(model)
        logger.info("Issued attendance code %s for course %s", model.code, course.code)
        return model

    def get_current_code(self, course_code: str) -> Optional[AttendanceCodeModel]:
        """Return the active code of a course.

        Args:
            course_code: Code of the course.

        Returns:
            The latest issued code if it is still inside the validity window,
            None otherwise.

        Raises:
            NotFoundError: If the course does not exist.
        """
        course = (
            self.db.query(CourseModel)
            .filter(CourseModel.code == normalize_course_code(course_code))
            .first()
        )
        if not course:
            raise NotFoundError("Course not found")

        latest = latest_code_for_course(self.db, course.id)
        if latest is None or is_code_expired(latest, self.clock()):
            return None
        return latest
