"""Attendance code redemption.

A student submits the code shown by the lecturer. The submission runs
through a fixed sequence of checks and either creates the single attendance
record of that (student, course) pair or reports why it was rejected.
Business rejections are returned as a RedemptionResult, never raised.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from config import REQUIRE_ENROLLMENT
from core.exceptions import NotFoundError
from models.attendance_record import AttendanceRecordModel
from models.course import CourseModel
from models.student import StudentModel
from utils.code_issuer import is_code_expired, latest_code_for_course
from utils.enrollment_manager import EnrollmentManager
from utils.time_utils import Clock, now_ms
from utils.validation import (
    normalize_attendance_code,
    normalize_course_code,
    normalize_student_id,
)

logger = logging.getLogger(__name__)


class RedemptionOutcome(str, enum.Enum):
    ACCEPTED = "accepted"
    COURSE_NOT_FOUND = "course_not_found"
    STUDENT_NOT_FOUND = "student_not_found"
    NOT_ENROLLED = "not_enrolled"
    NO_CODE_ISSUED = "no_code_issued"
    INVALID_CODE = "invalid_code"
    CODE_EXPIRED = "code_expired"
    ALREADY_RECORDED = "already_recorded"


_MESSAGES: Dict[RedemptionOutcome, str] = {
    RedemptionOutcome.COURSE_NOT_FOUND: "Invalid course code",
    RedemptionOutcome.STUDENT_NOT_FOUND: "Student not found.",
    RedemptionOutcome.NOT_ENROLLED: "You are not enrolled in this course.",
    RedemptionOutcome.NO_CODE_ISSUED: "No attendance code has been issued for this course",
    RedemptionOutcome.INVALID_CODE: "Invalid attendance code",
    RedemptionOutcome.CODE_EXPIRED: "Attendance code has expired",
    RedemptionOutcome.ALREADY_RECORDED: "You have already marked attendance for this class",
}


@dataclass(frozen=True)
class RedemptionResult:
    """Outcome of one redemption attempt."""

    outcome: RedemptionOutcome
    message: str
    student_name: Optional[str] = None
    timestamp: Optional[int] = None

    @property
    def accepted(self) -> bool:
        return self.outcome is RedemptionOutcome.ACCEPTED

    @classmethod
    def rejected(cls, outcome: RedemptionOutcome) -> "RedemptionResult":
        return cls(outcome=outcome, message=_MESSAGES[outcome])


class RedemptionEngine:
    """Validates submitted codes and records attendance."""

    def __init__(
        self,
        db: Session,
        clock: Clock = now_ms,
        require_enrollment: bool = REQUIRE_ENROLLMENT,
    ):
        """Initialize RedemptionEngine.

        Args:
            db: SQLAlchemy Session.
            clock: Returns the current time in epoch milliseconds.
            require_enrollment: Reject students not enrolled in the course.
        """
        self.db = db
        self.clock = clock
        self.require_enrollment = require_enrollment

    def redeem(
        self, student_public_id: str, course_code: str, submitted_code: str
    ) -> RedemptionResult:
        """Redeem an attendance code for a student.

        Checks run in this order and stop at the first failure: course
        exists, student exists, student is enrolled (if required), a code
        was issued, the code matches, the code is not older than the
        validity window, no attendance exists yet.

        Args:
            student_public_id: Public student ID, e.g. 'S-001'.
            course_code: Code of the course, e.g. 'OSD-001'.
            submitted_code: Code typed by the student, any case.

        Returns:
            RedemptionResult describing the outcome.
        """
        course = (
            self.db.query(CourseModel)
            .filter(CourseModel.code == normalize_course_code(course_code))
            .first()
        )
        if not course:
            return RedemptionResult.rejected(RedemptionOutcome.COURSE_NOT_FOUND)

        student = (
            self.db.query(StudentModel)
            .filter(StudentModel.student_id == normalize_student_id(student_public_id))
            .first()
        )
        if not student:
            return RedemptionResult.rejected(RedemptionOutcome.STUDENT_NOT_FOUND)

        if self.require_enrollment and not EnrollmentManager(self.db).is_enrolled(
            student.id, course.id
        ):
            return RedemptionResult.rejected(RedemptionOutcome.NOT_ENROLLED)

        current = latest_code_for_course(self.db, course.id)
        if current is None:
            return RedemptionResult.rejected(RedemptionOutcome.NO_CODE_ISSUED)

        if normalize_attendance_code(submitted_code) != current.code.upper():
            return RedemptionResult.rejected(RedemptionOutcome.INVALID_CODE)

        now = self.clock()
        if is_code_expired(current, now):
            return RedemptionResult.rejected(RedemptionOutcome.CODE_EXPIRED)

        existing = (
            self.db.query(AttendanceRecordModel)
            .filter(
                AttendanceRecordModel.student_id == student.id,
                AttendanceRecordModel.course_id == course.id,
            )
            .first()
        )
        if existing:
            return RedemptionResult.rejected(RedemptionOutcome.ALREADY_RECORDED)

        record = AttendanceRecordModel(
            student_id=student.id, course_id=course.id, timestamp=now
        )
        # The unique constraint settles concurrent submissions that both
        # passed the existence check above
        try:
            self.db.add(record)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.info(
                "Concurrent duplicate attendance for %s in %s", student.student_id, course.code
            )
            return RedemptionResult.rejected(RedemptionOutcome.ALREADY_RECORDED)
        except SQLAlchemyError:
            self.db.rollback()
            raise

        logger.info("Recorded attendance for %s in %s", student.student_id, course.code)
        return RedemptionResult(
            outcome=RedemptionOutcome.ACCEPTED,
            message=f"Valid Absence for {student.name}, Good Luck for Your Class!",
            student_name=student.name,
            timestamp=now,
        )

    def list_records(self, course_code: str) -> Tuple[CourseModel, List[dict]]:
        """List the attendance records of a course, newest first.

        Args:
            course_code: Code of the course.

        Returns:
            Tuple of the course and a list of dicts with studentName and
            timestamp (epoch milliseconds).

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

        query = (
            self.db.query(AttendanceRecordModel, StudentModel)
            .join(StudentModel, StudentModel.id == AttendanceRecordModel.student_id)
            .filter(AttendanceRecordModel.course_id == course.id)
            .order_by(AttendanceRecordModel.timestamp.desc())
        )
        records = [
            {"studentName": student.name, "timestamp": record.timestamp}
            for record, student in query.all()
        ]
        return course, records
