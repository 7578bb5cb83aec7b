"""Custom exception classes for the Attendance Tracker.

Business failures raised by the managers. Every exception carries a
user-facing message which the API returns verbatim in the soft-fail
envelope. Anything not derived from AttendanceTrackerError is treated as an
internal fault.
"""


class AttendanceTrackerError(Exception):
    """Base exception for all expected business failures."""

    def __init__(self, message: str):
        """Initialize the exception.

        Args:
            message: Message safe to show to the user.
        """
        self.message = message
        super().__init__(message)


class NotFoundError(AttendanceTrackerError):
    """Raised when a course, student or lecturer does not exist."""

    pass


class UnauthorizedError(AttendanceTrackerError):
    """Raised when a lecturer acts on a course they do not own."""

    pass


class ConflictError(AttendanceTrackerError):
    """Raised on duplicate enrollments, attendance or usernames."""

    pass


class InvalidError(AttendanceTrackerError):
    """Raised when input is missing or malformed."""

    pass
