"""Input normalization helpers shared by the managers."""

from typing import Optional

from core.exceptions import InvalidError


def normalize_course_code(course_code: Optional[str]) -> str:
    """Course codes are stored and looked up upper-cased ('osd-001' -> 'OSD-001')."""
    return (course_code or "").strip().upper()


def normalize_student_id(student_id: Optional[str]) -> str:
    return (student_id or "").strip().upper()


def normalize_username(username: Optional[str]) -> str:
    return (username or "").strip().lower()


def normalize_attendance_code(code: Optional[str]) -> str:
    """Codes compare case-insensitively and ignore surrounding whitespace."""
    return (code or "").strip().upper()


def require_text(value: Optional[str], message: str) -> str:
    """Return the stripped value or raise InvalidError when it is blank.

    Args:
        value: Raw input value.
        message: Message to report when the value is missing.

    Returns:
        The value with surrounding whitespace removed.

    Raises:
        InvalidError: If the value is None or only whitespace.
    """
    if value is None or not value.strip():
        raise InvalidError(message)
    return value.strip()
