"""Lecturer routes: login, code issuance and attendance read-out."""

from fastapi import APIRouter

from api.routes.responses import fail, ok
from core.dependencies import (
    AuthManagerDep,
    CodeIssuerDep,
    EnrollmentManagerDep,
    RedemptionEngineDep,
)
from core.exceptions import AttendanceTrackerError
from schemas.attendance import GenerateCodeRequest
from schemas.auth import LecturerLoginRequest
from utils.time_utils import ms_to_iso

router = APIRouter(prefix="/api/lecturer", tags=["Lecturer"])


@router.post("/login", summary="Lecturer or admin login")
def lecturer_login(req: LecturerLoginRequest, auth: AuthManagerDep) -> dict:
    try:
        user = auth.login_lecturer(req.username, req.password)
    except AttendanceTrackerError as e:
        return fail(e.message)
    return ok(user=user)


@router.post("/generate-code", summary="Issue a new attendance code")
def generate_code(req: GenerateCodeRequest, issuer: CodeIssuerDep) -> dict:
    """Issue a fresh attendance code for a course the lecturer owns.

    Args:
        req: Request with course code and lecturer ID.
        issuer: Injected CodeIssuer instance.

    Returns:
        Dictionary with success flag and the new code, or a failure message
        when the lecturer does not own the course.
    """
    try:
        model = issuer.issue_code(req.course_code, req.lecturer_id)
    except AttendanceTrackerError as e:
        return fail(e.message)
    return ok(code=model.code)


@router.get("/current-code/{course_code}", summary="Get the active attendance code")
def current_code(course_code: str, issuer: CodeIssuerDep) -> dict:
    try:
        model = issuer.get_current_code(course_code)
    except AttendanceTrackerError as e:
        return fail(e.message)
    if model is None:
        return fail("No active code")
    return ok(code=model.code, timestamp=ms_to_iso(model.issued_at))


@router.get("/attendance/{course_code}", summary="List attendance records of a course")
def list_attendance(course_code: str, engine: RedemptionEngineDep) -> dict:
    try:
        course, records = engine.list_records(course_code)
    except AttendanceTrackerError as e:
        return fail(e.message)
    return ok(records=records, course={"code": course.code, "name": course.name})


@router.get("/enrolled-students/{course_id}", summary="List students enrolled in a course")
def enrolled_students(course_id: int, enrollments: EnrollmentManagerDep) -> dict:
    return ok(students=enrollments.list_students(course_id))
