"""Student routes: course lookup, login, enrollment and attendance submission."""

from fastapi import APIRouter

from api.routes.responses import fail, ok
from core.dependencies import (
    AuthManagerDep,
    DirectoryManagerDep,
    EnrollmentManagerDep,
    RedemptionEngineDep,
)
from core.exceptions import AttendanceTrackerError
from schemas.attendance import EnrollRequest, SubmitAttendanceRequest
from schemas.auth import ChangePasswordRequest, StudentLoginRequest

router = APIRouter(prefix="/api", tags=["Student"])


@router.get("/courses", summary="List all courses")
def list_courses(directory: DirectoryManagerDep) -> dict:
    courses = [
        {"id": course.id, "code": course.code, "name": course.name}
        for course in directory.list_courses()
    ]
    return ok(courses=courses)


@router.get("/course/{code}", summary="Get course by code")
def get_course(code: str, directory: DirectoryManagerDep) -> dict:
    try:
        course = directory.get_course(code)
    except AttendanceTrackerError:
        return fail("Course not found")
    return ok(course={"id": course.id, "code": course.code, "name": course.name})


@router.post("/attendance", summary="Submit an attendance code")
def submit_attendance(req: SubmitAttendanceRequest, engine: RedemptionEngineDep) -> dict:
    """Redeem an attendance code.

    Every rejection (unknown course or student, wrong or expired code,
    attendance already recorded) is reported in the body with HTTP 200.

    Args:
        req: Submission with public student ID, course code and code.
        engine: Injected RedemptionEngine instance.

    Returns:
        Dictionary with success flag and message.
    """
    result = engine.redeem(req.student_id, req.course_code, req.attendance_code)
    if not result.accepted:
        return fail(result.message)
    return ok(message=result.message)


@router.post("/student/login", summary="Student login")
def student_login(req: StudentLoginRequest, auth: AuthManagerDep) -> dict:
    try:
        student = auth.login_student(req.student_id, req.password)
    except AttendanceTrackerError as e:
        return fail(e.message)
    return ok(
        student={"id": student.id, "student_id": student.student_id, "name": student.name}
    )


@router.post("/student/change-password", summary="Change student password")
def change_password(req: ChangePasswordRequest, auth: AuthManagerDep) -> dict:
    try:
        auth.change_student_password(req.student_id, req.old_password, req.new_password)
    except AttendanceTrackerError as e:
        return fail(e.message)
    return ok(message="Password updated successfully!")


@router.post("/student/enroll-course", summary="Enroll in a course")
def enroll_course(req: EnrollRequest, enrollments: EnrollmentManagerDep) -> dict:
    """Enroll the student in a course.

    Args:
        req: Request with the student's internal ID and the course code.
        enrollments: Injected EnrollmentManager instance.

    Returns:
        Dictionary with success flag, message and the enrolled course.
    """
    try:
        course = enrollments.enroll(req.student_db_id, req.course_code)
    except AttendanceTrackerError as e:
        return fail(e.message)
    return ok(
        message=f"Successfully enrolled in {course.name}. Your lecturer is {course.lecturer}.",
        enrolledCourse={"code": course.code, "name": course.name, "lecturer": course.lecturer},
    )


@router.get("/student/enrollments/{student_db_id}", summary="List student enrollments")
def list_enrollments(student_db_id: int, enrollments: EnrollmentManagerDep) -> dict:
    return ok(enrollments=enrollments.list_for_student(student_db_id))
