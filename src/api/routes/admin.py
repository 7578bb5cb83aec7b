"""Admin routes: roster of students, lecturers and course assignments."""

from fastapi import APIRouter

from api.routes.responses import fail, ok
from core.dependencies import DirectoryManagerDep, EnrollmentManagerDep
from core.exceptions import AttendanceTrackerError
from schemas.directory import (
    AddCourseRequest,
    AddLecturerRequest,
    AddStudentRequest,
    AssignLecturerRequest,
    RenameStudentRequest,
)
from utils.directory_manager import default_student_password

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.get("/students", summary="List all students")
def list_students(directory: DirectoryManagerDep) -> dict:
    students = [
        {"id": model.id, "student_id": model.student_id, "name": model.name}
        for model in directory.list_students()
    ]
    return ok(students=students)


@router.post("/add-student", summary="Add a student with an auto-assigned ID")
def add_student(req: AddStudentRequest, directory: DirectoryManagerDep) -> dict:
    """Add a student.

    The public ID continues the highest existing 'S-NNN' number and the
    initial password is that ID reversed.

    Args:
        req: Request with the student's name.
        directory: Injected DirectoryManager instance.

    Returns:
        Dictionary with success flag, message and the new student.
    """
    try:
        model = directory.add_student(req.student_name)
    except AttendanceTrackerError as e:
        return fail(e.message)
    password = default_student_password(model.student_id)
    return ok(
        message=(
            f"Student '{model.name}' added successfully with ID: {model.student_id} "
            f"and password: {password}."
        ),
        student={"id": model.id, "student_id": model.student_id, "name": model.name},
    )


@router.put("/student/{student_db_id}", summary="Rename a student")
def rename_student(
    student_db_id: int, req: RenameStudentRequest, directory: DirectoryManagerDep
) -> dict:
    try:
        directory.rename_student(student_db_id, req.new_name)
    except AttendanceTrackerError as e:
        return fail(e.message)
    return ok(message="Student name updated successfully.")


@router.delete("/student/{student_id}", summary="Delete a student and related records")
def delete_student(student_id: str, directory: DirectoryManagerDep) -> dict:
    try:
        directory.delete_student(student_id)
    except AttendanceTrackerError as e:
        return fail(e.message)
    return ok(message=f"Student {student_id} and all related records deleted successfully.")


@router.get("/lecturers-courses", summary="List lecturers with their courses")
def lecturers_courses(directory: DirectoryManagerDep) -> dict:
    lecturers = [
        {
            "id": lecturer.id,
            "name": lecturer.name,
            "username": lecturer.username,
            "courses": [
                {"courseDbId": course.id, "code": course.code, "courseName": course.name}
                for course in lecturer.courses
            ],
        }
        for lecturer in directory.list_lecturers_with_courses()
    ]
    return ok(lecturers=lecturers)


@router.post("/add-lecturer", summary="Add a lecturer")
def add_lecturer(req: AddLecturerRequest, directory: DirectoryManagerDep) -> dict:
    try:
        model = directory.add_lecturer(req.username, req.password, req.name)
    except AttendanceTrackerError as e:
        return fail(e.message)
    return ok(
        message=f"Lecturer '{model.name}' added successfully with username '{model.username}'."
    )


@router.delete("/lecturer/{lecturer_id}", summary="Delete a lecturer and their courses")
def delete_lecturer(lecturer_id: int, directory: DirectoryManagerDep) -> dict:
    try:
        directory.delete_lecturer(lecturer_id)
    except AttendanceTrackerError as e:
        return fail(e.message)
    return ok(message="Lecturer and associated courses/records deleted successfully.")


@router.post("/add-course", summary="Add a course")
def add_course(req: AddCourseRequest, directory: DirectoryManagerDep) -> dict:
    try:
        model = directory.add_course(req.code, req.name, req.lecturer_id)
    except AttendanceTrackerError as e:
        return fail(e.message)
    return ok(
        message=f"Course {model.code} added successfully.",
        course={"id": model.id, "code": model.code, "name": model.name},
    )


@router.put("/course/{course_code}/assign-lecturer", summary="Assign a course to a lecturer")
def assign_lecturer(
    course_code: str, req: AssignLecturerRequest, directory: DirectoryManagerDep
) -> dict:
    try:
        course = directory.assign_lecturer(course_code, req.new_lecturer_id)
    except AttendanceTrackerError as e:
        return fail(e.message)
    return ok(message=f"Course {course.code} successfully assigned to new lecturer.")


@router.delete("/course/{course_code}", summary="Delete a course and related records")
def delete_course(course_code: str, directory: DirectoryManagerDep) -> dict:
    try:
        directory.delete_course(course_code)
    except AttendanceTrackerError as e:
        return fail(e.message)
    return ok(
        message=f"Course {course_code.upper()} and all related records deleted successfully."
    )


@router.get("/all-enrollments", summary="List every enrollment")
def all_enrollments(enrollments: EnrollmentManagerDep) -> dict:
    return ok(enrollments=enrollments.list_all())
