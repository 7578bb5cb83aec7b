import pytest

from core.exceptions import ConflictError, InvalidError, NotFoundError
from core.security import BcryptCredentialVerifier
from models.attendance_code import AttendanceCodeModel
from models.attendance_record import AttendanceRecordModel
from models.course import CourseModel
from models.enrollment import EnrollmentModel
from models.lecturer import LecturerModel
from models.student import StudentModel
from utils.code_issuer import CodeIssuer
from utils.directory_manager import (
    DirectoryManager,
    default_student_password,
    next_student_id,
)
from utils.enrollment_manager import EnrollmentManager
from utils.redemption_engine import RedemptionEngine


@pytest.mark.parametrize(
    "existing,expected",
    [
        ([], "S-001"),
        (["S-001"], "S-002"),
        (["S-001", "S-002", "S-007"], "S-008"),
        (["S-009", "S-010"], "S-011"),
        (["S-999"], "S-1000"),
        (["S-1000", "S-999"], "S-1001"),
        (["S-abc", "X-005", "S-004"], "S-005"),
    ],
)
def test_next_student_id(existing, expected):
    assert next_student_id(existing) == expected


def test_default_student_password_is_reversed_id():
    assert default_student_password("S-001") == "100-S"


def test_add_student_on_empty_table(db):
    directory = DirectoryManager(db)

    first = directory.add_student("Carol White")
    second = directory.add_student("  Dan Brown  ")

    assert first.student_id == "S-001"
    assert first.password == "100-S"
    assert second.student_id == "S-002"
    assert second.name == "Dan Brown"


def test_add_student_continues_after_seed(seeded_db):
    model = DirectoryManager(seeded_db).add_student("Carol White")
    assert model.student_id == "S-003"


def test_add_student_requires_name(seeded_db):
    with pytest.raises(InvalidError, match="Student Name is required."):
        DirectoryManager(seeded_db).add_student("   ")


def test_add_student_rejects_duplicate_name(seeded_db):
    with pytest.raises(ConflictError):
        DirectoryManager(seeded_db).add_student("Alice Johnson")


def test_add_student_with_bcrypt_hashes_password(db):
    verifier = BcryptCredentialVerifier(rounds=4)
    model = DirectoryManager(db, verifier=verifier).add_student("Carol White")

    assert model.password != "100-S"
    assert verifier.verify("100-S", model.password)


def test_rename_student(seeded_db, student_db_id):
    directory = DirectoryManager(seeded_db)
    directory.rename_student(student_db_id("S-001"), "Alice Cooper")
    assert directory.get_student(student_db_id("S-001")).name == "Alice Cooper"

    with pytest.raises(NotFoundError):
        directory.rename_student(9999, "Nobody")
    with pytest.raises(InvalidError):
        directory.rename_student(student_db_id("S-001"), "")


def _attend(db, clock, lecturer_id, student_db_id, public_id, course_code, owner):
    EnrollmentManager(db).enroll(student_db_id(public_id), course_code)
    code = CodeIssuer(db, clock=clock).issue_code(course_code, lecturer_id(owner))
    assert RedemptionEngine(db, clock=clock).redeem(public_id, course_code, code.code).accepted


def test_delete_student_removes_dependents(seeded_db, clock, lecturer_id, student_db_id):
    _attend(seeded_db, clock, lecturer_id, student_db_id, "S-001", "OSD-001", "nur")
    _attend(seeded_db, clock, lecturer_id, student_db_id, "S-002", "OSD-001", "nur")
    alice = student_db_id("S-001")

    DirectoryManager(seeded_db).delete_student("s-001")

    assert seeded_db.query(StudentModel).filter_by(student_id="S-001").first() is None
    assert seeded_db.query(EnrollmentModel).filter_by(student_id=alice).count() == 0
    assert seeded_db.query(AttendanceRecordModel).filter_by(student_id=alice).count() == 0
    assert seeded_db.query(AttendanceRecordModel).count() == 1


def test_delete_unknown_student(seeded_db):
    with pytest.raises(NotFoundError):
        DirectoryManager(seeded_db).delete_student("S-404")


def test_delete_course_removes_dependents(seeded_db, clock, lecturer_id, student_db_id):
    _attend(seeded_db, clock, lecturer_id, student_db_id, "S-001", "OSD-001", "nur")
    _attend(seeded_db, clock, lecturer_id, student_db_id, "S-001", "FLA-002", "rikip")

    DirectoryManager(seeded_db).delete_course("osd-001")

    assert seeded_db.query(CourseModel).filter_by(code="OSD-001").first() is None
    assert seeded_db.query(AttendanceCodeModel).count() == 1
    assert seeded_db.query(AttendanceRecordModel).count() == 1
    assert seeded_db.query(EnrollmentModel).count() == 1


def test_delete_lecturer_removes_courses(seeded_db, clock, lecturer_id, student_db_id):
    _attend(seeded_db, clock, lecturer_id, student_db_id, "S-001", "OSD-001", "nur")

    DirectoryManager(seeded_db).delete_lecturer(lecturer_id("nur"))

    assert seeded_db.query(LecturerModel).filter_by(username="nur").first() is None
    assert seeded_db.query(CourseModel).filter_by(code="OSD-001").first() is None
    assert seeded_db.query(AttendanceCodeModel).count() == 0
    assert seeded_db.query(AttendanceRecordModel).count() == 0
    assert seeded_db.query(EnrollmentModel).count() == 0
    assert seeded_db.query(CourseModel).count() == 3


def test_delete_admin_is_refused(seeded_db, lecturer_id):
    with pytest.raises(InvalidError, match="Cannot delete the main administrator account."):
        DirectoryManager(seeded_db).delete_lecturer(lecturer_id("admin"))


def test_delete_unknown_lecturer(seeded_db):
    with pytest.raises(NotFoundError):
        DirectoryManager(seeded_db).delete_lecturer(9999)


def test_add_lecturer_normalizes_username(seeded_db):
    directory = DirectoryManager(seeded_db)
    model = directory.add_lecturer("  Grace ", "secret", " Dr Grace ")

    assert model.username == "grace"
    assert model.name == "Dr Grace"
    with pytest.raises(ConflictError):
        directory.add_lecturer("GRACE", "other", "Someone")
    with pytest.raises(InvalidError):
        directory.add_lecturer("", "secret", "Nobody")


def test_list_lecturers_excludes_admin(seeded_db):
    lecturers = DirectoryManager(seeded_db).list_lecturers_with_courses()
    assert [lecturer.username for lecturer in lecturers] == ["nur", "rikip", "fadhil", "mark"]
    assert [course.code for course in lecturers[0].courses] == ["OSD-001"]


def test_add_course_and_assign_lecturer(seeded_db, lecturer_id):
    directory = DirectoryManager(seeded_db)
    course = directory.add_course("art-005", "Art History")
    assert course.code == "ART-005"
    assert course.lecturer_id is None

    directory.assign_lecturer("ART-005", lecturer_id("mark"))
    assert directory.get_course("ART-005").lecturer_id == lecturer_id("mark")

    with pytest.raises(ConflictError):
        directory.add_course("ART-005", "Duplicate")
    with pytest.raises(NotFoundError, match="New lecturer not found."):
        directory.assign_lecturer("ART-005", 9999)
    with pytest.raises(NotFoundError, match="Course not found."):
        directory.assign_lecturer("NOPE-000", lecturer_id("mark"))
    with pytest.raises(NotFoundError):
        directory.add_course("BIO-006", "Biology", lecturer_id=9999)
