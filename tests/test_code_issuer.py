import pytest

from config import CODE_ALPHABET, CODE_LENGTH, CODE_VALIDITY_MS
from conftest import MINUTE_MS, T0
from core.exceptions import NotFoundError, UnauthorizedError
from models.attendance_code import AttendanceCodeModel
from utils.code_issuer import CodeIssuer, generate_attendance_code


def test_generate_attendance_code_shape():
    for _ in range(50):
        code = generate_attendance_code()
        assert len(code) == CODE_LENGTH
        assert set(code) <= set(CODE_ALPHABET)
        assert code == code.upper()


def test_issue_code_stores_row_for_owner(seeded_db, lecturer_id, clock):
    issuer = CodeIssuer(seeded_db, clock=clock)

    model = issuer.issue_code("OSD-001", lecturer_id("nur"))

    assert len(model.code) == CODE_LENGTH
    assert model.issued_at == T0
    assert seeded_db.query(AttendanceCodeModel).count() == 1


def test_issue_code_accepts_lowercase_course_code(seeded_db, lecturer_id, clock):
    issuer = CodeIssuer(seeded_db, clock=clock)
    model = issuer.issue_code("osd-001", lecturer_id("nur"), code="ab12cd")
    assert model.code == "AB12CD"


@pytest.mark.parametrize("username", ["rikip", "fadhil", "mark", "admin"])
def test_issue_code_rejects_non_owner_without_side_effect(
    seeded_db, lecturer_id, clock, username
):
    issuer = CodeIssuer(seeded_db, clock=clock)

    with pytest.raises(UnauthorizedError):
        issuer.issue_code("OSD-001", lecturer_id(username))

    assert seeded_db.query(AttendanceCodeModel).count() == 0


def test_issue_code_rejects_unknown_course(seeded_db, lecturer_id, clock):
    issuer = CodeIssuer(seeded_db, clock=clock)
    with pytest.raises(UnauthorizedError) as exc_info:
        issuer.issue_code("XYZ-999", lecturer_id("nur"))
    assert exc_info.value.message == "Unauthorized access to this course or course not found"


def test_reissue_keeps_history_and_latest_wins(seeded_db, lecturer_id, clock):
    issuer = CodeIssuer(seeded_db, clock=clock)
    issuer.issue_code("OSD-001", lecturer_id("nur"), code="FIRST1")
    clock.advance(5 * MINUTE_MS)
    issuer.issue_code("OSD-001", lecturer_id("nur"), code="SECND2")

    assert seeded_db.query(AttendanceCodeModel).count() == 2
    assert issuer.get_current_code("OSD-001").code == "SECND2"


def test_same_millisecond_reissue_prefers_later_insert(seeded_db, lecturer_id, clock):
    issuer = CodeIssuer(seeded_db, clock=clock)
    issuer.issue_code("OSD-001", lecturer_id("nur"), code="AAAAAA")
    issuer.issue_code("OSD-001", lecturer_id("nur"), code="BBBBBB")

    assert issuer.get_current_code("OSD-001").code == "BBBBBB"


def test_current_code_is_per_course(seeded_db, lecturer_id, clock):
    issuer = CodeIssuer(seeded_db, clock=clock)
    issuer.issue_code("OSD-001", lecturer_id("nur"), code="OSDOSD")
    issuer.issue_code("FLA-002", lecturer_id("rikip"), code="FLAFLA")

    assert issuer.get_current_code("OSD-001").code == "OSDOSD"
    assert issuer.get_current_code("FLA-002").code == "FLAFLA"
    assert issuer.get_current_code("DPS-003") is None


def test_current_code_expires_after_validity_window(seeded_db, lecturer_id, clock):
    issuer = CodeIssuer(seeded_db, clock=clock)
    issuer.issue_code("OSD-001", lecturer_id("nur"), code="AB12CD")

    clock.set(T0 + CODE_VALIDITY_MS)
    assert issuer.get_current_code("OSD-001").code == "AB12CD"

    clock.set(T0 + CODE_VALIDITY_MS + 1)
    assert issuer.get_current_code("OSD-001") is None


def test_current_code_unknown_course(seeded_db, clock):
    issuer = CodeIssuer(seeded_db, clock=clock)
    with pytest.raises(NotFoundError):
        issuer.get_current_code("NOPE-000")
