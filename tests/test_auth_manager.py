import pytest

from core.exceptions import NotFoundError, UnauthorizedError
from core.security import (
    BcryptCredentialVerifier,
    PlaintextCredentialVerifier,
    create_credential_verifier,
)
from utils.auth_manager import AuthManager
from utils.seed import seed_initial_data


def test_plaintext_verifier():
    verifier = PlaintextCredentialVerifier()
    assert verifier.encode("100-S") == "100-S"
    assert verifier.verify("100-S", "100-S")
    assert not verifier.verify("100-s", "100-S")


def test_bcrypt_verifier():
    verifier = BcryptCredentialVerifier(rounds=4)
    stored = verifier.encode("password")
    assert stored != "password"
    assert verifier.verify("password", stored)
    assert not verifier.verify("wrong", stored)
    assert not verifier.verify("password", "not-a-bcrypt-hash")


def test_create_credential_verifier():
    assert isinstance(create_credential_verifier("plaintext"), PlaintextCredentialVerifier)
    assert isinstance(create_credential_verifier("bcrypt"), BcryptCredentialVerifier)
    with pytest.raises(ValueError):
        create_credential_verifier("md5")


def test_student_login(seeded_db):
    auth = AuthManager(seeded_db)

    student = auth.login_student("s-001", "100-S")
    assert student.name == "Alice Johnson"

    with pytest.raises(UnauthorizedError, match="Invalid Student ID or password."):
        auth.login_student("S-001", "wrong")
    with pytest.raises(UnauthorizedError, match="Invalid Student ID or password."):
        auth.login_student("S-404", "404-S")


def test_change_student_password(seeded_db):
    auth = AuthManager(seeded_db)

    with pytest.raises(UnauthorizedError, match="Incorrect old password."):
        auth.change_student_password("S-001", "wrong", "new-secret")
    with pytest.raises(NotFoundError):
        auth.change_student_password("S-404", "x", "y")

    auth.change_student_password("S-001", "100-S", "new-secret")
    assert auth.login_student("S-001", "new-secret").student_id == "S-001"
    with pytest.raises(UnauthorizedError):
        auth.login_student("S-001", "100-S")


def test_lecturer_login_lists_own_courses(seeded_db):
    user = AuthManager(seeded_db).login_lecturer("NUR", "password")

    assert user["name"] == "Sir Nur"
    assert [course["code"] for course in user["courses"]] == ["OSD-001"]


def test_admin_login_has_no_courses(seeded_db):
    user = AuthManager(seeded_db).login_lecturer("admin", "password")
    assert user["username"] == "admin"
    assert user["courses"] == []


def test_lecturer_login_rejects_bad_password(seeded_db):
    with pytest.raises(UnauthorizedError, match="Invalid credentials"):
        AuthManager(seeded_db).login_lecturer("nur", "nope")


def test_bcrypt_seeded_database_logs_in(db):
    verifier = BcryptCredentialVerifier(rounds=4)
    seed_initial_data(db, verifier)
    auth = AuthManager(db, verifier=verifier)

    assert auth.login_student("S-002", "200-S").name == "Bob Smith"
    assert auth.login_lecturer("mark", "password")["name"] == "Sir Mark"
