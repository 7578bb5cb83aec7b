import pathlib
import sys

import pytest

SYS_ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC_PATH = SYS_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from fastapi.testclient import TestClient

from app import create_app
from core.database import Database
from core.dependencies import get_clock
from models.course import CourseModel
from models.lecturer import LecturerModel
from models.student import StudentModel
from utils.seed import seed_initial_data

T0 = 1_700_000_000_000
MINUTE_MS = 60 * 1000


class FakeClock:
    """Millisecond clock the tests move by hand."""

    def __init__(self, now: int = T0):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms

    def set(self, now: int) -> None:
        self.now = now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def database():
    database = Database("sqlite://")
    database.init_db()
    yield database
    database.dispose()


@pytest.fixture
def db(database):
    with database.session() as session:
        yield session


@pytest.fixture
def seeded_db(db):
    seed_initial_data(db)
    return db


@pytest.fixture
def lecturer_id(seeded_db):
    """Return a lookup of internal lecturer IDs by username."""

    def lookup(username: str) -> int:
        return seeded_db.query(LecturerModel).filter_by(username=username).one().id

    return lookup


@pytest.fixture
def student_db_id(seeded_db):
    def lookup(public_id: str) -> int:
        return seeded_db.query(StudentModel).filter_by(student_id=public_id).one().id

    return lookup


@pytest.fixture
def course_db_id(seeded_db):
    def lookup(code: str) -> int:
        return seeded_db.query(CourseModel).filter_by(code=code).one().id

    return lookup


@pytest.fixture
def app(database, clock):
    application = create_app(database=database, seed=True)
    application.dependency_overrides[get_clock] = lambda: clock
    return application


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
