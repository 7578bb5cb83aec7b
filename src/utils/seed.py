"""Initial roster written into an empty database."""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from core.security import CredentialVerifier, PlaintextCredentialVerifier
from models.course import CourseModel
from models.lecturer import LecturerModel
from models.student import StudentModel
from utils.directory_manager import default_student_password

logger = logging.getLogger(__name__)

DEFAULT_LECTURER_PASSWORD = "password"

# (username, name)
SEED_LECTURERS = [
    ("nur", "Sir Nur"),
    ("rikip", "Sir Rikip"),
    ("fadhil", "Sir Fadhil"),
    ("mark", "Sir Mark"),
    ("admin", "Administrator"),
]

# (code, name, lecturer username)
SEED_COURSES = [
    ("OSD-001", "Operating System Design", "nur"),
    ("FLA-002", "Formal Language and Automata", "rikip"),
    ("DPS-003", "Data Processing and Storage", "fadhil"),
    ("PE-004", "Physical Education", "mark"),
]

# (public id, name)
SEED_STUDENTS = [
    ("S-001", "Alice Johnson"),
    ("S-002", "Bob Smith"),
]


def seed_initial_data(db: Session, verifier: Optional[CredentialVerifier] = None) -> None:
    """Seed lecturers, courses and students into tables that are still empty.

    Each table is checked on its own, so a database with lecturers but no
    students only receives the students.
    """
    verifier = verifier or PlaintextCredentialVerifier()

    if db.query(LecturerModel.id).first() is None:
        logger.info("Seeding initial lecturer data...")
        for username, name in SEED_LECTURERS:
            db.add(
                LecturerModel(
                    username=username,
                    password=verifier.encode(DEFAULT_LECTURER_PASSWORD),
                    name=name,
                )
            )
        db.commit()

    if db.query(CourseModel.id).first() is None:
        logger.info("Seeding initial course data...")
        lecturer_ids = {
            model.username: model.id for model in db.query(LecturerModel).all()
        }
        for code, name, username in SEED_COURSES:
            db.add(CourseModel(code=code, name=name, lecturer_id=lecturer_ids.get(username)))
        db.commit()

    if db.query(StudentModel.id).first() is None:
        logger.info("Seeding initial student data...")
        for student_id, name in SEED_STUDENTS:
            db.add(
                StudentModel(
                    student_id=student_id,
                    name=name,
                    password=verifier.encode(default_student_password(student_id)),
                )
            )
        db.commit()
