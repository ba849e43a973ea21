# tests/conftest.py
import os
import tempfile

# Must be set before anything imports institute.core.config
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="institute_uploads_")
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

from institute.core.database import SessionLocal, create_database_tables, drop_database_tables, get_db
from institute.main import app
from institute.models.course import Course
from institute.models.student import Student


@pytest.fixture
def db():
    create_database_tables()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        drop_database_tables()


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_student(db):
    counter = {"n": 0}

    def _make(**fields):
        counter["n"] += 1
        fields.setdefault("enrollment_no", f"ENR{counter['n']:04d}")
        fields.setdefault("password", "secret")
        fields.setdefault("name", f"Student {counter['n']}")
        student = Student(**fields)
        db.add(student)
        db.commit()
        db.refresh(student)
        return student

    return _make


@pytest.fixture
def make_course(db):
    def _make(course_name="DCA", fees=6000, **fields):
        course = Course(course_name=course_name, fees=fees, subjects=fields.pop("subjects", []), **fields)
        db.add(course)
        db.commit()
        db.refresh(course)
        return course

    return _make
