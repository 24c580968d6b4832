import os

# Must be set before anything under app/ reads the settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret"

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.core.security import create_access_token
from app.db.base import Base
from app.db.database import SessionLocal, engine
from app.models.course import Course
from app.models.enrollment import Enrollment, EnrollmentStatus
from app.models.grade import Grade

PROFESSOR_ID = 1


def auth_header(user_id: int, role: str) -> dict:
    token = create_access_token({"sub": str(user_id), "role": role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(autouse=True)
def fresh_tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def professor_headers():
    return auth_header(PROFESSOR_ID, "professor")


@pytest.fixture
def student_headers():
    def make(student_id: int) -> dict:
        return auth_header(student_id, "student")
    return make


@pytest.fixture
def course_factory(db):
    def make(course_code="CS101", course_name="Intro to Programming", semester="Fall 2026", credits=3):
        course = Course(
            course_code=course_code,
            course_name=course_name,
            semester=semester,
            credits=credits,
            professor_id=PROFESSOR_ID,
        )
        db.add(course)
        db.commit()
        db.refresh(course)
        return course
    return make


@pytest.fixture
def course(course_factory):
    return course_factory()


@pytest.fixture
def enroll(db):
    def make(course_id: int, student_id: int, status=EnrollmentStatus.active):
        enrollment = Enrollment(course_id=course_id, student_id=student_id, status=status)
        db.add(enrollment)
        db.commit()
        return enrollment
    return make


@pytest.fixture
def add_grade(db):
    def make(course_id, student_id, assessment_type, score, max_score=100, assessment_id=None):
        grade = Grade(
            course_id=course_id,
            student_id=student_id,
            assessment_type=assessment_type,
            assessment_id=assessment_id,
            score=score,
            max_score=max_score,
        )
        db.add(grade)
        db.commit()
        db.refresh(grade)
        return grade
    return make
