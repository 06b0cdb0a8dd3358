from datetime import datetime, timedelta, timezone

import pytest
from flask import g

from config import TestConfig
from gradebook import create_app
from gradebook.extensions import db
from gradebook.models import Course, Enrollment, Student, Teacher, User

BASE_TIME = datetime(2025, 1, 6, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    # The app fixture keeps one app context (and so one ``g``) open for the
    # whole test; drop Flask-Login's cached user so each request resolves
    # its own bearer token.
    @app.teardown_request
    def _forget_login_user(exc):
        g.pop("_login_user", None)

    return app.test_client()


@pytest.fixture
def seed(app):
    """Two teachers, two courses, three students enrolled in CS101."""
    t1 = Teacher(teacher_no="T001", name="Grace Hopper", dept="CS")
    t2 = Teacher(teacher_no="T002", name="Alan Kay", dept="CS")
    cs101 = Course(code="CS101", name="Programming", credits=4, faculty=t1,
                   max_internal_marks=40, max_external_marks=60)
    ma201 = Course(code="MA201", name="Linear Algebra", credits=2, faculty=t2,
                   max_internal_marks=40, max_external_marks=60)
    alice = Student(student_no="S001", name="Alice", email="alice@example.edu")
    bob = Student(student_no="S002", name="Bob", email="bob@example.edu")
    carol = Student(student_no="S003", name="Carol", email="carol@example.edu")

    enrollments = [
        Enrollment(student=s, course=cs101, enrolled_at=BASE_TIME + timedelta(minutes=i))
        for i, s in enumerate([alice, bob, carol])
    ]
    enrollments.append(Enrollment(student=alice, course=ma201,
                                  enrolled_at=BASE_TIME + timedelta(minutes=10)))

    users = [
        User(username="hopper", role="teacher", api_token="teacher-token", teacher=t1),
        User(username="kay", role="teacher", api_token="other-teacher-token", teacher=t2),
        User(username="S001", role="student", api_token="alice-token", student=alice),
        User(username="S002", role="student", api_token="bob-token", student=bob),
        User(username="root", role="admin", api_token="admin-token"),
    ]
    db.session.add_all([t1, t2, cs101, ma201, alice, bob, carol, *enrollments, *users])
    db.session.commit()

    return {
        "teacher": t1.id, "other_teacher": t2.id,
        "course": cs101.id, "other_course": ma201.id,
        "alice": alice.id, "bob": bob.id, "carol": carol.id,
        "enroll_alice": enrollments[0].id, "enroll_bob": enrollments[1].id,
        "enroll_carol": enrollments[2].id, "enroll_alice_ma201": enrollments[3].id,
    }


@pytest.fixture
def headers():
    def make(token):
        return {"Authorization": f"Bearer {token}"}
    return make
