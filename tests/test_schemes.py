import pytest

from gradebook.errors import NotFoundError, ValidationError
from gradebook.extensions import db
from gradebook.models import Course, Grade
from gradebook.services import grades, schemes


def test_update_scheme_recomputes_even_when_letter_unchanged(seed):
    grades.upsert_grade(seed["enroll_bob"], 28, 42)
    course, preview = schemes.update_scheme(seed["course"], 50, 50)
    assert (course.max_internal_marks, course.max_external_marks) == (50, 50)
    assert len(preview) == 1
    row = preview[0]
    assert row["percentage"] == 70
    assert row["grade"] == "B"
    assert row["storedGrade"] == "B"
    assert row["needsSave"] is False


def test_update_scheme_previews_without_saving(seed):
    g, _ = grades.upsert_grade(seed["enroll_bob"], 28, 42)
    _, preview = schemes.update_scheme(seed["course"], 20, 30)
    row = preview[0]
    assert row["percentage"] == 140
    assert row["grade"] == "A+"
    assert row["needsSave"] is True

    db.session.expire_all()
    stored = db.session.get(Grade, g.id)
    assert stored.grade == "B"
    assert stored.total == 70
    assert stored.internal_marks == 28


def test_commit_scheme_grades_persists_letters_only(seed):
    g, _ = grades.upsert_grade(seed["enroll_bob"], 28, 42)
    schemes.update_scheme(seed["course"], 20, 30)
    saved = grades.commit_scheme_grades(seed["course"])
    assert [s.id for s in saved] == [g.id]

    db.session.expire_all()
    stored = db.session.get(Grade, g.id)
    assert stored.grade == "A+"
    assert stored.total == 70
    # raw marks above the new maximum are kept as entered
    assert stored.internal_marks == 28


def test_zero_scheme_gives_zero_percentage(seed):
    grades.upsert_grade(seed["enroll_bob"], 28, 42)
    _, preview = schemes.update_scheme(seed["course"], 0, 0)
    assert preview[0]["percentage"] == 0
    assert preview[0]["grade"] == "F"


@pytest.mark.parametrize("max_internal,max_external", [(-1, 60), (40, -0.5), (None, 60), ("x", 60)])
def test_invalid_scheme_rejected_and_not_persisted(seed, max_internal, max_external):
    with pytest.raises(ValidationError):
        schemes.update_scheme(seed["course"], max_internal, max_external)
    db.session.expire_all()
    course = db.session.get(Course, seed["course"])
    assert (course.max_internal_marks, course.max_external_marks) == (40, 60)


def test_update_scheme_unknown_course(seed):
    with pytest.raises(NotFoundError):
        schemes.update_scheme("missing", 40, 60)
