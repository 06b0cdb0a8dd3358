"""Enrollment grades: upsert, scheme recompute and course aggregation.

``derive_grade`` is the only place a stored total and letter are computed.
Rollups and gradebook rows derive percentages from the course's current
scheme at read time, so they always reflect the latest maxima.
"""
import logging
import math

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.exc import StaleDataError

from ..extensions import db
from ..errors import ConflictError, NotFoundError, ValidationError
from ..models import Course, Enrollment, Grade
from .fields import number
from .grading import (
    grade_points, is_passing, letter_for_enrollment_percentage,
    percentage_of_scheme, round_half_up,
)
from .reports import grade_distribution_histogram

log = logging.getLogger(__name__)

GRADEBOOK_SORTS = ("name", "highest", "lowest")
PASS_MARK = 40


def derive_grade(course, internal_marks, external_marks):
    total = internal_marks + external_marks
    percentage = percentage_of_scheme(total, course.max_internal_marks, course.max_external_marks)
    return total, percentage, letter_for_enrollment_percentage(percentage)


def course_percentage(course, grade):
    return percentage_of_scheme(grade.total, course.max_internal_marks, course.max_external_marks)


def upsert_grade(enrollment_id, internal_marks, external_marks, revision=None):
    """Create or update the single grade of an enrollment.

    Returns ``(grade, percentage)``. A non-None ``revision`` must match the
    stored one, otherwise the write is rejected as stale.
    """
    internal_marks = number(internal_marks, "internalMarks", minimum=0)
    external_marks = number(external_marks, "externalMarks", minimum=0)
    if not math.isfinite(internal_marks + external_marks):
        raise ValidationError("internalMarks + externalMarks is too large")

    en = db.session.get(Enrollment, enrollment_id)
    if not en:
        raise NotFoundError("Enrollment does not exist")

    g = Grade.query.filter_by(enrollment_id=enrollment_id).one_or_none()
    if g is not None and revision is not None and revision != g.revision:
        log.warning("stale grade write for enrollment %s (sent %s, stored %s)",
                    enrollment_id, revision, g.revision)
        raise ConflictError("Grade was changed by someone else; reload and try again")
    if g is None:
        g = Grade(enrollment_id=enrollment_id)
        db.session.add(g)

    total, percentage, letter = derive_grade(en.course, internal_marks, external_marks)
    g.internal_marks = internal_marks
    g.external_marks = external_marks
    g.total = total
    g.grade = letter
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        log.warning("duplicate grade for enrollment %s rejected by storage", enrollment_id)
        raise ConflictError("A grade already exists for this enrollment") from None
    except StaleDataError:
        db.session.rollback()
        raise ConflictError("Grade was changed by someone else; reload and try again") from None

    log.info("grade saved for enrollment %s: total=%s pct=%s letter=%s",
             enrollment_id, total, percentage, letter)
    return g, percentage


def _course_grades(course_id):
    return (Grade.query.join(Enrollment)
            .filter(Enrollment.course_id == course_id)
            .order_by(Enrollment.enrolled_at, Enrollment.id)
            .all())


def _get_course(course_id):
    course = db.session.get(Course, course_id)
    if not course:
        raise NotFoundError("Course does not exist")
    return course


def recompute_course_grades(course):
    """Preview letters under the course's current scheme without writing.

    Every grade is recomputed, whether or not its letter changes; rows whose
    stored letter differs are marked ``needsSave``.
    """
    preview = []
    for g in _course_grades(course.id):
        _, percentage, letter = derive_grade(course, g.internal_marks, g.external_marks)
        preview.append({
            "gradeId": g.id,
            "enrollmentId": g.enrollment_id,
            "studentId": g.enrollment.student_id,
            "total": g.total,
            "percentage": percentage,
            "storedGrade": g.grade,
            "grade": letter,
            "needsSave": letter != g.grade,
        })
    return preview


def commit_scheme_grades(course_id):
    """Persist the letters previewed by ``recompute_course_grades``."""
    course = _get_course(course_id)
    grades = _course_grades(course_id)
    changed = 0
    for g in grades:
        _, _, letter = derive_grade(course, g.internal_marks, g.external_marks)
        if letter != g.grade:
            g.grade = letter
            changed += 1
    try:
        db.session.commit()
    except StaleDataError:
        db.session.rollback()
        raise ConflictError("Grades changed while saving; reload and try again") from None
    log.info("applied scheme letters for course %s: %d of %d grades changed",
             course_id, changed, len(grades))
    return grades


def course_rollup(course_id):
    course = _get_course(course_id)
    pcts = [course_percentage(course, g) for g in _course_grades(course_id)]
    distribution = grade_distribution_histogram(
        letter_for_enrollment_percentage(p) for p in pcts)
    return {
        "courseId": course_id,
        "count": len(pcts),
        "avgPercentage": round_half_up(sum(pcts) / len(pcts)) if pcts else 0,
        "highest": max(pcts) if pcts else 0,
        "lowest": min(pcts) if pcts else 0,
        "distribution": distribution,
    }


def course_gradebook(course_id, sort="name", query=None):
    """One row per enrolled student, graded or not."""
    if sort not in GRADEBOOK_SORTS:
        raise ValidationError(f"sort must be one of {', '.join(GRADEBOOK_SORTS)}")
    course = _get_course(course_id)
    enrollments = (Enrollment.query
                   .options(selectinload(Enrollment.student), selectinload(Enrollment.grade))
                   .filter_by(course_id=course_id)
                   .order_by(Enrollment.enrolled_at, Enrollment.id)
                   .all())

    rows = []
    for en in enrollments:
        g = en.grade
        row = {
            "enrollmentId": en.id,
            "student": en.student.to_dict(),
            "gradeId": None, "revision": None,
            "internalMarks": 0, "externalMarks": 0, "total": 0,
            "percentage": None, "grade": None, "derivedGrade": None,
            "needsSave": False,
        }
        if g is not None:
            _, percentage, letter = derive_grade(course, g.internal_marks, g.external_marks)
            row.update({
                "gradeId": g.id, "revision": g.revision,
                "internalMarks": g.internal_marks, "externalMarks": g.external_marks,
                "total": g.total, "percentage": percentage,
                "grade": g.grade, "derivedGrade": letter,
                "needsSave": letter != g.grade,
            })
        rows.append(row)

    if query:
        needle = query.lower()
        rows = [r for r in rows if needle in (r["student"]["name"] or "").lower()]
    # sorted() is stable, ties keep fetch order
    if sort == "highest":
        rows = sorted(rows, key=lambda r: r["percentage"] or 0, reverse=True)
    elif sort == "lowest":
        rows = sorted(rows, key=lambda r: r["percentage"] or 0)
    else:
        rows = sorted(rows, key=lambda r: (r["student"]["name"] or "").lower())

    return {"course": course.to_dict(), "rows": rows}


def student_results(student_id):
    enrollments = (Enrollment.query
                   .options(selectinload(Enrollment.course), selectinload(Enrollment.grade))
                   .filter_by(student_id=student_id)
                   .order_by(Enrollment.enrolled_at, Enrollment.id)
                   .all())
    results = []
    total_credits = 0
    total_points = 0
    has_failed = False
    for en in enrollments:
        g, course = en.grade, en.course
        if g is None:
            continue
        letter = g.grade or letter_for_enrollment_percentage(course_percentage(course, g))
        credits = course.credits or 0
        total_credits += credits
        total_points += grade_points(letter) * credits
        status = "PASS" if g.total >= PASS_MARK or is_passing(letter) else "FAIL"
        has_failed = has_failed or status == "FAIL"
        results.append({
            "course": course.to_dict(),
            "grade": g.to_dict(),
            "percentage": course_percentage(course, g),
            "letter": letter,
            "status": status,
        })
    sgpa = round(total_points / total_credits, 2) if total_credits else 0.0
    return {"studentId": student_id, "results": results, "totalCredits": total_credits,
            "totalPoints": total_points, "hasFailed": has_failed, "sgpa": sgpa}
