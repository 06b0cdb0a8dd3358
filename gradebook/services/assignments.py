"""Assignment lifecycle: post, submit, grade, review.

Per (assignment, student) the state moves NotSubmitted -> Submitted -> Graded.
A resubmission replaces the content of the one stored submission and keeps
any grading already applied; re-grading overwrites the grading fields.
"""
import logging

from flask import current_app
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.exc import StaleDataError

from ..extensions import db
from ..errors import ConflictError, NotFoundError, ValidationError
from ..models import Assignment, AssignmentSubmission, Course, Enrollment
from ..models.base import utcnow
from .fields import number, required_text, text, timestamp
from .grading import assignment_percentage, letter_for_assignment_percentage
from .reports import grade_distribution_histogram

log = logging.getLogger(__name__)

SUBMISSION_FILTERS = ("all", "submitted", "pending")


def get_assignment(assignment_id):
    a = db.session.get(Assignment, assignment_id)
    if not a:
        raise NotFoundError("Assignment does not exist")
    return a


def create_assignment(course_id, title, description=None, due_date=None,
                      total_marks=None, created_by=None):
    course_id = required_text(course_id, "courseId")
    title = required_text(title, "title")
    if total_marks is None:
        total_marks = current_app.config.get("DEFAULT_ASSIGNMENT_TOTAL_MARKS", 100)
    total_marks = number(total_marks, "totalMarks")
    if total_marks <= 0:
        raise ValidationError("totalMarks must be greater than 0")
    if not db.session.get(Course, course_id):
        raise NotFoundError("Course does not exist")

    a = Assignment(course_id=course_id, title=title, description=text(description),
                   due_date=timestamp(due_date, "dueDate"), total_marks=total_marks,
                   created_by=created_by)
    db.session.add(a)
    db.session.commit()
    log.info("assignment %s posted to course %s by %s", a.id, course_id, created_by)
    return a


def list_assignments(course_id):
    return (Assignment.query.filter_by(course_id=course_id)
            .order_by(Assignment.created_at.desc()).all())


def delete_assignment(assignment_id):
    """Delete an assignment together with all of its submissions."""
    a = get_assignment(assignment_id)
    removed = len(a.submissions)
    db.session.delete(a)
    db.session.commit()
    log.info("assignment %s deleted with %d submissions", assignment_id, removed)
    return removed


def record_submission(assignment_id, student_id, url=None, text_content=None):
    """Insert or overwrite the student's submission for an assignment.

    Returns ``(submission, created)``.
    """
    student_id = required_text(student_id, "studentId")
    url, text_content = text(url), text(text_content)
    if url is None and text_content is None:
        raise ValidationError("A submission needs a url or text")
    a = get_assignment(assignment_id)
    if not Enrollment.query.filter_by(student_id=student_id, course_id=a.course_id).first():
        raise NotFoundError("Not enrolled in this course")

    sub = AssignmentSubmission.query.filter_by(
        assignment_id=assignment_id, student_id=student_id).one_or_none()
    created = sub is None
    if created:
        sub = AssignmentSubmission(assignment_id=assignment_id, student_id=student_id)
        db.session.add(sub)
    sub.submission_url = url
    sub.submission_text = text_content
    sub.submitted_at = utcnow()
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        log.warning("duplicate submission for assignment %s student %s rejected by storage",
                    assignment_id, student_id)
        raise ConflictError("A submission for this assignment already exists") from None
    except StaleDataError:
        db.session.rollback()
        raise ConflictError("Submission changed while saving; try again") from None

    log.info("submission %s %s for assignment %s by student %s",
             sub.id, "created" if created else "replaced", assignment_id, student_id)
    return sub, created


def grade_submission(submission_id, marks_obtained, feedback=None, revision=None):
    """Set marks, feedback and graded_at on an existing submission.

    Marks outside ``[0, total_marks]`` are stored as given and reported back
    as out of range. Returns ``(submission, out_of_range)``.
    """
    marks_obtained = number(marks_obtained, "marksObtained")
    sub = db.session.get(AssignmentSubmission, submission_id)
    if not sub:
        raise NotFoundError("Submission does not exist; refresh and try again")
    if revision is not None and revision != sub.revision:
        log.warning("stale grade for submission %s (sent %s, stored %s)",
                    submission_id, revision, sub.revision)
        raise ConflictError("Submission was changed by someone else; reload and try again")

    total = sub.assignment.total_marks
    out_of_range = not (0 <= marks_obtained <= total)
    if out_of_range:
        log.warning("submission %s graded %s outside 0..%s", submission_id, marks_obtained, total)

    sub.marks_obtained = marks_obtained
    sub.feedback = text(feedback)
    sub.graded_at = utcnow()
    try:
        db.session.commit()
    except StaleDataError:
        db.session.rollback()
        raise ConflictError("Submission was changed by someone else; reload and try again") from None

    log.info("submission %s graded: %s/%s", submission_id, marks_obtained, total)
    return sub, out_of_range


def compute_submission_pipeline(total_students, submissions):
    submitted = len(submissions)
    return {
        "assigned": total_students,
        "submitted": submitted,
        "graded": sum(1 for s in submissions if s.marks_obtained is not None),
        "pending": max(0, total_students - submitted),
    }


def assignment_grade_distribution(assignment, submissions):
    letters = (
        letter_for_assignment_percentage(assignment_percentage(s.marks_obtained, assignment.total_marks))
        for s in submissions if s.marks_obtained is not None
    )
    return grade_distribution_histogram(letters)


def submission_pipeline(assignment_id):
    a = get_assignment(assignment_id)
    total_students = Enrollment.query.filter_by(course_id=a.course_id).count()
    submissions = a.submissions
    pipeline = compute_submission_pipeline(total_students, submissions)
    pipeline.update({
        "assignmentId": a.id,
        "courseId": a.course_id,
        "distribution": assignment_grade_distribution(a, submissions),
    })
    return pipeline


def list_submissions(assignment_id, status="all", query=None):
    """Review rows: every enrolled student with their submission, if any."""
    if status not in SUBMISSION_FILTERS:
        raise ValidationError(f"status must be one of {', '.join(SUBMISSION_FILTERS)}")
    a = get_assignment(assignment_id)
    enrollments = (Enrollment.query.options(selectinload(Enrollment.student))
                   .filter_by(course_id=a.course_id)
                   .order_by(Enrollment.enrolled_at, Enrollment.id).all())
    by_student = {s.student_id: s for s in a.submissions}

    rows = []
    for en in enrollments:
        stu = en.student
        sub = by_student.get(stu.id)
        if status == "submitted" and sub is None:
            continue
        if status == "pending" and sub is not None:
            continue
        if query:
            needle = query.lower()
            if needle not in (stu.name or "").lower() and needle not in (stu.student_no or "").lower():
                continue
        rows.append({
            "student": stu.to_dict(),
            "submission": sub.to_dict() if sub else None,
            "state": sub.state if sub else "not_submitted",
        })
    return {"assignment": a.to_dict(), "rows": rows}
