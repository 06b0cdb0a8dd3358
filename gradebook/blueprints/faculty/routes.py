from flask import abort, jsonify, request
from flask_login import login_required, current_user
from ...extensions import db
from ...errors import NotFoundError
from ...models import AssignmentSubmission, Course, Enrollment
from ...services import assignments, grades, reports, schemes
from ..auth.routes import role_required
from .. import json_body, revision_arg
from . import bp

def owned_course(course_id):
    c = db.session.get(Course, course_id)
    if not c:
        raise NotFoundError("Course does not exist")
    if current_user.role != "admin" and c.faculty_id != current_user.teacher_id:
        abort(403)
    return c

# ---------- Grading scheme ----------
@bp.post("/courses/<course_id>/grading-scheme")
@login_required
@role_required("teacher", "admin")
def update_scheme(course_id):
    owned_course(course_id)
    data = json_body()
    course, preview = schemes.update_scheme(course_id, data.get("maxInternal"), data.get("maxExternal"))
    return jsonify(scheme=course.scheme_dict(), recomputed=preview)

@bp.post("/courses/<course_id>/grading-scheme/apply")
@login_required
@role_required("teacher", "admin")
def apply_scheme(course_id):
    c = owned_course(course_id)
    saved = grades.commit_scheme_grades(course_id)
    return jsonify(scheme=c.scheme_dict(), grades=[g.to_dict() for g in saved])

# ---------- Grades ----------
@bp.put("/enrollments/<enrollment_id>/grade")
@login_required
@role_required("teacher", "admin")
def upsert_grade(enrollment_id):
    en = db.session.get(Enrollment, enrollment_id)
    if not en:
        raise NotFoundError("Enrollment does not exist")
    owned_course(en.course_id)
    data = json_body()
    g, pct = grades.upsert_grade(enrollment_id, data.get("internalMarks"),
                                 data.get("externalMarks"), revision=revision_arg(data))
    return jsonify(dict(g.to_dict(), percentage=pct))

@bp.get("/courses/<course_id>/rollup")
@login_required
@role_required("teacher", "admin")
def course_rollup(course_id):
    owned_course(course_id)
    return jsonify(grades.course_rollup(course_id))

@bp.get("/courses/<course_id>/gradebook")
@login_required
@role_required("teacher", "admin")
def gradebook(course_id):
    owned_course(course_id)
    sort = request.args.get("sort", "name")
    q = (request.args.get("q") or "").strip()
    return jsonify(grades.course_gradebook(course_id, sort=sort, query=q or None))

# ---------- Assignments ----------
@bp.post("/assignments")
@login_required
@role_required("teacher", "admin")
def create_assignment():
    data = json_body()
    course_id = data.get("courseId")
    if course_id:
        owned_course(course_id)
    a = assignments.create_assignment(
        course_id, data.get("title"), description=data.get("description"),
        due_date=data.get("dueDate"), total_marks=data.get("totalMarks"),
        created_by=current_user.teacher_id,
    )
    return jsonify(a.to_dict()), 201

@bp.get("/courses/<course_id>/assignments")
@login_required
@role_required("teacher", "admin")
def list_assignments(course_id):
    owned_course(course_id)
    return jsonify(assignments=[a.to_dict() for a in assignments.list_assignments(course_id)])

def owned_assignment(assignment_id):
    a = assignments.get_assignment(assignment_id)
    owned_course(a.course_id)
    return a

@bp.delete("/assignments/<assignment_id>")
@login_required
@role_required("teacher", "admin")
def delete_assignment(assignment_id):
    owned_assignment(assignment_id)
    removed = assignments.delete_assignment(assignment_id)
    return jsonify(deleted=assignment_id, submissionsRemoved=removed)

@bp.get("/assignments/<assignment_id>/submissions")
@login_required
@role_required("teacher", "admin")
def review_submissions(assignment_id):
    owned_assignment(assignment_id)
    status = request.args.get("status", "all")
    q = (request.args.get("q") or "").strip()
    return jsonify(assignments.list_submissions(assignment_id, status=status, query=q or None))

@bp.put("/submissions/<submission_id>/grade")
@login_required
@role_required("teacher", "admin")
def grade_submission(submission_id):
    sub = db.session.get(AssignmentSubmission, submission_id)
    if not sub:
        raise NotFoundError("Submission does not exist; refresh and try again")
    owned_course(sub.assignment.course_id)
    data = json_body()
    sub, out_of_range = assignments.grade_submission(
        submission_id, data.get("marksObtained"), data.get("feedback"),
        revision=revision_arg(data))
    return jsonify(dict(sub.to_dict(), outOfRange=out_of_range))

@bp.get("/assignments/<assignment_id>/pipeline")
@login_required
@role_required("teacher", "admin")
def submission_pipeline(assignment_id):
    owned_assignment(assignment_id)
    return jsonify(assignments.submission_pipeline(assignment_id))

# ---------- Attendance ----------
@bp.get("/courses/<course_id>/attendance-report")
@login_required
@role_required("teacher", "admin")
def attendance_report(course_id):
    owned_course(course_id)
    return jsonify(reports.course_attendance_report(course_id))
