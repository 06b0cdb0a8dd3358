from flask import abort, jsonify
from flask_login import login_required, current_user
from ...services import assignments, grades, reports
from ..auth.routes import role_required
from .. import json_body
from . import bp

def get_current_student():
    if current_user.student_id is None:
        abort(403)
    return current_user.student

@bp.post("/assignments/<assignment_id>/submission")
@login_required
@role_required("student")
def submit(assignment_id):
    stu = get_current_student()
    data = json_body()
    claimed = data.get("studentId")
    if claimed and claimed != stu.id:
        abort(403)
    sub, created = assignments.record_submission(
        assignment_id, stu.id, url=data.get("url"), text_content=data.get("text"))
    return jsonify(sub.to_dict()), 201 if created else 200

@bp.get("/results")
@login_required
@role_required("student")
def my_results():
    stu = get_current_student()
    return jsonify(grades.student_results(stu.id))

@bp.get("/courses/<course_id>/attendance")
@login_required
@role_required("student")
def my_attendance(course_id):
    stu = get_current_student()
    return jsonify(reports.student_attendance(stu.id, course_id))
