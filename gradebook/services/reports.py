"""Read-only projections for dashboards: attendance and grade histograms.

Everything here is recomputed from raw records on each call.
"""
import logging

from ..extensions import db
from ..errors import NotFoundError
from ..models import Attendance, Course, Enrollment
from .grading import ASSIGNMENT_LETTERS, round_half_up

log = logging.getLogger(__name__)

ATTENDANCE_BUCKETS = ("Excellent", "Good", "Low")


def _present_count(student_id, records):
    return sum(1 for r in records
               if r.student_id == student_id and (r.status or "").lower() == "present")


def attendance_percentage(student_id, course_id, attendance_records):
    course_records = [r for r in attendance_records if r.course_id == course_id]
    # no classes held yet counts as one so the ratio stays defined
    total_classes = len({r.date for r in course_records}) or 1
    present = _present_count(student_id, course_records)
    return round_half_up(100 * present / total_classes)


def attendance_status_label(percentage):
    if percentage >= 90:
        return "Excellent"
    if percentage < 75:
        return "Low"
    return "Good"


def grade_distribution_histogram(grades):
    """Count letters into the five chart buckets A-F; A+ is counted as A."""
    histogram = dict.fromkeys(ASSIGNMENT_LETTERS, 0)
    for letter in grades:
        if letter == "A+":
            letter = "A"
        if letter in histogram:
            histogram[letter] += 1
    return histogram


def course_attendance_report(course_id):
    course = db.session.get(Course, course_id)
    if not course:
        raise NotFoundError("Course does not exist")

    records = Attendance.query.filter_by(course_id=course_id).all()
    held = len({r.date for r in records})
    enrollments = (Enrollment.query.filter_by(course_id=course_id)
                   .order_by(Enrollment.enrolled_at, Enrollment.id).all())

    students = []
    for en in enrollments:
        pct = attendance_percentage(en.student_id, course_id, records)
        present = _present_count(en.student_id, records)
        students.append({
            "student": en.student.to_dict(),
            "total": held or 1,
            "present": present,
            "percentage": pct,
            "status": attendance_status_label(pct),
        })

    pcts = [s["percentage"] for s in students]
    overall = {
        "avgAttendance": round_half_up(sum(pcts) / len(pcts)) if pcts else 0,
        "highest": max(pcts) if pcts else 0,
        "lowest": min(pcts) if pcts else 0,
        "totalClasses": held,
    }
    buckets = dict.fromkeys(ATTENDANCE_BUCKETS, 0)
    for s in students:
        buckets[s["status"]] += 1

    log.debug("attendance report for course %s: %d students, %d classes",
              course_id, len(students), held)
    return {"courseId": course_id, "students": students,
            "overall": overall, "distribution": buckets}


def student_attendance(student_id, course_id):
    en = Enrollment.query.filter_by(student_id=student_id, course_id=course_id).one_or_none()
    if not en:
        raise NotFoundError("Not enrolled in this course")
    records = Attendance.query.filter_by(course_id=course_id).all()
    pct = attendance_percentage(student_id, course_id, records)
    return {
        "courseId": course_id,
        "totalClasses": len({r.date for r in records}),
        "present": _present_count(student_id, records),
        "percentage": pct,
        "status": attendance_status_label(pct),
    }
