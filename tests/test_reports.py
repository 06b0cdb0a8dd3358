from datetime import date
from types import SimpleNamespace

from gradebook.extensions import db
from gradebook.models import Attendance
from gradebook.services import reports


def rec(student, course, day, status="present"):
    return SimpleNamespace(student_id=student, course_id=course, date=date(2025, 2, day), status=status)


def test_attendance_with_no_classes_is_zero():
    assert reports.attendance_percentage("s1", "c1", []) == 0


def test_attendance_percentage_counts_distinct_dates():
    records = [
        rec("s1", "c1", 1), rec("s2", "c1", 1),
        rec("s1", "c1", 2, "absent"), rec("s2", "c1", 2),
        rec("s1", "c1", 3, "Present"), rec("s2", "c1", 3, "late"),
        rec("s1", "c2", 4),
    ]
    # three class dates for c1; the c2 record does not count
    assert reports.attendance_percentage("s1", "c1", records) == 67
    assert reports.attendance_percentage("s2", "c1", records) == 67
    assert reports.attendance_percentage("s1", "c2", records) == 100


def test_attendance_status_label():
    assert reports.attendance_status_label(100) == "Excellent"
    assert reports.attendance_status_label(90) == "Excellent"
    assert reports.attendance_status_label(89) == "Good"
    assert reports.attendance_status_label(75) == "Good"
    assert reports.attendance_status_label(74) == "Low"
    assert reports.attendance_status_label(0) == "Low"


def test_histogram_uses_five_buckets():
    hist = reports.grade_distribution_histogram(["A+", "A", "B", "F", "F", "X"])
    assert hist == {"A": 2, "B": 1, "C": 0, "D": 0, "F": 2}


def test_course_attendance_report(seed):
    course = seed["course"]
    rows = []
    for day in (3, 4, 5, 6):
        rows.append(Attendance(student_id=seed["alice"], course_id=course, date=date(2025, 3, day)))
    for day in (3, 4, 5):
        rows.append(Attendance(student_id=seed["bob"], course_id=course, date=date(2025, 3, day)))
    rows.append(Attendance(student_id=seed["carol"], course_id=course, date=date(2025, 3, 3)))
    rows.append(Attendance(student_id=seed["carol"], course_id=course, date=date(2025, 3, 4),
                           status="absent"))
    db.session.add_all(rows)
    db.session.commit()

    report = reports.course_attendance_report(course)
    by_name = {s["student"]["name"]: s for s in report["students"]}
    assert by_name["Alice"]["percentage"] == 100
    assert by_name["Alice"]["status"] == "Excellent"
    assert by_name["Bob"]["percentage"] == 75
    assert by_name["Bob"]["status"] == "Good"
    assert by_name["Carol"]["present"] == 1
    assert by_name["Carol"]["percentage"] == 25
    assert report["overall"] == {"avgAttendance": 67, "highest": 100, "lowest": 25, "totalClasses": 4}
    assert report["distribution"] == {"Excellent": 1, "Good": 1, "Low": 1}


def test_course_attendance_report_without_records(seed):
    report = reports.course_attendance_report(seed["course"])
    assert report["overall"]["totalClasses"] == 0
    assert all(s["percentage"] == 0 for s in report["students"])


def test_student_attendance(seed):
    db.session.add(Attendance(student_id=seed["alice"], course_id=seed["course"], date=date(2025, 3, 3)))
    db.session.commit()
    mine = reports.student_attendance(seed["alice"], seed["course"])
    assert mine["percentage"] == 100
    assert mine["status"] == "Excellent"
