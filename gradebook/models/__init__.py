from ..extensions import db
from .people import Student, Teacher
from .course import Course
from .enrollment import Enrollment, Grade
from .assignment import Assignment, AssignmentSubmission
from .attendance import Attendance
from .user import User

__all__ = [
    "Student", "Teacher", "Course", "Enrollment", "Grade",
    "Assignment", "AssignmentSubmission", "Attendance", "User",
]
