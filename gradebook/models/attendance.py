from ..extensions import db
from .base import new_id

class Attendance(db.Model):
    __tablename__ = "attendance"
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    student_id = db.Column(db.String(32), db.ForeignKey("student.id"), nullable=False)
    course_id = db.Column(db.String(32), db.ForeignKey("course.id"), nullable=False)
    date = db.Column(db.Date, nullable=False)
    status = db.Column(db.String(16), nullable=False, default="present")
