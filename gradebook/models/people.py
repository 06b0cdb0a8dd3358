from ..extensions import db
from .base import new_id

class Student(db.Model):
    __tablename__ = "student"
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    student_no = db.Column(db.String(32), unique=True, nullable=False)
    name = db.Column(db.String(64), nullable=False)
    email = db.Column(db.String(128))
    department = db.Column(db.String(64), default="General")
    batch = db.Column(db.String(16))

    enrollments = db.relationship(
        "Enrollment", back_populates="student", cascade="all, delete-orphan"
    )

    def to_dict(self):
        return {"id": self.id, "studentNo": self.student_no, "name": self.name,
                "email": self.email, "department": self.department, "batch": self.batch}

class Teacher(db.Model):
    __tablename__ = "teacher"
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    teacher_no = db.Column(db.String(32), unique=True, nullable=False)
    name = db.Column(db.String(64), nullable=False)
    dept = db.Column(db.String(64))

    courses = db.relationship("Course", back_populates="faculty")
