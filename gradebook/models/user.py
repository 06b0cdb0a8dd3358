from flask_login import UserMixin
from ..extensions import db
from .base import new_id

class User(UserMixin, db.Model):
    __tablename__ = "user"
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    username = db.Column(db.String(64), unique=True, nullable=False)
    role = db.Column(db.String(16), nullable=False)  # student | teacher | admin
    # bearer credential written by the external auth service
    api_token = db.Column(db.String(128), unique=True, index=True)
    student_id = db.Column(db.String(32), db.ForeignKey("student.id"))
    teacher_id = db.Column(db.String(32), db.ForeignKey("teacher.id"))

    student = db.relationship("Student", backref=db.backref("auth", uselist=False))
    teacher = db.relationship("Teacher", backref=db.backref("auth", uselist=False))

    def to_dict(self):
        return {"id": self.id, "username": self.username, "role": self.role,
                "studentId": self.student_id, "teacherId": self.teacher_id}
