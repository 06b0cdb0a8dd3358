from ..extensions import db
from .base import new_id

class Course(db.Model):
    __tablename__ = "course"
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    code = db.Column(db.String(32), unique=True, nullable=False)
    name = db.Column(db.String(128), nullable=False)
    credits = db.Column(db.Integer, nullable=False, default=3)
    faculty_id = db.Column(db.String(32), db.ForeignKey("teacher.id"), nullable=False)
    # grading scheme, overwritten in place
    max_internal_marks = db.Column(db.Float, nullable=False, default=40)
    max_external_marks = db.Column(db.Float, nullable=False, default=60)
    __table_args__ = (
        db.CheckConstraint("max_internal_marks >= 0", name="ck_max_internal_nonneg"),
        db.CheckConstraint("max_external_marks >= 0", name="ck_max_external_nonneg"),
    )

    faculty = db.relationship("Teacher", back_populates="courses")
    enrollments = db.relationship("Enrollment", back_populates="course",
                                  cascade="all, delete-orphan")
    assignments = db.relationship("Assignment", back_populates="course",
                                  cascade="all, delete-orphan")

    def scheme_dict(self):
        return {"courseId": self.id,
                "maxInternal": self.max_internal_marks,
                "maxExternal": self.max_external_marks}

    def to_dict(self):
        return {"id": self.id, "code": self.code, "name": self.name,
                "credits": self.credits, "facultyId": self.faculty_id,
                "maxInternal": self.max_internal_marks,
                "maxExternal": self.max_external_marks}
