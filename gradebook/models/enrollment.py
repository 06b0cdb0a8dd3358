from ..extensions import db
from .base import new_id, utcnow, iso

class Enrollment(db.Model):
    __tablename__ = "enrollment"
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    student_id = db.Column(db.String(32), db.ForeignKey("student.id"), nullable=False)
    course_id = db.Column(db.String(32), db.ForeignKey("course.id"), nullable=False)
    status = db.Column(db.String(16), nullable=False, default="active")
    enrolled_at = db.Column(db.DateTime(timezone=True), default=utcnow)
    __table_args__ = (
        db.UniqueConstraint("student_id", "course_id", name="uq_student_course"),
    )

    student = db.relationship("Student", back_populates="enrollments")
    course = db.relationship("Course", back_populates="enrollments")
    grade = db.relationship("Grade", back_populates="enrollment", uselist=False,
                            cascade="all, delete-orphan")

class Grade(db.Model):
    __tablename__ = "grade"
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    enrollment_id = db.Column(db.String(32), db.ForeignKey("enrollment.id"), nullable=False)
    internal_marks = db.Column(db.Float, nullable=False, default=0.0)
    external_marks = db.Column(db.Float, nullable=False, default=0.0)
    total = db.Column(db.Float, nullable=False, default=0.0)
    grade = db.Column(db.String(4))
    revision = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow, onupdate=utcnow)
    __table_args__ = (
        # one grade per enrollment, enforced by storage
        db.UniqueConstraint("enrollment_id", name="uq_grade_enrollment"),
    )
    __mapper_args__ = {"version_id_col": revision}

    enrollment = db.relationship("Enrollment", back_populates="grade")

    def to_dict(self):
        return {
            "id": self.id,
            "enrollmentId": self.enrollment_id,
            "internalMarks": self.internal_marks,
            "externalMarks": self.external_marks,
            "total": self.total,
            "grade": self.grade,
            "revision": self.revision,
            "updatedAt": iso(self.updated_at),
        }
