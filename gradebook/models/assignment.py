from ..extensions import db
from .base import new_id, utcnow, iso

class Assignment(db.Model):
    __tablename__ = "assignment"
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    course_id = db.Column(db.String(32), db.ForeignKey("course.id"), nullable=False)
    title = db.Column(db.String(128), nullable=False)
    description = db.Column(db.Text)
    due_date = db.Column(db.DateTime(timezone=True))
    total_marks = db.Column(db.Float, nullable=False, default=100)
    created_by = db.Column(db.String(32), db.ForeignKey("teacher.id"))
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)

    course = db.relationship("Course", back_populates="assignments")
    submissions = db.relationship("AssignmentSubmission", back_populates="assignment",
                                  cascade="all, delete-orphan")

    def to_dict(self):
        return {
            "id": self.id,
            "courseId": self.course_id,
            "title": self.title,
            "description": self.description,
            "dueDate": iso(self.due_date),
            "totalMarks": self.total_marks,
            "createdBy": self.created_by,
            "createdAt": iso(self.created_at),
        }

class AssignmentSubmission(db.Model):
    __tablename__ = "assignment_submission"
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    assignment_id = db.Column(db.String(32), db.ForeignKey("assignment.id"), nullable=False)
    student_id = db.Column(db.String(32), db.ForeignKey("student.id"), nullable=False)
    submission_url = db.Column(db.String(512))
    submission_text = db.Column(db.Text)
    submitted_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    # grading fields, null until graded
    marks_obtained = db.Column(db.Float)
    feedback = db.Column(db.Text)
    graded_at = db.Column(db.DateTime(timezone=True))
    revision = db.Column(db.Integer, nullable=False)
    __table_args__ = (
        db.UniqueConstraint("assignment_id", "student_id", name="uq_submission_assignment_student"),
    )
    __mapper_args__ = {"version_id_col": revision}

    assignment = db.relationship("Assignment", back_populates="submissions")
    student = db.relationship("Student")

    @property
    def state(self):
        return "graded" if self.marks_obtained is not None else "submitted"

    def to_dict(self):
        return {
            "id": self.id,
            "assignmentId": self.assignment_id,
            "studentId": self.student_id,
            "submissionUrl": self.submission_url,
            "submissionText": self.submission_text,
            "submittedAt": iso(self.submitted_at),
            "marksObtained": self.marks_obtained,
            "feedback": self.feedback,
            "gradedAt": iso(self.graded_at),
            "state": self.state,
            "revision": self.revision,
        }
