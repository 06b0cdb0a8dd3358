import logging

from ..extensions import db
from ..errors import NotFoundError
from ..models import Course
from .fields import number
from .grades import recompute_course_grades

log = logging.getLogger(__name__)


def update_scheme(course_id, max_internal, max_external):
    """Overwrite a course's maxima and preview the recomputed letters.

    Only the course row is written. Raw marks and totals are left untouched,
    even when a mark now exceeds the new maximum, and the recomputed letters
    are returned for confirmation; ``commit_scheme_grades`` saves them.
    """
    max_internal = number(max_internal, "maxInternal", minimum=0)
    max_external = number(max_external, "maxExternal", minimum=0)

    course = db.session.get(Course, course_id)
    if not course:
        raise NotFoundError("Course does not exist")

    previous = (course.max_internal_marks, course.max_external_marks)
    course.max_internal_marks = max_internal
    course.max_external_marks = max_external
    db.session.commit()
    log.info("grading scheme for course %s changed %s -> %s",
             course_id, previous, (max_internal, max_external))

    return course, recompute_course_grades(course)
