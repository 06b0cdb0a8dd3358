"""Pure grade computation.

Two separate letter scales live here and must not be mixed up:

* the enrollment scale (A+/A/B/C/D/F) applied to a course total expressed
  as a percentage of the course grading scheme;
* the assignment scale (A/B/C/D/F) applied to a single assignment's marks
  expressed as a percentage of that assignment.

Nothing in this module touches the database.
"""
import math

ENROLLMENT_BANDS = ((90, "A+"), (80, "A"), (70, "B"), (60, "C"), (50, "D"))
ASSIGNMENT_BANDS = ((90, "A"), (80, "B"), (70, "C"), (60, "D"))
FAILING_LETTER = "F"

ENROLLMENT_LETTERS = ("A+", "A", "B", "C", "D", "F")
ASSIGNMENT_LETTERS = ("A", "B", "C", "D", "F")

GRADE_POINTS = {"A+": 10, "A": 10, "B": 8, "C": 6, "D": 5, "F": 0}


def round_half_up(value):
    # 82.5 -> 83 and -2.5 -> -2, unlike round() which rounds half to even
    return int(math.floor(value + 0.5))


def _band(percentage, bands):
    for threshold, letter in bands:
        if percentage >= threshold:
            return letter
    return FAILING_LETTER


def letter_for_enrollment_percentage(percentage):
    """Letter on the enrollment scale. No upper clamp: 130 is still A+."""
    return _band(percentage, ENROLLMENT_BANDS)


def letter_for_assignment_percentage(percentage):
    """Letter on the assignment scale (marks out of 100)."""
    return _band(percentage, ASSIGNMENT_BANDS)


def percentage_of_scheme(earned, max_internal, max_external):
    """Whole-number percentage of ``earned`` against the scheme maximum.

    Returns 0 when the scheme maximum is 0, and also when the ratio is not a
    finite number (overflowing or NaN inputs), so it never raises.
    """
    maximum = max_internal + max_external
    if not maximum > 0:
        return 0
    try:
        ratio = 100 * earned / maximum
    except OverflowError:
        return 0
    if not math.isfinite(ratio):
        return 0
    return round_half_up(ratio)


def assignment_percentage(marks_obtained, total_marks):
    if not total_marks or total_marks <= 0:
        return 0.0
    return 100 * marks_obtained / total_marks


def grade_points(letter):
    return GRADE_POINTS.get(letter, 0)


def is_passing(letter):
    return letter is not None and letter != FAILING_LETTER
