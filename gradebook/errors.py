"""Typed errors raised by the grading services.

Every error is per-request and recoverable; the application factory turns
them into ``{"error": kind, "message": text}`` JSON responses.
"""


class GradebookError(Exception):
    kind = "error"
    status_code = 400

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {"error": self.kind, "message": self.message}


class ValidationError(GradebookError):
    """A required field is missing or a value is out of its allowed domain."""
    kind = "validation_error"
    status_code = 400


class NotFoundError(GradebookError):
    """The referenced record does not exist (usually a stale client view)."""
    kind = "not_found"
    status_code = 404


class ConflictError(GradebookError):
    """An at-most-one invariant or a revision check was violated."""
    kind = "conflict"
    status_code = 409
