import math
from datetime import datetime, timezone
from numbers import Real

from ..errors import ValidationError


def _finite(value):
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints too large for a float
        return False


def number(value, field, minimum=None):
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field} is required and must be a number")
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            raise ValidationError(f"{field} must be a number") from None
    if not isinstance(value, Real) or not _finite(value):
        raise ValidationError(f"{field} must be a finite number")
    if minimum is not None and value < minimum:
        raise ValidationError(f"{field} must be >= {minimum}")
    return value


def text(value):
    """Strip a string; blank or missing becomes None."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def required_text(value, field):
    value = text(value)
    if value is None:
        raise ValidationError(f"{field} is required")
    return value


def timestamp(value, field):
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
        except ValueError:
            raise ValidationError(f"{field} must be an ISO-8601 date or datetime") from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
