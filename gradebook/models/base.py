from datetime import datetime, timezone
from uuid import uuid4

def new_id():
    return uuid4().hex

def utcnow():
    return datetime.now(timezone.utc)

def iso(value):
    return value.isoformat() if value is not None else None
