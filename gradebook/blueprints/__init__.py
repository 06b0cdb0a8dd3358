from flask import request
from ..errors import ValidationError

def json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data

def revision_arg(data):
    rev = data.get("revision")
    if rev is None:
        return None
    if isinstance(rev, bool) or not isinstance(rev, int):
        raise ValidationError("revision must be an integer")
    return rev
