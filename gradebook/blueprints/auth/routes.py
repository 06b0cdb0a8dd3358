from functools import wraps
from flask import abort, jsonify
from flask_login import login_required, current_user
from ...extensions import login_manager
from ...models.user import User
from . import bp

def role_required(*roles):
    def deco(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            if not current_user.is_authenticated or current_user.role not in roles:
                abort(403)
            return f(*args, **kwargs)
        return wrapper
    return deco

@login_manager.request_loader
def load_user_from_request(req):
    # tokens are issued elsewhere; we only resolve them
    scheme, _, token = req.headers.get("Authorization", "").partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        return None
    return User.query.filter_by(api_token=token).one_or_none()

@login_manager.unauthorized_handler
def unauthorized():
    return jsonify(error="unauthorized", message="A valid bearer token is required"), 401

@bp.get("/me")
@login_required
def me():
    return jsonify(current_user.to_dict())
