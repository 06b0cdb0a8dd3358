import logging
from logging.config import dictConfig

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from .extensions import db, migrate, login_manager
from .errors import GradebookError

log = logging.getLogger(__name__)

def configure_logging(level):
    dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": "%(asctime)s %(levelname)s [%(name)s] %(message)s"},
        },
        "handlers": {
            "console": {"class": "logging.StreamHandler", "formatter": "default"},
        },
        "loggers": {
            "gradebook": {"level": level, "handlers": ["console"], "propagate": False},
        },
    })

def register_error_handlers(app):
    @app.errorhandler(GradebookError)
    def handle_gradebook_error(err):
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(err):
        body = {"error": err.name.lower().replace(" ", "_"), "message": err.description}
        return jsonify(body), err.code

def create_app(config_object="config.Config"):
    app = Flask(__name__)
    app.config.from_object(config_object)
    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    from . import models

    from .blueprints.auth import bp as auth_bp
    from .blueprints.faculty import bp as faculty_bp
    from .blueprints.student import bp as student_bp
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(faculty_bp, url_prefix="/faculty")
    app.register_blueprint(student_bp, url_prefix="/student")
    register_error_handlers(app)

    log.info("gradebook app created (db=%s)", app.config["SQLALCHEMY_DATABASE_URI"])
    return app
