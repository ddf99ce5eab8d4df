"""Application factory."""

import json
import logging
import os
import uuid
from http import HTTPStatus

from flask import Flask, g, jsonify, request
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from werkzeug.exceptions import HTTPException

from config import Config
from models import db
from routes.auth import auth_bp
from services.auth_service import AuthService
from services.errors import AuthError
from services.mailer import EmailSender, build_email_sender
from services.tokens import SessionTokenIssuer
from store.sql_store import SqlIdentityStore

migrate = Migrate()
jwt = JWTManager()


def create_app(
    config_class: type[Config] = Config,
    *,
    mailer: EmailSender | None = None,
) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Core subsystems
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    # CORS
    CORS(
        app,
        resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}},
        supports_credentials=True,
    )

    # Identity services, shared by every request
    store = SqlIdentityStore(db)
    app.extensions["identity_store"] = store
    app.extensions["auth_service"] = AuthService(
        store,
        mailer if mailer is not None else build_email_sender(app.config),
        SessionTokenIssuer(app.config["JWT_ACCESS_TOKEN_EXPIRES"]),
        verify_url_template=app.config["VERIFY_URL_TEMPLATE"],
        password_hash_method=app.config.get("PASSWORD_HASH_METHOD", "scrypt"),
    )

    # Blueprints
    app.register_blueprint(auth_bp, url_prefix="/api/auth")

    @app.route("/", methods=["GET"])
    def index():
        return "Travel Planner backend is running!"

    # Health
    @app.route("/health", methods=["GET"])
    def health_check():
        return jsonify({"status": "ok"})

    # Errors
    _register_error_handlers(app)
    _register_jwt_handlers()

    return app


def _error_response(status: int, error: str, detail: str):
    request_id = g.get("request_id") or str(uuid.uuid4())
    response = jsonify({"error": error, "detail": detail, "request_id": request_id})
    response.status_code = status
    response.headers.setdefault("X-Request-ID", request_id)
    return response


def _register_error_handlers(app: Flask) -> None:
    """Register JSON error handlers with request IDs."""

    @app.before_request
    def _assign_request_id():  # pragma: no cover
        g.request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    @app.after_request
    def _add_request_id_header(response):  # pragma: no cover
        request_id = g.get("request_id")
        if request_id:
            response.headers.setdefault("X-Request-ID", request_id)
        return response

    @app.errorhandler(AuthError)
    def _handle_auth_error(error: AuthError):
        if error.status_code >= HTTPStatus.INTERNAL_SERVER_ERROR:
            app.logger.error("%s on %s: %s", type(error).__name__, request.path, error.detail)
        return _error_response(error.status_code, error.error, error.detail)

    @app.errorhandler(HTTPException)
    def _handle_http_exception(error: HTTPException):
        request_id = g.get("request_id") or str(uuid.uuid4())
        response = error.get_response()
        payload = {
            "error": getattr(error, "name", "Error"),
            "detail": error.description,
            "request_id": request_id,
        }
        response.data = json.dumps(payload)
        response.content_type = "application/json"
        response.headers.setdefault("X-Request-ID", request_id)
        return response

    @app.errorhandler(Exception)
    def _handle_unexpected(error: Exception):  # pragma: no cover
        app.logger.exception("Unhandled application error", exc_info=error)
        return _error_response(
            HTTPStatus.INTERNAL_SERVER_ERROR,
            "Internal Server Error",
            "An unexpected error occurred.",
        )


def _register_jwt_handlers() -> None:
    """Render session token failures in the same JSON shape as other errors."""

    @jwt.unauthorized_loader
    def _missing_token(reason: str):
        return _error_response(HTTPStatus.UNAUTHORIZED, "Unauthorized", reason)

    @jwt.invalid_token_loader
    def _invalid_token(reason: str):
        return _error_response(HTTPStatus.UNAUTHORIZED, "Unauthorized", reason)

    @jwt.expired_token_loader
    def _expired_token(jwt_header: dict, jwt_payload: dict):
        return _error_response(HTTPStatus.UNAUTHORIZED, "Unauthorized", "Session token has expired.")


if __name__ == "__main__":
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    application = create_app()
    try:
        application.run(host="0.0.0.0", port=int(os.environ.get("PORT", 5000)))
    finally:
        with application.app_context():
            application.extensions["identity_store"].close()
