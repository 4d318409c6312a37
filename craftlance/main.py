import logging
import os

from flask import Flask
from marshmallow import ValidationError as SchemaValidationError
from sqlalchemy.exc import SQLAlchemyError

from .config import CONFIGS
from .extensions import db, migrate, jwt, ma, cors, limiter


def create_app(config_name=None):
    app = Flask(__name__, instance_relative_config=False)
    env = config_name or os.getenv("FLASK_ENV", "development")
    app.config.from_object(CONFIGS.get(env, CONFIGS["development"]))

    logging.basicConfig(format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    logging.getLogger("craftlance").setLevel(app.config["LOG_LEVEL"])
    app.logger.setLevel(app.config["LOG_LEVEL"])

    # initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    ma.init_app(app)
    origins = [o.strip() for o in app.config["CORS_ORIGINS"].split(",")]
    cors.init_app(
        app,
        resources={r"/api/*": {"origins": origins}},
        supports_credentials=True,
        allow_headers=["Content-Type", "Authorization"],
        methods=["GET", "POST", "PATCH", "OPTIONS"],
    )
    limiter.init_app(app)

    from craftlance.services.payment_gateway import PaymentGateway
    app.extensions["payment_gateway"] = PaymentGateway.from_config(app.config)

    # models must be imported before create_all / migrations
    from craftlance.models import admin_log, notification, offer, order, payment_event, report, review, user  # noqa: F401

    # register blueprints
    from craftlance.routes.order_routes import bp as order_bp
    from craftlance.routes.offer_routes import bp as offer_bp
    from craftlance.routes.review_routes import bp as review_bp
    from craftlance.routes.report_routes import bp as report_bp
    from craftlance.routes.payment_routes import bp as payment_bp
    from craftlance.routes.notification_routes import bp as notification_bp
    from craftlance.routes.admin_routes import bp as admin_bp

    app.register_blueprint(order_bp)
    app.register_blueprint(offer_bp)
    app.register_blueprint(review_bp)
    app.register_blueprint(report_bp)
    app.register_blueprint(payment_bp)
    app.register_blueprint(notification_bp)
    app.register_blueprint(admin_bp)

    register_error_handlers(app)

    return app


def register_error_handlers(app):
    from craftlance.utils.exceptions import ServiceError, StoreError
    from craftlance.utils.response_formatter import error_response, service_error_response

    @app.errorhandler(ServiceError)
    def service_error(e):
        if isinstance(e, StoreError):
            app.logger.error("Store failure: %s", e.__cause__)
        return service_error_response(e)

    @app.errorhandler(SchemaValidationError)
    def schema_error(e):
        return error_response("VALIDATION_ERROR", "Invalid request data", e.messages, status=422)

    @app.errorhandler(SQLAlchemyError)
    def database_error(e):
        db.session.rollback()
        app.logger.exception("Unhandled database error")
        return error_response("SERVER_ERROR", "Internal server error", status=500)

    @jwt.unauthorized_loader
    def missing_token(reason):
        return error_response("UNAUTHORIZED", reason, status=401)

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return error_response("UNAUTHORIZED", "Invalid token", status=401)

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return error_response("UNAUTHORIZED", "Token has expired", status=401)

    @app.errorhandler(400)
    def bad_request(e):
        return error_response("BAD_REQUEST", "Bad request", status=400)

    @app.errorhandler(401)
    def unauthorized(e):
        return error_response("UNAUTHORIZED", "Authentication required", status=401)

    @app.errorhandler(404)
    def not_found(e):
        return error_response("NOT_FOUND", "Resource not found", status=404)

    @app.errorhandler(405)
    def method_not_allowed(e):
        return error_response("METHOD_NOT_ALLOWED", "Method not allowed", status=405)

    @app.errorhandler(429)
    def rate_limited(e):
        return error_response("RATE_LIMITED", "Too many requests, please try again later", status=429)

    @app.errorhandler(500)
    def server_error(e):
        return error_response("SERVER_ERROR", "Internal server error", status=500)
