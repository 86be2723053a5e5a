from flask import Flask, render_template, request, redirect, url_for, flash, jsonify, current_app
from flask_wtf.csrf import CSRFError
from sqlalchemy.exc import SQLAlchemyError
import logging
import os

from .config import Config
from .extensions import db, init_extensions


def get_base_url() -> str:
    """Canonical base URL for the app without any trailing slash."""
    return (current_app.config.get("PUBLIC_URL") or "").rstrip("/")


def create_app(config_class: type[Config] | None = None):
    app = Flask(__name__, static_folder='static', static_url_path='/static')

    config_obj = config_class or Config
    app.config.from_object(config_obj)

    app.logger.setLevel(logging.DEBUG if app.config.get("DEBUG") else logging.INFO)

    app.config.setdefault("PREFERRED_URL_SCHEME", "https")
    app.config.setdefault("PUBLIC_URL", os.environ.get("PUBLIC_URL", ""))

    if app.config.get("IS_RENDER"):
        app.logger.info("Render deployment detected – enabling secure cookies.")
        app.config.setdefault("SESSION_COOKIE_SECURE", True)
        app.config.setdefault("REMEMBER_COOKIE_SECURE", True)

    if not app.config.get("SQLALCHEMY_DATABASE_URI"):
        raise RuntimeError("DATABASE_URL environment variable is not set.")

    # Initialize all extensions
    init_extensions(app)

    # Models must be imported before migrations or create_all see the metadata
    from shipdesc import models  # noqa: F401

    from shipdesc.shipping import init_shipping
    init_shipping(app)

    from shipdesc.storefront import storefront_bp
    app.register_blueprint(storefront_bp)

    from shipdesc.auth import auth_bp
    app.register_blueprint(auth_bp)

    from shipdesc.cli import init_cli
    init_cli(app)

    app.get_base_url = get_base_url

    @app.context_processor
    def inject_base_url():
        return {"base_url": app.get_base_url()}

    @app.route("/_health", methods=["GET"])
    def healthcheck():
        return jsonify({"status": "ok"}), 200

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(e):
        """Handle database errors gracefully."""
        app.logger.error(f"Database error: {e}", exc_info=True)
        db.session.rollback()

        if request.is_json or request.path.startswith("/api/"):
            return jsonify({
                "error": "Database error",
                "message": "A temporary database error occurred. Please try again."
            }), 503
        flash("A temporary database error occurred. Please try again.", "error")
        return redirect(request.referrer or url_for("storefront.home")), 303

    @app.errorhandler(CSRFError)
    def csrf_error(e):
        """Handle CSRF errors and return JSON for API requests"""
        if request.is_json or request.path.startswith('/api/'):
            return jsonify({'success': False, 'message': 'CSRF token missing or invalid'}), 400
        return render_template('error.html', message=e.description), 400

    return app
