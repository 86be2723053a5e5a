from flask_babel import Babel
from flask_login import LoginManager
from flask_migrate import Migrate
from flask_migrate.cli import db as flask_migrate_cli
from flask_sqlalchemy import SQLAlchemy
from flask_wtf import CSRFProtect

# Engine options are read from app config in init_extensions
db = SQLAlchemy(session_options={"expire_on_commit": False})
login_manager = LoginManager()
migrate = Migrate()
csrf = CSRFProtect()
babel = Babel()


def get_locale():
    """Pick the best supported locale from the Accept-Language header."""
    from flask import current_app, request

    return request.accept_languages.best_match(current_app.config.get("LANGUAGES", ["en"]))


def init_extensions(app):
    """Initialize all extensions with the given Flask app."""
    db.init_app(app)

    migrate.init_app(app, db)
    if "db" not in app.cli.commands:
        app.cli.add_command(flask_migrate_cli)

    login_manager.init_app(app)
    login_manager.login_view = "auth.login"

    csrf.init_app(app)

    # Flask-Babel 3.0+ takes the selector at init time
    babel.init_app(app, locale_selector=get_locale)

    return app
