import os
from datetime import timedelta


class Config:
    """Base Flask configuration shared across environments."""

    SECRET_KEY = os.environ.get("SECRET_KEY") or "dev-key-change-this-in-production"

    # Use DATABASE_URL directly without rewriting, fallbacks, or driver switching.
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # pool_pre_ping: Test connections before using them (handles stale connections)
    # pool_recycle: Recycle connections after 1 hour
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_recycle": 3600,
    }

    IS_RENDER = bool(os.environ.get("RENDER"))

    # Which cart/checkout surface the storefront renders: 'classic' or 'block'
    CHECKOUT_SURFACE = os.environ.get("CHECKOUT_SURFACE", "classic")

    # Shared by the classic markup, the block script and the stylesheet
    SHIPPING_DESCRIPTION_CSS_CLASS = "shipping-method-description"
    # Name of the window global the block script reads the descriptions from
    SHIPPING_DESCRIPTION_JS_GLOBAL = os.environ.get(
        "SHIPPING_DESCRIPTION_JS_GLOBAL", "shippingDescriptions"
    )
    # Delay before re-applying descriptions after checkout events (ms)
    SHIPPING_DESCRIPTION_RERENDER_DELAY_MS = int(
        os.environ.get("SHIPPING_DESCRIPTION_RERENDER_DELAY_MS", 100)
    )

    LANGUAGES = ["en", "fr"]
    BABEL_DEFAULT_LOCALE = "en"

    PERMANENT_SESSION_LIFETIME = timedelta(days=7)


class DevelopmentConfig(Config):
    DEBUG = True
    SQLALCHEMY_ECHO = True


class ProductionConfig(Config):
    DEBUG = False


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL") or "sqlite:///:memory:"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    WTF_CSRF_ENABLED = False
