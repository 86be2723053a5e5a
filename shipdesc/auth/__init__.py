"""
Authentication module for store administrators.
"""

from shipdesc.auth.routes import auth_bp

__all__ = [
    'auth_bp'
]
