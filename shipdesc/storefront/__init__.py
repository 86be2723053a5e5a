"""
Storefront module for cart and checkout pages.
"""

from shipdesc.storefront.routes import storefront_bp

__all__ = [
    'storefront_bp'
]
