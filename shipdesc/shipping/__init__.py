"""
Shipping module for shipping method settings and their cart/checkout descriptions.
"""

from shipdesc.shipping.constants import (
    SHIPPING_METHODS,
    get_shipping_method,
    get_all_shipping_methods,
    get_shipping_method_ids,
    is_valid_shipping_method
)
from shipdesc.shipping.models import ShippingZone, ShippingMethodInstance, ShippingOption
from shipdesc.shipping.rates import ShippingRate, ShippingRateId, parse_rate_id
from shipdesc.shipping.service import ShippingService
from shipdesc.shipping.descriptions import DescriptionMap, DescriptionResolver
from shipdesc.shipping.fields import register_shipping_method_fields


def init_shipping(app):
    """Register shipping blueprints, template hooks and the description form field."""
    from shipdesc.shipping import rendering
    from shipdesc.shipping.admin import admin_shipping_bp
    from shipdesc.shipping.routes import shipping_bp

    register_shipping_method_fields()
    rendering.init_app(app)
    app.register_blueprint(shipping_bp)
    app.register_blueprint(admin_shipping_bp)
    app.logger.info(f'Shipping descriptions enabled for methods: {", ".join(get_shipping_method_ids())}')


__all__ = [
    'SHIPPING_METHODS',
    'get_shipping_method',
    'get_all_shipping_methods',
    'get_shipping_method_ids',
    'is_valid_shipping_method',
    'ShippingZone',
    'ShippingMethodInstance',
    'ShippingOption',
    'ShippingRate',
    'ShippingRateId',
    'parse_rate_id',
    'ShippingService',
    'DescriptionMap',
    'DescriptionResolver',
    'init_shipping'
]
