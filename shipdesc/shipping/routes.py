"""
Shipping API Routes
Store API endpoints for shipping rates and descriptions, and admin settings management.
"""

from flask import Blueprint, request, jsonify, current_app, render_template
from shipdesc.extensions import csrf
from shipdesc.shipping.exceptions import (
    ShippingInstanceNotFoundException,
    ShippingSettingsValidationException,
    ShippingZoneNotFoundException,
    UnknownShippingMethodException,
)
from shipdesc.shipping.reconciler import annotate_block_markup
from shipdesc.shipping.rendering import description_css_class, get_request_resolver
from shipdesc.shipping.service import ShippingService
from functools import wraps
from flask_login import current_user

shipping_bp = Blueprint('shipping', __name__, url_prefix='/api/shipping')


def admin_required_api(f):
    """Decorator to require admin access for API endpoints."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated or not current_user.can_manage_shipping:
            return jsonify({'error': 'Admin access required'}), 403
        return f(*args, **kwargs)
    return decorated_function


def _zone_id_arg():
    zone_id = request.args.get('zone_id')
    if zone_id in (None, ''):
        return None
    return int(zone_id)


@shipping_bp.errorhandler(ShippingZoneNotFoundException)
@shipping_bp.errorhandler(ShippingInstanceNotFoundException)
def handle_not_found(e):
    return jsonify({'error': str(e)}), 404


@shipping_bp.errorhandler(UnknownShippingMethodException)
def handle_unknown_method(e):
    return jsonify({'error': str(e)}), 400


@shipping_bp.errorhandler(ShippingSettingsValidationException)
def handle_invalid_settings(e):
    return jsonify({'error': str(e), 'errors': e.errors}), 400


@shipping_bp.route('/rates', methods=['GET'])
@csrf.exempt
def get_rates():
    """
    Shipping rates for a zone, each with its resolved description.

    Response:
        [
            {
                "rate_id": "flat_rate:5",
                "name": "Flat rate",
                "price": "10.00",
                "description": "3-5 business days",
                ...
            },
            ...
        ]
    """
    try:
        zone_id = _zone_id_arg()
    except ValueError:
        return jsonify({'error': 'zone_id must be an integer'}), 400

    rates = ShippingService.get_package_rates(zone_id)
    rates = get_request_resolver().add_description_to_rates(rates)
    return jsonify([rate.to_dict() for rate in rates]), 200


@shipping_bp.route('/descriptions', methods=['GET'])
@csrf.exempt
def get_descriptions():
    """
    Description of every configured method instance, keyed by rate id.

    Response:
        {"flat_rate:5": "3-5 business days", "local_pickup:2": "..."}
    """
    descriptions = get_request_resolver().build_description_map()
    return jsonify(descriptions.to_dict()), 200


@shipping_bp.route('/block-fragment', methods=['GET'])
@csrf.exempt
def get_block_fragment():
    """Block checkout option markup for a zone with descriptions already applied."""
    try:
        zone_id = _zone_id_arg()
    except ValueError:
        return jsonify({'error': 'zone_id must be an integer'}), 400

    rates = ShippingService.get_package_rates(zone_id)
    markup = render_template('storefront/_block_rates.html', rates=rates, package_index=0)
    descriptions = get_request_resolver().build_description_map()
    html = annotate_block_markup(markup, descriptions, css_class=description_css_class())
    return html, 200, {'Content-Type': 'text/html; charset=utf-8'}


@shipping_bp.route('/zones', methods=['GET'])
@csrf.exempt
def list_zones():
    """List all zones, the catch-all zone last, with their method instances."""
    zones = ShippingService.get_all_zones()
    return jsonify([zone.to_dict() for zone in zones]), 200


# Admin endpoints
@shipping_bp.route('/admin/instances/<int:instance_id>', methods=['GET'])
@admin_required_api
def get_instance(instance_id):
    """Get a shipping method instance with its settings."""
    instance = ShippingService.get_instance(instance_id)
    return jsonify(instance.to_dict()), 200


@shipping_bp.route('/admin/instances/<int:instance_id>', methods=['PUT'])
@admin_required_api
def update_instance(instance_id):
    """Update instance settings, e.g. {"description": "3-5 business days"}."""
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({'error': 'Request body must be a JSON object'}), 400
    enabled = data.pop('enabled', None)
    instance = ShippingService.update_instance_settings(
        instance_id,
        data,
        enabled=bool(enabled) if enabled is not None else None
    )
    current_app.logger.info(f'Shipping instance {instance.rate_id} updated by user {current_user.id}')
    return jsonify(instance.to_dict()), 200


@shipping_bp.route('/admin/zones/<int:zone_id>/instances', methods=['POST'])
@admin_required_api
def create_instance(zone_id):
    """Add a shipping method to a zone, e.g. {"method_id": "flat_rate", "settings": {...}}."""
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({'error': 'Request body must be a JSON object'}), 400
    method_id = str(data.get('method_id') or '').strip()
    if not method_id:
        return jsonify({'error': 'method_id is required'}), 400
    settings = data.get('settings') or {}
    if not isinstance(settings, dict):
        return jsonify({'error': 'settings must be a JSON object'}), 400

    instance = ShippingService.add_method_instance(
        zone_id,
        method_id,
        settings=settings,
        enabled=bool(data.get('enabled', True))
    )
    return jsonify(instance.to_dict()), 201


@shipping_bp.route('/admin/instances/<int:instance_id>', methods=['DELETE'])
@admin_required_api
def delete_instance(instance_id):
    """Delete a shipping method instance; its settings record is kept."""
    ShippingService.delete_instance(instance_id)
    return jsonify({'message': 'Shipping method deleted successfully'}), 200
