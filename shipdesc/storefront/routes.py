"""
Storefront Routes
Cart and checkout pages rendered on the classic or the block surface.
"""

from flask import Blueprint, current_app, render_template, request

from shipdesc.shipping.rendering import SURFACES, get_request_resolver, shipping_description_assets
from shipdesc.shipping.service import ShippingService

storefront_bp = Blueprint('storefront', __name__)


def _selected_surface():
    surface = request.args.get('surface') or current_app.config.get('CHECKOUT_SURFACE', 'classic')
    if surface not in SURFACES:
        current_app.logger.warning(f'Unknown checkout surface {surface!r}; using classic')
        surface = 'classic'
    return surface


def _selected_zone_id():
    zone = request.args.get('zone')
    try:
        return int(zone) if zone not in (None, '') else None
    except ValueError:
        return None


def _render_shipping_page(page):
    surface = _selected_surface()
    zone_id = _selected_zone_id()

    rates = ShippingService.get_package_rates(zone_id)
    if surface == 'classic':
        rates = get_request_resolver().add_description_to_rates(rates)

    return render_template(
        f'storefront/{page}.html',
        page=page,
        surface=surface,
        rates=rates,
        zone_id=zone_id,
        assets=shipping_description_assets(page, surface),
    )


@storefront_bp.route('/')
def home():
    return render_template('storefront/home.html', assets=shipping_description_assets('home', 'classic'))


@storefront_bp.route('/cart')
def cart():
    return _render_shipping_page('cart')


@storefront_bp.route('/checkout')
def checkout():
    return _render_shipping_page('checkout')
