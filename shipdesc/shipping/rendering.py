"""
Shipping Description Rendering
Classic (server-rendered) output and the page assets of the block surface.
"""

from flask import current_app, g, url_for
from markupsafe import Markup, escape

from shipdesc.shipping.descriptions import DescriptionResolver
from shipdesc.shipping.sanitize import sanitize_description

SURFACE_CLASSIC = 'classic'
SURFACE_BLOCK = 'block'
SURFACES = (SURFACE_CLASSIC, SURFACE_BLOCK)


def description_css_class() -> str:
    return current_app.config.get('SHIPPING_DESCRIPTION_CSS_CLASS', 'shipping-method-description')


def get_request_resolver() -> DescriptionResolver:
    """One resolver per request so its instance index is built only once."""
    if 'shipping_description_resolver' not in g:
        g.shipping_description_resolver = DescriptionResolver()
    return g.shipping_description_resolver


def render_description_node(description) -> Markup:
    """The description wrapper shared by both surfaces."""
    html = sanitize_description(description)
    if not html:
        return Markup('')
    return Markup('<div class="{}">{}</div>').format(escape(description_css_class()), Markup(html))


def render_classic_description(rate, resolver=None) -> Markup:
    """Markup printed after a classic shipping rate row, empty when there is no description."""
    description = getattr(rate, 'description', '')
    if not description:
        resolver = resolver or get_request_resolver()
        description = resolver.resolve(getattr(rate, 'id', ''))
    if not description:
        return Markup('')
    return render_description_node(description)


def shipping_description_assets(page: str, surface: str) -> dict:
    """
    Assets for a storefront page: the stylesheet on cart and checkout pages, and
    the block script plus its description data only on the block surface.
    """
    assets = {'styles': [], 'scripts': [], 'script_data': None}
    if page not in ('cart', 'checkout'):
        return assets

    assets['styles'].append(url_for('static', filename='css/shipping-description.css'))
    if surface != SURFACE_BLOCK:
        return assets

    descriptions = get_request_resolver().build_description_map()
    assets['scripts'].append(url_for('static', filename='js/shipping-description-blocks.js'))
    assets['script_data'] = {
        'name': current_app.config.get('SHIPPING_DESCRIPTION_JS_GLOBAL', 'shippingDescriptions'),
        'value': {
            'descriptions': descriptions.to_dict(),
            'cssClass': description_css_class(),
            'delay': current_app.config.get('SHIPPING_DESCRIPTION_RERENDER_DELAY_MS', 100),
        },
    }
    return assets


def init_app(app):
    """Expose the classic description hook to templates."""
    app.jinja_env.globals['shipping_description_after_rate'] = render_classic_description

    @app.teardown_request
    def drop_shipping_description_resolver(exc=None):
        g.pop('shipping_description_resolver', None)
