from decimal import Decimal

import pytest
from bs4 import BeautifulSoup

from shipdesc.shipping.descriptions import DescriptionResolver
from shipdesc.shipping.rates import ShippingRate
from shipdesc.shipping.rendering import render_classic_description, shipping_description_assets
from shipdesc.shipping.sanitize import sanitize_description


def _rate(rate_id, description=''):
    method_id, instance_id = rate_id.split(':')
    return ShippingRate(id=rate_id, method_id=method_id, instance_id=instance_id,
                        label='Flat rate', cost=Decimal('10'), description=description)


class TestSanitizeDescription:

    def test_keeps_allowed_markup(self):
        html = '3-5 <strong>business</strong> days<br><a href="/shipping" title="Shipping">details</a>'
        assert sanitize_description(html) == html.replace('<br>', '<br/>')

    def test_drops_scripts_with_their_content(self):
        assert sanitize_description('Fast<script>alert("x")</script>') == 'Fast'

    def test_strips_event_handlers_and_styles(self):
        assert sanitize_description('<span onclick="steal()" style="color:red" class="note">Hi</span>') == \
            '<span class="note">Hi</span>'

    def test_unwraps_unknown_tags(self):
        assert sanitize_description('<div><h2>Ships</h2> today</div>') == 'Ships today'

    @pytest.mark.parametrize('href', [
        'javascript:alert(1)',
        ' JavaScript:alert(1)',
        'data:text/html,x',
        'vbscript:msgbox(1)',
        'java&#x09;script:alert(1)',
        'java&#x0A;script:alert(1)',
        'java&#x0D;script:alert(1)',
        '&#x01;javascript:alert(1)',
        'javascript&colon;alert(1)',
        'feed:https://example.com',
    ])
    def test_removes_unsafe_links(self, href):
        assert sanitize_description(f'<a href="{href}">x</a>') == '<a>x</a>'

    @pytest.mark.parametrize('href', [
        '/shipping', 'shipping#rates', 'https://example.com/rates', 'mailto:help@example.com', 'tel:+2201234567',
    ])
    def test_keeps_safe_links(self, href):
        assert sanitize_description(f'<a href="{href}">x</a>') == f'<a href="{href}">x</a>'

    @pytest.mark.parametrize('value', ['', None])
    def test_empty_input(self, value):
        assert sanitize_description(value) == ''


def test_classic_description_uses_rate_description(app):
    with app.test_request_context('/cart'):
        html = str(render_classic_description(_rate('flat_rate:5', '3-5 <b>business</b> days')))

    node = BeautifulSoup(html, 'html.parser').div
    assert node['class'] == ['shipping-method-description']
    assert node.decode_contents() == '3-5 <b>business</b> days'


def test_classic_description_falls_back_to_resolver(app, shipping_setup):
    rate = ShippingRate.from_instance(shipping_setup.local_pickup)

    with app.test_request_context('/cart'):
        html = str(render_classic_description(rate, DescriptionResolver()))

    assert 'Pick up in-store, ready in 1 hour' in html


def test_classic_description_is_empty_without_description(app, shipping_setup):
    rate = ShippingRate.from_instance(shipping_setup.free_shipping)

    with app.test_request_context('/cart'):
        assert str(render_classic_description(rate)) == ''


def test_classic_description_sanitizes_output(app):
    with app.test_request_context('/cart'):
        html = str(render_classic_description(_rate('flat_rate:5', '<img src=x onerror="alert(1)">Soon')))

    assert 'onerror' not in html
    assert '<img' not in html
    assert 'Soon' in html


def test_classic_description_uses_configured_css_class(app):
    app.config['SHIPPING_DESCRIPTION_CSS_CLASS'] = 'rate-note'
    with app.test_request_context('/cart'):
        html = str(render_classic_description(_rate('flat_rate:5', 'Soon')))

    assert html == '<div class="rate-note">Soon</div>'


class TestShippingDescriptionAssets:

    def test_classic_cart_gets_only_the_stylesheet(self, app, shipping_setup):
        with app.test_request_context('/cart'):
            assets = shipping_description_assets('cart', 'classic')

        assert assets['styles'] == ['/static/css/shipping-description.css']
        assert assets['scripts'] == []
        assert assets['script_data'] is None

    def test_block_checkout_gets_script_and_descriptions(self, app, shipping_setup):
        with app.test_request_context('/checkout'):
            assets = shipping_description_assets('checkout', 'block')

        assert assets['scripts'] == ['/static/js/shipping-description-blocks.js']
        assert assets['script_data']['name'] == 'shippingDescriptions'
        value = assets['script_data']['value']
        assert value['descriptions'][shipping_setup.flat_rate.rate_id] == '3-5 business days'
        assert value['cssClass'] == 'shipping-method-description'
        assert value['delay'] == 100

    def test_other_pages_get_nothing(self, app, shipping_setup):
        with app.test_request_context('/'):
            assets = shipping_description_assets('home', 'block')

        assert assets == {'styles': [], 'scripts': [], 'script_data': None}
