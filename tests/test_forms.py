import pytest
from wtforms import TextAreaField

from shipdesc.shipping.constants import get_shipping_method_ids
from shipdesc.shipping.exceptions import UnknownShippingMethodException
from shipdesc.shipping.fields import (
    add_description_field,
    get_instance_defaults,
    get_instance_form_fields,
    register_shipping_method_fields,
)
from shipdesc.shipping.forms import build_instance_form_class, instance_form_data


@pytest.mark.parametrize('method_id', get_shipping_method_ids())
def test_every_method_gets_a_description_field(app, method_id):
    fields = get_instance_form_fields(method_id)

    description = fields['description']
    assert description['type'] == 'textarea'
    assert str(description['placeholder']) == 'e.g., 3-5 business days'
    assert str(description['description']) == \
        'This text will appear below the shipping method on cart and checkout pages.'
    assert description['default'] == ''


def test_registering_twice_adds_the_field_once(app):
    register_shipping_method_fields()
    register_shipping_method_fields()

    assert list(get_instance_form_fields('flat_rate')).count('description') == 1


def test_add_description_field_keeps_existing_fields():
    fields = add_description_field({'title': {'type': 'text'}})

    assert list(fields) == ['title', 'description']


def test_unknown_method_has_no_fields(app):
    with pytest.raises(UnknownShippingMethodException):
        get_instance_form_fields('teleport')


def test_instance_defaults_include_empty_description(app):
    assert get_instance_defaults('local_pickup') == {'title': 'Local pickup', 'cost': '0', 'description': ''}


def test_instance_form_renders_description_textarea(app):
    with app.test_request_context('/admin/shipping/instances/1'):
        form = build_instance_form_class('flat_rate')(data={'title': 'Flat rate', 'description': '3-5 business days'})
        html = form.description()

    assert isinstance(form.description, TextAreaField)
    assert 'placeholder="e.g., 3-5 business days"' in html
    assert '3-5 business days</textarea>' in html


def test_instance_form_data_returns_strings(app):
    with app.test_request_context(
        '/admin/shipping/instances/1', method='POST',
        data={'title': 'Flat rate', 'cost': '12.50', 'description': ' Soon '}
    ):
        form = build_instance_form_class('flat_rate')()
        assert form.validate()
        data = instance_form_data(form)

    assert data == {'title': 'Flat rate', 'cost': '12.50', 'description': ' Soon '}
