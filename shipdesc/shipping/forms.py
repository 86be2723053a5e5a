"""
Shipping Instance Settings Forms
WTForms built from each shipping method's instance form field definitions.
"""

from flask_babel import lazy_gettext as _l
from flask_wtf import FlaskForm
from wtforms import BooleanField, DecimalField, StringField, SubmitField, TextAreaField
from wtforms.validators import DataRequired, NumberRange, Optional as OptionalValue

from shipdesc.shipping.fields import get_instance_form_fields

FIELD_TYPES = {
    'text': StringField,
    'textarea': TextAreaField,
    'price': DecimalField,
}


class ShippingInstanceBaseForm(FlaskForm):
    enabled = BooleanField(_l('Enabled'), default=True)
    submit = SubmitField(_l('Save changes'))


def _build_field(key, definition):
    field_class = FIELD_TYPES.get(definition.get('type'), StringField)
    render_kw = {}
    if definition.get('placeholder'):
        render_kw['placeholder'] = definition['placeholder']
    if definition.get('css'):
        render_kw['style'] = definition['css']

    validators = []
    extra = {}
    if key == 'title':
        validators.append(DataRequired())
    elif field_class is DecimalField:
        validators.extend([OptionalValue(), NumberRange(min=0)])
        # Stored settings are strings; show them as entered
        extra['places'] = None
    else:
        validators.append(OptionalValue())

    return field_class(
        definition.get('title', key),
        validators=validators,
        default=definition.get('default') or None,
        description=definition.get('description', ''),
        render_kw=render_kw,
        **extra
    )


def build_instance_form_class(method_id):
    """Form class holding every instance field of `method_id`, filters included."""
    fields = get_instance_form_fields(method_id)
    attributes = {key: _build_field(key, definition) for key, definition in fields.items()}
    attributes['field_keys'] = tuple(fields.keys())
    return type(f'{method_id.title().replace("_", "")}InstanceForm', (ShippingInstanceBaseForm,), attributes)


def instance_form_data(form):
    """Submitted settings as strings keyed like the stored instance settings."""
    data = {}
    for key in form.field_keys:
        value = form[key].data
        data[key] = '' if value is None else str(value)
    return data
