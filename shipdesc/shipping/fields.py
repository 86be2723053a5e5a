"""
Shipping Instance Form Fields
Field definitions for shipping method instance settings, with per-method filters.
"""

from collections import defaultdict
from typing import Callable, Dict, List

from shipdesc.shipping.constants import (
    DESCRIPTION_FIELD,
    DESCRIPTION_KEY,
    get_shipping_method,
    get_shipping_method_ids,
)
from shipdesc.shipping.exceptions import UnknownShippingMethodException

FieldFilter = Callable[[Dict[str, dict]], Dict[str, dict]]

_field_filters: Dict[str, List[FieldFilter]] = defaultdict(list)


def add_instance_form_fields_filter(method_id: str, field_filter: FieldFilter) -> None:
    """Register a filter applied to one method's instance form fields."""
    if field_filter not in _field_filters[method_id]:
        _field_filters[method_id].append(field_filter)


def clear_instance_form_fields_filters() -> None:
    _field_filters.clear()


def add_description_field(fields: Dict[str, dict]) -> Dict[str, dict]:
    """Add the 'description' textarea to a method's instance form fields."""
    fields[DESCRIPTION_KEY] = dict(DESCRIPTION_FIELD)
    return fields


def register_shipping_method_fields() -> None:
    """Attach the description field to every registered shipping method."""
    for method_id in get_shipping_method_ids():
        add_instance_form_fields_filter(method_id, add_description_field)


def get_instance_form_fields(method_id: str) -> Dict[str, dict]:
    """
    Instance form fields for a shipping method after all filters ran.

    Raises:
        UnknownShippingMethodException: if the method is not registered
    """
    method = get_shipping_method(method_id)
    if method is None:
        raise UnknownShippingMethodException(f"Shipping method '{method_id}' not found")

    fields = {key: dict(definition) for key, definition in method['instance_form_fields'].items()}
    for field_filter in _field_filters.get(method_id, []):
        fields = field_filter(fields)
    return fields


def get_instance_defaults(method_id: str) -> Dict[str, str]:
    """Default settings for a new instance of `method_id`."""
    return {
        key: str(definition.get('default', ''))
        for key, definition in get_instance_form_fields(method_id).items()
    }
