"""
Shipping Method Constants
Registry of shipping methods, their instance form fields and the block checkout DOM contract.
"""

from flask_babel import lazy_gettext as _l

RATE_ID_SEPARATOR = ':'

DESCRIPTION_KEY = 'description'

SHIPPING_METHODS = [
    {
        "id": "flat_rate",
        "label": _l("Flat rate"),
        "instance_form_fields": {
            "title": {
                "title": _l("Method title"),
                "type": "text",
                "default": "Flat rate",
            },
            "cost": {
                "title": _l("Cost"),
                "type": "price",
                "default": "0",
            },
        },
    },
    {
        "id": "free_shipping",
        "label": _l("Free shipping"),
        "instance_form_fields": {
            "title": {
                "title": _l("Method title"),
                "type": "text",
                "default": "Free shipping",
            },
            "min_amount": {
                "title": _l("Minimum order amount"),
                "type": "price",
                "default": "0",
            },
        },
    },
    {
        "id": "local_pickup",
        "label": _l("Local pickup"),
        "instance_form_fields": {
            "title": {
                "title": _l("Method title"),
                "type": "text",
                "default": "Local pickup",
            },
            "cost": {
                "title": _l("Cost"),
                "type": "price",
                "default": "0",
            },
        },
    },
]

DESCRIPTION_FIELD = {
    "title": _l("Description"),
    "type": "textarea",
    "description": _l("This text will appear below the shipping method on cart and checkout pages."),
    "default": "",
    "placeholder": _l("e.g., 3-5 business days"),
    "desc_tip": True,
    "css": "width: 100%;",
}

# Block checkout markup: option rows in their three render contexts
BLOCK_OPTION_SELECTORS = (
    ".radio-control-accordion-option",
    ".radio-control__option",
    ".shipping-rates-control__package .radio-control__option",
)
BLOCK_INPUT_NAME_PATTERN = "radio-control-"
BLOCK_INPUT_SELECTOR = f'input[type="radio"][name*="{BLOCK_INPUT_NAME_PATTERN}"]'
BLOCK_LABEL_SELECTOR = ".radio-control__label"
# Containers the checkout framework re-renders shipping options into
BLOCK_CONTAINER_SELECTORS = (
    ".shipping-rates-control",
    ".totals-shipping",
    ".checkout__shipping-option",
)
BLOCK_UPDATE_EVENTS = ("updated_checkout", "updated_cart_totals")


# Helper functions
def get_shipping_method(method_id: str) -> dict:
    """Get shipping method by ID."""
    for method in SHIPPING_METHODS:
        if method["id"] == method_id:
            return method
    return None


def get_all_shipping_methods() -> list:
    """Get all shipping methods."""
    return SHIPPING_METHODS


def get_shipping_method_ids() -> list:
    """Get list of all shipping method IDs."""
    return [method["id"] for method in SHIPPING_METHODS]


def is_valid_shipping_method(method_id: str) -> bool:
    """Check if a shipping method ID is valid."""
    return method_id in get_shipping_method_ids()
