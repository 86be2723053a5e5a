# Import all models for Alembic to detect them
from shipdesc.models.user import User
from shipdesc.shipping.models import ShippingZone, ShippingMethodInstance, ShippingOption

__all__ = [
    'User',
    'ShippingZone',
    'ShippingMethodInstance',
    'ShippingOption'
]
