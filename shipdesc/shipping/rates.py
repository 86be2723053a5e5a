"""
Shipping Rates
Rate identifiers and the request-scoped rate objects shown on cart and checkout.
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Dict, NamedTuple

from shipdesc.shipping.constants import RATE_ID_SEPARATOR
from shipdesc.shipping.exceptions import InvalidRateIdException


class ShippingRateId(NamedTuple):
    """A rate identifier split into its method type and per-zone instance."""
    method_id: str
    instance_id: str

    def __str__(self):
        return f'{self.method_id}{RATE_ID_SEPARATOR}{self.instance_id}'


def parse_rate_id(rate_id) -> ShippingRateId:
    """
    Split '<method_id>:<instance_id>' into its two parts.

    Segments after the instance id are ignored ('table_rate:5:1' is instance 5
    of table_rate).

    Raises:
        InvalidRateIdException: if the id is empty, has fewer than two parts
        or either part is empty
    """
    if not rate_id or not isinstance(rate_id, str):
        raise InvalidRateIdException('Rate id is empty', rate_id=rate_id)

    parts = rate_id.strip().split(RATE_ID_SEPARATOR)
    if len(parts) < 2:
        raise InvalidRateIdException(f'Rate id {rate_id!r} has no instance part', rate_id=rate_id)

    method_id, instance_id = parts[0].strip(), parts[1].strip()
    if not method_id or not instance_id:
        raise InvalidRateIdException(f'Rate id {rate_id!r} has an empty part', rate_id=rate_id)

    return ShippingRateId(method_id, instance_id)


def _to_decimal(value) -> Decimal:
    try:
        return Decimal(str(value)) if value not in (None, '') else Decimal('0')
    except (InvalidOperation, ValueError):
        return Decimal('0')


@dataclass
class ShippingRate:
    """
    One selectable shipping option for the current cart.
    `description` starts empty and is filled by the description pass.
    """
    id: str
    method_id: str
    instance_id: str
    label: str
    cost: Decimal = Decimal('0')
    description: str = ''
    meta: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_instance(cls, instance) -> 'ShippingRate':
        """Build the rate offered by a configured method instance."""
        return cls(
            id=instance.rate_id,
            method_id=instance.method_id,
            instance_id=str(instance.instance_id),
            label=instance.title,
            cost=_to_decimal(instance.get_instance_option('cost')),
        )

    @property
    def cost_display(self) -> str:
        return f"{self.cost:,.2f}"

    def to_dict(self):
        """Store API representation of the rate."""
        return {
            'rate_id': self.id,
            'method_id': self.method_id,
            'instance_id': self.instance_id,
            'name': self.label,
            'price': str(self.cost),
            'price_display': self.cost_display,
            'description': self.description,
            'meta_data': dict(self.meta),
        }
