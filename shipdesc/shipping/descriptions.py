"""
Shipping Method Descriptions
Resolves the merchant-configured description of a shipping rate.
"""

import json
from collections.abc import Mapping
from typing import Dict, Iterable, Optional, Tuple

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from shipdesc.shipping.constants import DESCRIPTION_KEY
from shipdesc.shipping.exceptions import InvalidRateIdException
from shipdesc.shipping.rates import parse_rate_id
from shipdesc.shipping.sanitize import sanitize_description
from shipdesc.shipping.service import ShippingService
from shipdesc.shipping.settings import SettingsStore


class DescriptionMap(Mapping):
    """
    Read-only mapping of rate id -> description HTML for one page view.
    Only non-empty descriptions are kept.
    """

    def __init__(self, descriptions: Optional[Dict[str, str]] = None):
        self._descriptions = {
            str(rate_id): text
            for rate_id, text in (descriptions or {}).items()
            if text
        }

    def __getitem__(self, rate_id):
        return self._descriptions[rate_id]

    def __iter__(self):
        return iter(self._descriptions)

    def __len__(self):
        return len(self._descriptions)

    def __repr__(self):
        return f'<DescriptionMap {len(self)} rates>'

    def to_dict(self) -> Dict[str, str]:
        return dict(self._descriptions)

    def to_json(self) -> str:
        return json.dumps(self._descriptions)


class DescriptionResolver:
    """
    Looks up the description of a rate id. First non-empty value wins:

    1. the description already set on the rate object in this request
    2. the 'description' setting of the matching method instance
    3. the 'description' key of the instance's persisted settings record
    4. ''

    The method instance index is built once per resolver; create one
    resolver per request.
    """

    def __init__(self, settings_store: Optional[SettingsStore] = None):
        self.settings_store = settings_store or SettingsStore()
        self._instance_index = None

    @property
    def instance_index(self) -> Dict[Tuple[str, str], object]:
        if self._instance_index is None:
            try:
                self._instance_index = ShippingService.get_method_instance_index()
            except SQLAlchemyError as e:
                current_app.logger.warning(f'Shipping method lookup unavailable: {e}')
                self._instance_index = {}
        return self._instance_index

    def resolve(self, rate_id, rate=None) -> str:
        """Return the description for `rate_id`, or '' if none is configured."""
        description = getattr(rate, 'description', '') if rate is not None else ''
        if description:
            return description

        try:
            method_id, instance_id = parse_rate_id(rate_id)
        except InvalidRateIdException:
            return ''

        instance = self.instance_index.get((method_id, instance_id))
        if instance is not None:
            description = self.settings_store.get_instance_option(instance, DESCRIPTION_KEY)
            if description:
                return description

        settings = self.settings_store.get_instance_settings(method_id, instance_id)
        return settings.get(DESCRIPTION_KEY) or ''

    def add_description_to_rates(self, rates: Iterable):
        """Store each rate's resolved description on the rate object."""
        rates = list(rates)
        for rate in rates:
            description = self.resolve(getattr(rate, 'id', ''), rate)
            if description:
                rate.description = description
        return rates

    def build_description_map(self) -> DescriptionMap:
        """Descriptions of every configured method instance, sanitized for the page."""
        descriptions = {}
        for method_id, instance_id in self.instance_index:
            rate_id = f'{method_id}:{instance_id}'
            description = sanitize_description(self.resolve(rate_id))
            if description:
                descriptions[rate_id] = description
        current_app.logger.debug(f'Built shipping description map with {len(descriptions)} entries')
        return DescriptionMap(descriptions)
