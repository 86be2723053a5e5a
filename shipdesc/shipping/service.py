"""
Shipping Service
Business logic for shipping zones, method instances and the rates they offer.
"""

from typing import Dict, List, Optional, Tuple
from flask import current_app
from shipdesc.extensions import db
from shipdesc.shipping.constants import is_valid_shipping_method
from shipdesc.shipping.exceptions import (
    ShippingInstanceNotFoundException,
    ShippingSettingsValidationException,
    ShippingZoneNotFoundException,
    UnknownShippingMethodException,
)
from shipdesc.shipping.fields import get_instance_defaults, get_instance_form_fields
from shipdesc.shipping.models import REST_OF_WORLD_ZONE_ID, ShippingMethodInstance, ShippingZone
from shipdesc.shipping.rates import ShippingRate
from shipdesc.shipping.settings import SettingsStore
from sqlalchemy import func


class ShippingService:
    """Service class for shipping zones and method instance management."""

    @staticmethod
    def get_zones() -> List[ShippingZone]:
        """Configured zones, excluding the catch-all zone."""
        return ShippingZone.query.filter(
            ShippingZone.id != REST_OF_WORLD_ZONE_ID
        ).order_by(ShippingZone.zone_order, ShippingZone.id).all()

    @staticmethod
    def get_rest_of_world_zone() -> Optional[ShippingZone]:
        return db.session.get(ShippingZone, REST_OF_WORLD_ZONE_ID)

    @staticmethod
    def get_all_zones() -> List[ShippingZone]:
        """Configured zones followed by the catch-all zone, when it exists."""
        zones = ShippingService.get_zones()
        rest_of_world = ShippingService.get_rest_of_world_zone()
        if rest_of_world is not None:
            zones.append(rest_of_world)
        return zones

    @staticmethod
    def get_zone(zone_id: int) -> ShippingZone:
        zone = db.session.get(ShippingZone, zone_id)
        if zone is None:
            raise ShippingZoneNotFoundException(f'Shipping zone {zone_id} not found')
        return zone

    @staticmethod
    def get_instance(instance_id: int) -> ShippingMethodInstance:
        instance = db.session.get(ShippingMethodInstance, instance_id)
        if instance is None:
            raise ShippingInstanceNotFoundException(f'Shipping method instance {instance_id} not found')
        return instance

    @staticmethod
    def get_method_instance_index() -> Dict[Tuple[str, str], ShippingMethodInstance]:
        """
        Index every method instance of every zone (catch-all zone included) by
        (method_id, instance_id), both as strings.
        """
        index = {}
        for zone in ShippingService.get_all_zones():
            for method in zone.get_shipping_methods():
                index[(method.method_id, str(method.instance_id))] = method
        return index

    @staticmethod
    def create_zone(name: str, zone_order: int = 0, zone_id: Optional[int] = None) -> ShippingZone:
        """Create a zone; ids are assigned after the highest existing one unless given."""
        if zone_id is None:
            highest = db.session.query(func.max(ShippingZone.id)).scalar()
            zone_id = (highest or REST_OF_WORLD_ZONE_ID) + 1
        zone = ShippingZone(id=zone_id, name=name, zone_order=zone_order)
        db.session.add(zone)
        db.session.commit()
        current_app.logger.info(f'Shipping zone created: id={zone.id}, name={name}')
        return zone

    @staticmethod
    def ensure_rest_of_world_zone() -> ShippingZone:
        zone = ShippingService.get_rest_of_world_zone()
        if zone is None:
            zone = ShippingService.create_zone('Rest of the World', zone_order=0, zone_id=REST_OF_WORLD_ZONE_ID)
        return zone

    @staticmethod
    def add_method_instance(
        zone_id: int,
        method_id: str,
        settings: Optional[Dict] = None,
        enabled: bool = True
    ) -> ShippingMethodInstance:
        """
        Add a shipping method to a zone.

        Returns:
            The new instance, its settings seeded from the method's field defaults

        Raises:
            ShippingZoneNotFoundException, UnknownShippingMethodException
        """
        zone = ShippingService.get_zone(zone_id)
        if not is_valid_shipping_method(method_id):
            raise UnknownShippingMethodException(f"Shipping method '{method_id}' not found")

        values = get_instance_defaults(method_id)
        values.update(ShippingService.clean_instance_settings(method_id, settings or {}))

        method_order = len(zone.methods)
        instance = ShippingMethodInstance(
            zone_id=zone.id,
            method_id=method_id,
            method_order=method_order,
            enabled=enabled,
            settings={},
        )
        db.session.add(instance)
        # Flush to get the instance id used in the settings record name
        db.session.flush()
        SettingsStore().save_instance_settings(instance, values)
        current_app.logger.info(f'Shipping method instance added: {instance.rate_id} to zone {zone.id}')
        return instance

    @staticmethod
    def clean_instance_settings(method_id: str, data: Dict) -> Dict[str, str]:
        """
        Keep the keys the method's instance form declares, as stripped strings.

        Raises:
            ShippingSettingsValidationException: if a price field is not a non-negative number
        """
        fields = get_instance_form_fields(method_id)
        cleaned = {}
        errors = {}
        for key, value in data.items():
            definition = fields.get(key)
            if definition is None:
                continue
            value = '' if value is None else str(value).strip()
            if definition.get('type') == 'price' and value:
                try:
                    if float(value) < 0:
                        errors[key] = 'must be >= 0'
                except ValueError:
                    errors[key] = 'must be a number'
            cleaned[key] = value
        if errors:
            raise ShippingSettingsValidationException('Invalid shipping settings', errors=errors)
        return cleaned

    @staticmethod
    def update_instance_settings(
        instance_id: int,
        data: Dict,
        enabled: Optional[bool] = None
    ) -> ShippingMethodInstance:
        """Validate and persist new settings for an instance."""
        instance = ShippingService.get_instance(instance_id)
        cleaned = ShippingService.clean_instance_settings(instance.method_id, data)
        if enabled is not None:
            instance.enabled = enabled
        try:
            SettingsStore().save_instance_settings(instance, cleaned)
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f'Error updating shipping settings for {instance.rate_id}: {e}', exc_info=True)
            raise
        return instance

    @staticmethod
    def delete_instance(instance_id: int) -> None:
        """Delete an instance. Its settings record is left in place."""
        instance = ShippingService.get_instance(instance_id)
        rate_id = instance.rate_id
        db.session.delete(instance)
        db.session.commit()
        current_app.logger.info(f'Shipping method instance deleted: {rate_id} (settings record kept)')

    @staticmethod
    def get_package_rates(zone_id: Optional[int] = None) -> List[ShippingRate]:
        """
        Rates offered for a cart shipped to `zone_id` (catch-all zone when None).
        Costs are the instance's configured cost; no pricing happens here.
        """
        zone_id = REST_OF_WORLD_ZONE_ID if zone_id is None else zone_id
        zone = db.session.get(ShippingZone, zone_id)
        if zone is None:
            current_app.logger.warning(f'No shipping zone {zone_id}; offering no rates')
            return []
        return [ShippingRate.from_instance(method) for method in zone.get_shipping_methods(enabled_only=True)]
