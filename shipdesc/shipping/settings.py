"""
Shipping Settings Store
Reads and writes per-instance shipping method settings.
"""

from typing import Any, Dict, Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from shipdesc.extensions import db
from shipdesc.shipping.models import ShippingOption, instance_settings_option_name


class SettingsStore:
    """
    Key/value settings for shipping method instances.

    Instance settings are kept twice: on the instance row (read through
    get_instance_option) and in the named settings record (read through
    get_option), which survives instance deletion.
    """

    def get_instance_option(self, instance, key: str, default: str = '') -> Any:
        if instance is None or not hasattr(instance, 'get_instance_option'):
            return default
        return instance.get_instance_option(key, default)

    def get_option(self, option_name: str, default: Optional[Dict] = None) -> Any:
        """Direct read of a settings record; returns `default` when missing or unreadable."""
        try:
            option = ShippingOption.query.filter_by(option_name=option_name).first()
        except SQLAlchemyError as e:
            current_app.logger.warning(f'Could not read shipping option {option_name}: {e}')
            return default
        if option is None or option.option_value is None:
            return default
        return option.option_value

    def get_instance_settings(self, method_id: str, instance_id) -> Dict:
        settings = self.get_option(instance_settings_option_name(method_id, instance_id), {})
        return settings if isinstance(settings, dict) else {}

    def update_option(self, option_name: str, value) -> ShippingOption:
        """Create or replace a settings record (caller commits)."""
        option = ShippingOption.query.filter_by(option_name=option_name).first()
        if option is None:
            option = ShippingOption(option_name=option_name)
            db.session.add(option)
        option.option_value = value
        return option

    def save_instance_settings(self, instance, settings: Dict) -> Dict:
        """Merge `settings` into the instance and mirror them into its settings record."""
        merged = dict(instance.settings or {})
        merged.update(settings)
        # Reassign so SQLAlchemy sees the JSON column change
        instance.settings = merged
        self.update_option(instance.settings_option_name, dict(merged))
        db.session.commit()
        current_app.logger.info(
            f'Saved shipping settings for {instance.rate_id}: keys={sorted(settings.keys())}'
        )
        return merged
