"""
Shipping Models
Database models for shipping zones, method instances and their persisted settings.
"""

from datetime import datetime
from shipdesc.extensions import db
from sqlalchemy import Index


# Zone 0 is the catch-all zone used when no other zone matches
REST_OF_WORLD_ZONE_ID = 0


def instance_settings_option_name(method_id, instance_id) -> str:
    """Name of the settings record holding one method instance's settings."""
    return f'shipping_{method_id}_{instance_id}_settings'


class ShippingZone(db.Model):
    """
    A named group of shipping method instances for a set of destinations.
    """
    __tablename__ = 'shipping_zones'

    id = db.Column(db.Integer, primary_key=True, autoincrement=False)
    name = db.Column(db.String(255), nullable=False)
    zone_order = db.Column(db.Integer, default=0, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    methods = db.relationship('ShippingMethodInstance', backref='zone', lazy=True,
                              order_by='ShippingMethodInstance.method_order')

    def __repr__(self):
        return f'<ShippingZone {self.id}: {self.name}>'

    @property
    def is_rest_of_world(self) -> bool:
        return self.id == REST_OF_WORLD_ZONE_ID

    def get_shipping_methods(self, enabled_only=False):
        """Method instances configured in this zone."""
        if enabled_only:
            return [method for method in self.methods if method.enabled]
        return list(self.methods)

    def to_dict(self, include_methods=True):
        """Convert shipping zone to dictionary."""
        data = {
            'id': self.id,
            'name': self.name,
            'zone_order': self.zone_order,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }
        if include_methods:
            data['shipping_methods'] = [method.to_dict() for method in self.methods]
        return data


class ShippingMethodInstance(db.Model):
    """
    One configured shipping method inside a zone, e.g. "Flat rate" in "Domestic".
    Rates for this instance are identified as '<method_id>:<instance_id>'.
    """
    __tablename__ = 'shipping_method_instances'

    instance_id = db.Column(db.Integer, primary_key=True)
    zone_id = db.Column(db.Integer, db.ForeignKey('shipping_zones.id', ondelete='CASCADE'), nullable=False, index=True)
    method_id = db.Column(db.String(100), nullable=False)  # 'flat_rate', 'free_shipping', 'local_pickup'
    method_order = db.Column(db.Integer, default=0, nullable=False)
    enabled = db.Column(db.Boolean, default=True, nullable=False)
    settings = db.Column(db.JSON, nullable=False, default=dict)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index('idx_method_instance', 'method_id', 'instance_id'),
    )

    def __repr__(self):
        return f'<ShippingMethodInstance {self.rate_id} zone={self.zone_id}>'

    @property
    def rate_id(self) -> str:
        return f'{self.method_id}:{self.instance_id}'

    @property
    def title(self) -> str:
        return self.get_instance_option('title') or self.method_id

    @property
    def settings_option_name(self) -> str:
        return instance_settings_option_name(self.method_id, self.instance_id)

    def get_instance_option(self, key, default=''):
        """Read one setting of this instance."""
        return (self.settings or {}).get(key, default)

    def to_dict(self):
        """Convert method instance to dictionary."""
        return {
            'instance_id': self.instance_id,
            'zone_id': self.zone_id,
            'method_id': self.method_id,
            'rate_id': self.rate_id,
            'title': self.title,
            'method_order': self.method_order,
            'enabled': self.enabled,
            'settings': dict(self.settings or {}),
        }


class ShippingOption(db.Model):
    """
    Persisted settings record keyed by name.
    Method instance settings live under instance_settings_option_name(); the record
    outlives the instance when the instance is deleted.
    """
    __tablename__ = 'shipping_options'

    id = db.Column(db.Integer, primary_key=True)
    option_name = db.Column(db.String(191), unique=True, nullable=False, index=True)
    option_value = db.Column(db.JSON, nullable=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f'<ShippingOption {self.option_name}>'
