"""
Shipping Exceptions
Custom exceptions for shipping settings and description lookups.
"""


class ShippingException(Exception):
    """Base exception for shipping-related errors."""
    pass


class InvalidRateIdException(ShippingException):
    """Exception raised when a shipping rate id is not '<method_id>:<instance_id>'."""
    def __init__(self, message, rate_id=None):
        super().__init__(message)
        self.rate_id = rate_id


class ShippingZoneNotFoundException(ShippingException):
    """Exception raised when a shipping zone does not exist."""
    pass


class ShippingInstanceNotFoundException(ShippingException):
    """Exception raised when a shipping method instance does not exist."""
    pass


class UnknownShippingMethodException(ShippingException):
    """Exception raised when a method id is not in the shipping method registry."""
    pass


class ShippingSettingsValidationException(ShippingException):
    """Exception raised when submitted instance settings fail validation."""
    def __init__(self, message, errors=None):
        super().__init__(message)
        self.errors = errors or {}
