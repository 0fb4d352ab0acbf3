"""
pricescan exceptions
"""


class PriceScanError(Exception):
    """Base exception for pricescan"""
    pass


class PatternBuildError(PriceScanError, ValueError):
    """Unknown separator style or unbuildable pattern"""
    pass


class InvalidSettingsError(PriceScanError):
    """Malformed price settings"""
    pass


class HandlerRegistrationError(PriceScanError):
    """Site handler registry error"""
    pass
