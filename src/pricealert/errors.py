from __future__ import annotations


class PriceAlertError(Exception):
    """Base class for fatal run errors."""


class ConfigError(PriceAlertError):
    pass


class PriceFetchError(PriceAlertError):
    pass


class StateStoreError(PriceAlertError):
    pass
