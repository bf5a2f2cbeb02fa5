"""
Geolocation and exchange-rate provider integration.
"""

from .client import (
    DEFAULT_EXCHANGE_RATE,
    LocationInfo,
    get_currency_by_ip,
    get_exchange_rate,
    get_location_info,
)

__all__ = [
    "DEFAULT_EXCHANGE_RATE",
    "LocationInfo",
    "get_currency_by_ip",
    "get_exchange_rate",
    "get_location_info",
]
