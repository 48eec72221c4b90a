"""Core infrastructure: settings, logging, exceptions."""

from .config import Settings, get_settings, settings
from .exceptions import (
    AppException,
    InvalidSymbolError,
    NoDataError,
    PriceFeedError,
    StoreError,
)


__all__ = [
    "AppException",
    "InvalidSymbolError",
    "NoDataError",
    "PriceFeedError",
    "Settings",
    "StoreError",
    "get_settings",
    "settings",
]
