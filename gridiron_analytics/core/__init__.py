"""Core utilities shared across the analytics engine."""

from .exceptions import (
    AnalyticsError,
    AuthenticationRequiredError,
    DataServiceError,
    InvalidTierError,
    PlayerNotFoundError,
    TierFeatureDisabledError,
)

__all__ = [
    "AnalyticsError",
    "AuthenticationRequiredError",
    "DataServiceError",
    "InvalidTierError",
    "PlayerNotFoundError",
    "TierFeatureDisabledError",
]
