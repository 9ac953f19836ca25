"""Custom exceptions for the film analytics engine.

Custom exceptions let callers tell apart the three situations a coach can
run into when opening an analytics page:

1. Feature disabled for the team's tier -> prompt an upgrade
   (TierFeatureDisabledError)
2. No data yet -> NOT an exception; calculators return zero-valued records
   or empty lists
3. Request failed -> generic retry messaging (DataServiceError)

Inheritance Pattern:
Everything inherits from AnalyticsError so callers can catch the whole family,
or one specific type when they need to react differently.

Usage Examples:
- raise TierFeatureDisabledError("ol_tracking", "plus")
- raise AuthenticationRequiredError("Not authenticated")
- raise DataServiceError("Failed to fetch drives") from exc
"""


class AnalyticsError(Exception):
    """Base exception for analytics engine errors."""
    pass


class TierFeatureDisabledError(AnalyticsError):
    """Raised when a statistic is requested that the team's tier does not include.

    The tier gate runs before any data is fetched, so raising this costs no
    queries. The feature and tier are kept as attributes so the API layer can
    return them to the client (which renders an upgrade prompt).

    Example:
    ```python
    if not config.enable_ol_tracking:
        raise TierFeatureDisabledError("ol_tracking", config.tier.value)
    ```
    """

    def __init__(self, feature: str, tier: str):
        self.feature = feature
        self.tier = tier
        label = FEATURE_LABELS.get(feature, feature)
        super().__init__(f"{label} not enabled for this team tier ({tier})")


class AuthenticationRequiredError(AnalyticsError):
    """Raised when a mutating call arrives without a caller identity.

    Role checks (owner/coach) are the caller's job; this engine only refuses
    to write a configuration nobody can be held accountable for.
    """
    pass


class InvalidTierError(AnalyticsError, ValueError):
    """Raised for unknown tier names or unknown configuration keys."""
    pass


class PlayerNotFoundError(AnalyticsError, LookupError):
    """Raised when a single-player profile is requested for an unknown player."""

    def __init__(self, player_id: str):
        self.player_id = player_id
        super().__init__(f"Player not found: {player_id}")


class DataServiceError(AnalyticsError):
    """Raised when the data store fails (connection loss, bad query, timeout).

    Always raised with `from` so the original driver error stays in the
    traceback.
    """
    pass


# Human readable names used in TierFeatureDisabledError messages
FEATURE_LABELS = {
    "drive_analytics": "Drive analytics",
    "player_attribution": "Player attribution",
    "ol_tracking": "OL tracking",
    "defensive_tracking": "Defensive tracking",
    "situational_splits": "Situational splits",
}
