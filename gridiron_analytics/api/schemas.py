"""
Pydantic schemas for API request/response models.

Statistic records leave the engine as camelCase dicts (the UI contract), so
responses are mostly plain JSON. The schemas here cover request validation and
the few small responses with a fixed shape.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

# ========== TIER SCHEMAS ==========


class TierUpdateRequest(BaseModel):
    """
    Body of PUT /api/teams/{team_id}/analytics/tier.

    Both fields are optional; only the ones present are changed. Extra keys
    are rejected so a client cannot try to flip feature flags directly.
    """

    model_config = ConfigDict(extra="forbid")

    tier: str | None = Field(default=None, description="basic, plus, premium, ai_powered (legacy names accepted)")
    default_tagging_mode: Literal["quick", "standard", "advanced"] | None = None

    def changes(self) -> dict:
        """Only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class TierFeatureDisabledResponse(BaseModel):
    """Body returned with HTTP 403 when the tier does not include a statistic."""

    detail: str
    feature: str
    tier: str
    error: str = "tier_feature_disabled"


class ErrorResponse(BaseModel):
    """Body returned for every other mapped engine error."""

    detail: str
    error: str


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
