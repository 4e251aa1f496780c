"""Business insight entity derived from invoice reconciliation."""

from enum import Enum

from pydantic import BaseModel


class InsightType(str, Enum):
    """Category of business insight."""

    MARGIN_ALERT = "MARGIN_ALERT"
    PRICE_TREND = "PRICE_TREND"
    REORDER_SUGGESTION = "REORDER_SUGGESTION"
    PROFITABILITY_WARNING = "PROFITABILITY_WARNING"


class BusinessInsight(BaseModel):
    """
    A human-readable takeaway for the store owner.

    Pure Pydantic model, not persisted on its own. Generated from pricing
    alerts and match results by the insight generator.
    """

    type: InsightType
    title: str
    description: str
    action_recommended: str | None = None
