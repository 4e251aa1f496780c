"""
Business insight generator.

Summarizes match results and pricing alerts into owner-facing insights.
Pure: no stores, no I/O.
"""

from shelfwise.config import ReconciliationThresholds, get_logger
from shelfwise.core.entities.insight import BusinessInsight, InsightType
from shelfwise.core.entities.invoice import AlertType, MatchedLineItem, PricingAlert

logger = get_logger(__name__)


class InsightGenerator:
    """Rule-based insights over one invoice's lines and alerts."""

    def __init__(self, thresholds: ReconciliationThresholds | None = None) -> None:
        self._thresholds = thresholds or ReconciliationThresholds()

    def generate(
        self,
        items: list[MatchedLineItem],
        alerts: list[PricingAlert],
    ) -> list[BusinessInsight]:
        insights: list[BusinessInsight] = []

        unmatched = sum(1 for item in items if not item.is_matched)
        if unmatched > 0:
            insights.append(
                BusinessInsight(
                    type=InsightType.REORDER_SUGGESTION,
                    title="New Products Detected",
                    description=(
                        f"{unmatched} product(s) on this invoice don't match your "
                        "inventory. Review and add them."
                    ),
                    action_recommended="Review unmatched items and add to inventory",
                )
            )

        margin_alerts = sum(1 for a in alerts if a.type == AlertType.MARGIN_COMPRESSION)
        if margin_alerts > 0:
            insights.append(
                BusinessInsight(
                    type=InsightType.MARGIN_ALERT,
                    title="Margin Pressure",
                    description=(
                        f"{margin_alerts} product(s) have margins below "
                        f"{self._thresholds.margin_floor:g}%. Consider raising retail prices."
                    ),
                    action_recommended="Review pricing for low-margin items",
                )
            )

        increases = sum(1 for a in alerts if a.type == AlertType.PRICE_INCREASE)
        if increases >= self._thresholds.price_trend_min_increases:
            insights.append(
                BusinessInsight(
                    type=InsightType.PRICE_TREND,
                    title="Supplier Pricing Trend",
                    description=(
                        f"Multiple price increases detected ({increases} items). "
                        "Supplier may be raising prices across the board."
                    ),
                    action_recommended="Consider negotiating with supplier or finding alternatives",
                )
            )

        logger.debug(
            "business_insights_generated",
            unmatched=unmatched,
            margin_alerts=margin_alerts,
            price_increases=increases,
            insights=len(insights),
        )
        return insights
