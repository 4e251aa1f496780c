"""
Invoice auditor service.

Rule-based pricing alerts and total-consistency checks. Layer-pure: depends
only on core entities and interfaces.
"""

from shelfwise.config import ReconciliationThresholds, get_logger
from shelfwise.core.entities.context import AuthContext
from shelfwise.core.entities.invoice import (
    AlertType,
    Anomaly,
    AnomalyType,
    InvoiceMetadata,
    MatchedLineItem,
    PricingAlert,
    Severity,
)
from shelfwise.core.entities.product import CatalogProduct
from shelfwise.core.interfaces.catalog_store import ICatalogStore

logger = get_logger(__name__)


class InvoiceAuditor:
    """
    Pricing alerts and invoice total validation.

    Performs:
    - New product detection for unmatched lines
    - Cost change detection against the stored cost price
    - Margin compression detection against the selling price
    - Line-sum and grand-total reconciliation

    Findings are advisory; nothing here blocks confirmation.
    """

    def __init__(
        self,
        catalog_store: ICatalogStore | None = None,
        thresholds: ReconciliationThresholds | None = None,
    ) -> None:
        self._catalog_store = catalog_store
        self._thresholds = thresholds or ReconciliationThresholds()

    def detect_alerts(
        self,
        items: list[MatchedLineItem],
        catalog_by_id: dict[str, CatalogProduct],
    ) -> list[PricingAlert]:
        """
        Compare each line against its matched product.

        Args:
            items: Matched line items
            catalog_by_id: Current products keyed by id

        Returns:
            Alerts in line order
        """
        alerts: list[PricingAlert] = []

        for item in items:
            if not item.is_matched:
                alerts.append(
                    PricingAlert(
                        type=AlertType.NEW_PRODUCT,
                        product_name=item.description,
                        message=(
                            f'New product detected: "{item.description}" '
                            "- needs to be added to inventory"
                        ),
                        severity=Severity.LOW,
                    )
                )
                continue

            product = catalog_by_id.get(item.matched_product_id)
            if product is None:
                logger.warning(
                    "matched_product_missing",
                    product_id=item.matched_product_id,
                    description=item.description,
                )
                continue

            alerts.extend(self._cost_alerts(item, product))

        return alerts

    def _cost_alerts(self, item: MatchedLineItem, product: CatalogProduct) -> list[PricingAlert]:
        t = self._thresholds
        alerts: list[PricingAlert] = []
        old_cost = product.cost_price
        new_cost = item.unit_cost

        if old_cost > 0:
            pct = (new_cost - old_cost) / old_cost * 100
            if pct > t.price_change_threshold:
                alerts.append(
                    PricingAlert(
                        type=AlertType.PRICE_INCREASE,
                        product_name=product.name,
                        message=(
                            f"Price increased {pct:.1f}% "
                            f"from ${old_cost:.2f} to ${new_cost:.2f}"
                        ),
                        severity=(
                            Severity.HIGH if pct > t.price_spike_threshold else Severity.MEDIUM
                        ),
                        old_value=old_cost,
                        new_value=new_cost,
                    )
                )
            elif pct < -t.price_change_threshold:
                alerts.append(
                    PricingAlert(
                        type=AlertType.PRICE_DECREASE,
                        product_name=product.name,
                        message=(
                            f"Price decreased {abs(pct):.1f}% "
                            f"from ${old_cost:.2f} to ${new_cost:.2f}"
                        ),
                        severity=Severity.LOW,
                        old_value=old_cost,
                        new_value=new_cost,
                    )
                )

        selling = product.selling_price
        if selling > 0:
            margin = (selling - new_cost) / selling * 100
            if margin < t.margin_floor:
                alerts.append(
                    PricingAlert(
                        type=AlertType.MARGIN_COMPRESSION,
                        product_name=product.name,
                        message=f"Margin dropping to {margin:.1f}% - consider price adjustment",
                        severity=Severity.HIGH if margin < t.margin_critical else Severity.MEDIUM,
                        old_value=product.margin_percent,
                        new_value=margin,
                    )
                )

        return alerts

    async def detect_pricing_alerts(
        self,
        items: list[MatchedLineItem],
        ctx: AuthContext,
    ) -> list[PricingAlert]:
        """Load the caller's catalog and detect pricing alerts."""
        if self._catalog_store is None:
            raise RuntimeError("InvoiceAuditor requires a catalog store to load products")

        catalog = await self._catalog_store.list_all(ctx.store_id)
        alerts = self.detect_alerts(items, {p.id: p for p in catalog})

        logger.info(
            "pricing_alerts_detected",
            store_id=ctx.store_id,
            items=len(items),
            alerts=len(alerts),
        )
        return alerts

    def validate_totals(
        self,
        metadata: InvoiceMetadata,
        items: list[MatchedLineItem],
    ) -> list[Anomaly]:
        """
        Check line totals against the subtotal and the header arithmetic.

        A check runs only when every figure it needs is present.
        """
        tolerance = self._thresholds.total_tolerance
        anomalies: list[Anomaly] = []
        calculated = sum(item.line_total for item in items)

        if metadata.subtotal is not None and abs(calculated - metadata.subtotal) > tolerance:
            anomalies.append(
                Anomaly(
                    type=AnomalyType.TOTAL_MISMATCH,
                    message=(
                        f"Line items sum (${calculated:.2f}) doesn't match "
                        f"subtotal (${metadata.subtotal:.2f})"
                    ),
                    severity=Severity.MEDIUM,
                )
            )

        if (
            metadata.subtotal is not None
            and metadata.total is not None
            and metadata.taxes is not None
        ):
            expected = metadata.subtotal + metadata.taxes - (metadata.discounts or 0.0)
            if abs(expected - metadata.total) > tolerance:
                anomalies.append(
                    Anomaly(
                        type=AnomalyType.TOTAL_MISMATCH,
                        message=(
                            f"Invoice total (${metadata.total:.2f}) doesn't match "
                            f"calculated total (${expected:.2f})"
                        ),
                        severity=Severity.HIGH,
                    )
                )

        return anomalies
