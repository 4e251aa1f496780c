"""Domain entities."""

from shelfwise.core.entities.context import AuthContext
from shelfwise.core.entities.insight import BusinessInsight, InsightType
from shelfwise.core.entities.inventory import InventorySnapshot
from shelfwise.core.entities.invoice import (
    CONFIRMABLE_STATUSES,
    AlertType,
    Anomaly,
    AnomalyType,
    ExtractedLineItem,
    InventoryUpdate,
    Invoice,
    InvoiceMetadata,
    InvoiceParseResult,
    InvoiceStatus,
    MatchedLineItem,
    PricingAlert,
    Severity,
)
from shelfwise.core.entities.product import CatalogProduct
from shelfwise.core.entities.sale import Sale, SaleItem, SalesRow

__all__ = [
    "AuthContext",
    "BusinessInsight",
    "InsightType",
    "InventorySnapshot",
    "CONFIRMABLE_STATUSES",
    "AlertType",
    "Anomaly",
    "AnomalyType",
    "ExtractedLineItem",
    "InventoryUpdate",
    "Invoice",
    "InvoiceMetadata",
    "InvoiceParseResult",
    "InvoiceStatus",
    "MatchedLineItem",
    "PricingAlert",
    "Severity",
    "CatalogProduct",
    "Sale",
    "SaleItem",
    "SalesRow",
]
