"""
Invoice domain entities with Pydantic v2 validation.

Extracted metadata fields are independently nullable: OCR or the language
model may fail to find any one of them, and downstream checks must tell
"absent" apart from zero.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shelfwise.core.entities.insight import BusinessInsight

_NULL_STRINGS = {"none", "nan", "null", "n/a", ""}


def coerce_optional_float(v: Any) -> float | None:
    """Convert numbers and numeric strings to float; None/empty/invalid to None."""
    if v is None or v == "":
        return None
    if isinstance(v, bool):
        return None
    if isinstance(v, (int, float)):
        return float(v)
    if isinstance(v, Decimal):
        return float(v)
    try:
        s = str(v).strip().replace(",", "").lstrip("$")
        if s.lower() in _NULL_STRINGS:
            return None
        return float(s)
    except (ValueError, TypeError, AttributeError):
        return None


def coerce_optional_str(v: Any) -> str | None:
    """Strip strings; None/empty/"null" to None."""
    if v is None:
        return None
    s = str(v).strip()
    if s.lower() in _NULL_STRINGS:
        return None
    return s


def coerce_optional_date(v: Any) -> date | None:
    """Convert string to date, accepting ISO format or common formats."""
    if v is None:
        return None
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    if isinstance(v, str):
        v = v.strip()
        if v.lower() in _NULL_STRINGS:
            return None
        for fmt in ("%Y-%m-%d", "%d/%m/%Y", "%m/%d/%Y", "%d-%m-%Y", "%Y/%m/%d"):
            try:
                return datetime.strptime(v, fmt).date()
            except ValueError:
                continue
    return None


class InvoiceStatus(str, Enum):
    """Invoice lifecycle status."""

    PROCESSING = "PROCESSING"
    PARSED = "PARSED"
    NEEDS_REVIEW = "NEEDS_REVIEW"
    ERROR = "ERROR"
    CONFIRMED = "CONFIRMED"


# Statuses from which an invoice may be confirmed
CONFIRMABLE_STATUSES = (InvoiceStatus.PARSED, InvoiceStatus.NEEDS_REVIEW)


class AlertType(str, Enum):
    """Pricing alert type."""

    PRICE_INCREASE = "PRICE_INCREASE"
    PRICE_DECREASE = "PRICE_DECREASE"
    NEW_PRODUCT = "NEW_PRODUCT"
    MARGIN_COMPRESSION = "MARGIN_COMPRESSION"


class AnomalyType(str, Enum):
    """Invoice-level anomaly type."""

    DUPLICATE_INVOICE = "DUPLICATE_INVOICE"
    QUANTITY_MISMATCH = "QUANTITY_MISMATCH"
    TOTAL_MISMATCH = "TOTAL_MISMATCH"
    SUSPICIOUS_CHARGE = "SUSPICIOUS_CHARGE"


class Severity(str, Enum):
    """Severity for alerts and anomalies."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class InvoiceMetadata(BaseModel):
    """Invoice header fields; every field may be missing."""

    supplier_name: str | None = None
    invoice_number: str | None = None
    invoice_date: date | None = None
    due_date: date | None = None
    subtotal: float | None = None
    taxes: float | None = None
    discounts: float | None = None
    total: float | None = None

    @field_validator("supplier_name", "invoice_number", mode="before")
    @classmethod
    def coerce_string(cls, v: Any) -> str | None:
        return coerce_optional_str(v)

    @field_validator("invoice_date", "due_date", mode="before")
    @classmethod
    def coerce_date(cls, v: Any) -> date | None:
        return coerce_optional_date(v)

    @field_validator("subtotal", "taxes", "discounts", "total", mode="before")
    @classmethod
    def coerce_numeric(cls, v: Any) -> float | None:
        return coerce_optional_float(v)


class ExtractedLineItem(BaseModel):
    """
    Line item as extracted from the invoice text.

    Immutable once produced. Quantity and unit cost default to 0.0 when the
    model omits them; negative values are rejected.
    """

    model_config = ConfigDict(frozen=True)

    description: str = Field(min_length=1)
    sku: str | None = None
    upc: str | None = None
    quantity: float = Field(default=0.0, ge=0)
    unit_cost: float = Field(default=0.0, ge=0)
    line_total: float = 0.0

    @field_validator("description", mode="before")
    @classmethod
    def coerce_description(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v).strip()

    @field_validator("sku", "upc", mode="before")
    @classmethod
    def coerce_code(cls, v: Any) -> str | None:
        return coerce_optional_str(v)

    @field_validator("quantity", "unit_cost", "line_total", mode="before")
    @classmethod
    def coerce_numeric(cls, v: Any) -> float:
        result = coerce_optional_float(v)
        return 0.0 if result is None else result


class MatchedLineItem(ExtractedLineItem):
    """Extracted line item resolved against the catalog."""

    matched_product_id: str | None = None
    matched_product_name: str | None = None
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)

    @property
    def is_matched(self) -> bool:
        return self.matched_product_id is not None


class PricingAlert(BaseModel):
    """Pricing change or margin warning for one line item."""

    type: AlertType
    product_name: str
    message: str
    severity: Severity
    old_value: float | None = None
    new_value: float | None = None


class Anomaly(BaseModel):
    """Advisory invoice-level finding. Never blocks confirmation."""

    type: AnomalyType
    message: str
    severity: Severity


class InventoryUpdate(BaseModel):
    """Audit record of one applied inventory/cost mutation."""

    product_id: str
    quantity_added: float
    new_cost: float
    previous_quantity: float = 0.0
    new_quantity: float = 0.0


class InvoiceParseResult(BaseModel):
    """Aggregate output of one pipeline run."""

    metadata: InvoiceMetadata = Field(default_factory=InvoiceMetadata)
    line_items: list[MatchedLineItem] = Field(default_factory=list)
    inventory_updates: list[InventoryUpdate] = Field(default_factory=list)
    pricing_alerts: list[PricingAlert] = Field(default_factory=list)
    anomalies: list[Anomaly] = Field(default_factory=list)
    business_insights: list[BusinessInsight] = Field(default_factory=list)
    raw_text: str = ""
    ocr_confidence: float = 0.0
    confidence: float = 0.0
    needs_review: bool = True
    low_confidence_lines: list[int] = Field(default_factory=list)
    extraction_errors: list[str] = Field(default_factory=list)

    @property
    def unmatched_count(self) -> int:
        return sum(1 for item in self.line_items if not item.is_matched)

    @property
    def calculated_total(self) -> float:
        """Sum of all line totals."""
        return sum(item.line_total for item in self.line_items)


class Invoice(BaseModel):
    """
    Supplier invoice record owned by the caller.

    Lifecycle: PROCESSING -> PARSED | NEEDS_REVIEW | ERROR -> CONFIRMED.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    store_id: str
    status: InvoiceStatus = InvoiceStatus.PROCESSING
    file_path: str
    original_filename: str | None = None

    # Denormalized header fields for listing
    supplier_name: str | None = None
    invoice_number: str | None = None
    invoice_date: date | None = None
    total_amount: float | None = None

    items: list[MatchedLineItem] = Field(default_factory=list)
    parse_result: InvoiceParseResult | None = None
    error_message: str | None = None

    confirmed_at: datetime | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def is_confirmed(self) -> bool:
        return self.status == InvoiceStatus.CONFIRMED

    def apply_result(self, result: InvoiceParseResult) -> None:
        """Record a successful pipeline run and move to PARSED or NEEDS_REVIEW."""
        self.parse_result = result
        self.items = list(result.line_items)
        self.supplier_name = result.metadata.supplier_name
        self.invoice_number = result.metadata.invoice_number
        self.invoice_date = result.metadata.invoice_date
        self.total_amount = result.metadata.total
        self.error_message = None
        self.status = (
            InvoiceStatus.NEEDS_REVIEW if result.needs_review else InvoiceStatus.PARSED
        )
        self.updated_at = datetime.utcnow()

    def mark_error(self, message: str) -> None:
        self.status = InvoiceStatus.ERROR
        self.error_message = message
        self.updated_at = datetime.utcnow()
