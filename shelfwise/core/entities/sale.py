"""Point-of-sale domain entities."""

from datetime import datetime
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from shelfwise.core.entities.invoice import coerce_optional_float


class SalesRow(BaseModel):
    """
    One raw row from a POS sales export.

    Column aliases follow the export header (receiptId, productName, ...).
    Quantity and unit price stay None when blank or unparseable; the
    ingestion service applies the defaults.
    """

    model_config = ConfigDict(populate_by_name=True)

    receipt_id: str | None = Field(default=None, alias="receiptId")
    date: str | None = None
    product_name: str | None = Field(default=None, alias="productName")
    barcode: str | None = None
    quantity: float | None = None
    unit_price: float | None = Field(default=None, alias="unitPrice")
    payment_method: str | None = Field(default=None, alias="paymentMethod")

    @field_validator(
        "receipt_id", "date", "product_name", "barcode", "payment_method", mode="before"
    )
    @classmethod
    def coerce_string(cls, v: Any) -> str | None:
        if v is None:
            return None
        s = str(v).strip()
        return s or None

    @field_validator("quantity", "unit_price", mode="before")
    @classmethod
    def coerce_numeric(cls, v: Any) -> float | None:
        return coerce_optional_float(v)


class SaleItem(BaseModel):
    """A single product line on a sale."""

    id: int | None = None
    sale_id: str | None = None
    product_id: str
    quantity: float
    unit_price: float
    line_total: float = 0.0

    @model_validator(mode="after")
    def compute_line(self) -> "SaleItem":
        """Compute line_total from quantity and unit_price."""
        self.line_total = self.quantity * self.unit_price
        return self


class Sale(BaseModel):
    """One receipt worth of sold items."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    store_id: str
    receipt_id: str
    source: str = "CSV_IMPORT"
    total_amount: float = 0.0
    sold_at: datetime = Field(default_factory=datetime.utcnow)
    items: list[SaleItem] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    @model_validator(mode="after")
    def compute_total(self) -> "Sale":
        """Compute total_amount from items."""
        if self.items:
            self.total_amount = sum(i.line_total for i in self.items)
        return self
