"""Request DTOs for use cases.

Pydantic v2 models. These are the contracts between callers and use cases.
"""

from pydantic import BaseModel, Field

from shelfwise.core.entities.invoice import MatchedLineItem


class UploadInvoiceRequest(BaseModel):
    """Request for invoice upload. File bytes are passed separately."""

    filename: str = Field(min_length=1, description="Original filename, used for the extension")


class ConfirmInvoiceRequest(BaseModel):
    """Request to confirm an invoice and apply it to inventory."""

    invoice_id: str = Field(min_length=1)
    items: list[MatchedLineItem] | None = Field(
        default=None,
        description="User-edited line items; the stored items are used when omitted",
    )


class SetInitialStockRequest(BaseModel):
    """Owner-confirmed starting stock for a product."""

    product_id: str = Field(min_length=1)
    quantity: float | None = Field(default=None, description="Units on hand; required, not negative")
