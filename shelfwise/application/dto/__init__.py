"""Data transfer objects for the application layer."""

from shelfwise.application.dto.requests import (
    ConfirmInvoiceRequest,
    SetInitialStockRequest,
    UploadInvoiceRequest,
)

__all__ = [
    "UploadInvoiceRequest",
    "ConfirmInvoiceRequest",
    "SetInitialStockRequest",
]
