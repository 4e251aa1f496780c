"""
Application layer - Use cases, DTOs, and service factories.

This layer orchestrates business logic by:
1. Defining request DTOs for use case contracts
2. Implementing use cases that coordinate core services
3. Providing factory functions for dependency injection
"""

from shelfwise.application.dto.requests import (
    ConfirmInvoiceRequest,
    SetInitialStockRequest,
    UploadInvoiceRequest,
)
from shelfwise.application.services import (
    get_inventory_reconciler,
    get_invoice_pipeline,
    get_sales_ingestion_service,
    reset_services,
)
from shelfwise.application.use_cases import (
    ConfirmInvoiceUseCase,
    ImportSalesCsvUseCase,
    ReprocessInvoiceUseCase,
    SetInitialStockUseCase,
    UploadInvoiceUseCase,
)

__all__ = [
    # Request DTOs
    "UploadInvoiceRequest",
    "ConfirmInvoiceRequest",
    "SetInitialStockRequest",
    # Use Cases
    "UploadInvoiceUseCase",
    "ReprocessInvoiceUseCase",
    "ConfirmInvoiceUseCase",
    "ImportSalesCsvUseCase",
    "SetInitialStockUseCase",
    # Service factories
    "get_invoice_pipeline",
    "get_inventory_reconciler",
    "get_sales_ingestion_service",
    "reset_services",
]
