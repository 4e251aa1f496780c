"""Application use cases."""

from shelfwise.application.use_cases.confirm_invoice import ConfirmInvoiceUseCase, ConfirmResult
from shelfwise.application.use_cases.import_sales_csv import ImportSalesCsvUseCase
from shelfwise.application.use_cases.reprocess_invoice import ReprocessInvoiceUseCase
from shelfwise.application.use_cases.set_initial_stock import SetInitialStockUseCase
from shelfwise.application.use_cases.upload_invoice import UploadInvoiceUseCase, UploadResult

__all__ = [
    "UploadInvoiceUseCase",
    "UploadResult",
    "ReprocessInvoiceUseCase",
    "ConfirmInvoiceUseCase",
    "ConfirmResult",
    "ImportSalesCsvUseCase",
    "SetInitialStockUseCase",
]
