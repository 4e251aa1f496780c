"""
Domain exceptions for the Shelfwise application.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class ShelfwiseError(Exception):
    """Base exception for all Shelfwise errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for callers rendering the error."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Storage Exceptions
class StorageError(ShelfwiseError):
    """Base exception for storage operations."""

    pass


class ProductNotFoundError(StorageError):
    """Catalog product not found."""

    def __init__(self, product_id: str, store_id: str | None = None):
        super().__init__(
            f"Product not found: {product_id}",
            code="PRODUCT_NOT_FOUND",
            details={"product_id": product_id, "store_id": store_id},
        )


class InvoiceNotFoundError(StorageError):
    """Invoice not found in storage."""

    def __init__(self, invoice_id: str):
        super().__init__(
            f"Invoice not found: {invoice_id}",
            code="INVOICE_NOT_FOUND",
            details={"invoice_id": invoice_id},
        )


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


# LLM Exceptions
class LLMError(ShelfwiseError):
    """Base exception for LLM operations."""

    pass


class LLMUnavailableError(LLMError):
    """LLM provider is not available."""

    def __init__(self, provider: str, reason: str | None = None):
        super().__init__(
            f"LLM provider unavailable: {provider}" + (f" - {reason}" if reason else ""),
            code="LLM_UNAVAILABLE",
            details={"provider": provider, "reason": reason},
        )


class LLMTimeoutError(LLMError):
    """LLM request timed out."""

    def __init__(self, timeout: int, operation: str = "generation"):
        super().__init__(
            f"LLM {operation} timed out after {timeout} seconds",
            code="LLM_TIMEOUT",
            details={"timeout": timeout, "operation": operation},
        )


class LLMResponseError(LLMError):
    """LLM returned an empty or unusable response."""

    def __init__(self, reason: str, response: str | None = None):
        super().__init__(
            f"Invalid LLM response: {reason}",
            code="LLM_RESPONSE_ERROR",
            details={"reason": reason, "response_preview": (response or "")[:200]},
        )


class ModelNotFoundError(LLMError):
    """Requested model not found."""

    def __init__(self, model: str, provider: str):
        super().__init__(
            f"Model '{model}' not found on {provider}",
            code="MODEL_NOT_FOUND",
            details={"model": model, "provider": provider},
        )


class CircuitBreakerOpenError(LLMError):
    """Circuit breaker is open due to repeated failures."""

    def __init__(self, provider: str, cooldown_remaining: int):
        super().__init__(
            f"Circuit breaker open for {provider}, retry in {cooldown_remaining}s",
            code="CIRCUIT_BREAKER_OPEN",
            details={"provider": provider, "cooldown_remaining": cooldown_remaining},
        )


# Extraction Exceptions
class ExtractionError(ShelfwiseError):
    """
    OCR or language-model extraction failed.

    Fatal for the current pipeline run; the invoice moves to ERROR.
    """

    def __init__(self, source: str, reason: str, stage: str = "ocr"):
        super().__init__(
            f"Failed to extract {'text' if stage == 'ocr' else 'invoice data'} "
            f"from '{source}': {reason}",
            code="EXTRACTION_ERROR",
            details={"source": source, "reason": reason, "stage": stage},
        )


# Invoice Workflow Exceptions
class InvoiceStateError(ShelfwiseError):
    """Requested action is not allowed in the invoice's current state."""

    def __init__(self, invoice_id: str, status: str, action: str):
        super().__init__(
            f"Cannot {action} invoice {invoice_id} in status {status}",
            code="INVALID_INVOICE_STATE",
            details={"invoice_id": invoice_id, "status": status, "action": action},
        )


class ConfirmationConflictError(InvoiceStateError):
    """Invoice was already confirmed."""

    def __init__(self, invoice_id: str):
        super().__init__(invoice_id, "CONFIRMED", "confirm")
        self.code = "CONFIRMATION_CONFLICT"
        self.message = f"Invoice {invoice_id} has already been confirmed"
        self.args = (self.message,)


# Validation Exceptions
class ValidationError(ShelfwiseError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class InvalidStockValueError(ValidationError):
    """Stock quantity is negative or missing."""

    def __init__(self, field: str, value: Any = None, row: int | None = None):
        reason = "is required" if value is None else "must not be negative"
        super().__init__(field=field, message=f"Stock quantity {reason}", value=value)
        self.code = "INVALID_STOCK_VALUE"
        if row is not None:
            self.details["row"] = row


class FileTooLargeError(ValidationError):
    """Uploaded file exceeds size limit."""

    def __init__(self, filename: str, size: int, max_size: int):
        super().__init__(
            field="file",
            message=f"File '{filename}' is too large ({size} bytes, max {max_size})",
        )
        self.details.update(
            {
                "filename": filename,
                "size": size,
                "max_size": max_size,
            }
        )


class UnsupportedFileTypeError(ValidationError):
    """File type is not supported."""

    def __init__(self, filename: str, extension: str, allowed: list[str]):
        super().__init__(
            field="file",
            message=f"Unsupported file type '{extension}'. Allowed: {', '.join(allowed)}",
        )
        self.details.update(
            {
                "filename": filename,
                "extension": extension,
                "allowed": allowed,
            }
        )


class ConfigurationError(ShelfwiseError):
    """Configuration error."""

    pass
