"""Abstract interface for the product catalog."""

from abc import ABC, abstractmethod
from typing import Any

from shelfwise.core.entities.product import CatalogProduct


class ICatalogStore(ABC):
    """Interface for store-scoped catalog product persistence."""

    @abstractmethod
    async def find_by_id(self, product_id: str) -> CatalogProduct | None:
        """Get product by ID."""
        pass

    @abstractmethod
    async def find_by_barcode(self, store_id: str, barcode: str) -> CatalogProduct | None:
        """Get product by exact barcode within a store."""
        pass

    @abstractmethod
    async def find_by_name(self, store_id: str, name: str) -> CatalogProduct | None:
        """Get product by case-insensitive exact name within a store."""
        pass

    @abstractmethod
    async def list_all(self, store_id: str) -> list[CatalogProduct]:
        """List every product in a store, in insertion order."""
        pass

    @abstractmethod
    async def create(self, store_id: str, fields: dict[str, Any]) -> CatalogProduct:
        """Create a product in a store from a field mapping."""
        pass

    @abstractmethod
    async def update_cost_price(self, product_id: str, cost_price: float) -> None:
        """Overwrite the stored cost price. Raises ProductNotFoundError."""
        pass

    @abstractmethod
    async def update_barcode(self, product_id: str, barcode: str) -> None:
        """Set the barcode of a product. Raises ProductNotFoundError."""
        pass

    @abstractmethod
    async def set_initial_stock(self, product_id: str, quantity: float) -> None:
        """Record the owner-confirmed starting stock. Raises ProductNotFoundError."""
        pass
