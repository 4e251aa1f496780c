"""Abstract interface for sales storage."""

from abc import ABC, abstractmethod

from shelfwise.core.entities.sale import Sale


class ISalesStore(ABC):
    """Interface for sale persistence."""

    @abstractmethod
    async def create_sale(self, sale: Sale) -> Sale:
        """Create a sale with its items."""
        pass

    @abstractmethod
    async def get_sale(self, sale_id: str) -> Sale | None:
        """Get sale with items by ID."""
        pass

    @abstractmethod
    async def list_sales(
        self, store_id: str, limit: int = 100, offset: int = 0
    ) -> list[Sale]:
        """List sales for a store, newest first."""
        pass
