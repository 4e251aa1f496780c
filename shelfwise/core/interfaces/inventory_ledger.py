"""Abstract interface for the time-series inventory ledger."""

from abc import ABC, abstractmethod

from shelfwise.core.entities.inventory import InventorySnapshot


class IInventoryLedger(ABC):
    """Interface for per-product quantity-on-hand snapshots."""

    @abstractmethod
    async def latest_snapshot(self, product_id: str) -> InventorySnapshot | None:
        """Get the most recent snapshot for a product, or None."""
        pass

    @abstractmethod
    async def append_snapshot(
        self, store_id: str, product_id: str, quantity: float
    ) -> InventorySnapshot:
        """Append a new snapshot. History is never rewritten."""
        pass

    @abstractmethod
    async def update_latest(self, product_id: str, quantity: float) -> InventorySnapshot | None:
        """Rewrite the newest snapshot in place; None if the product has none."""
        pass

    @abstractmethod
    async def list_snapshots(
        self, product_id: str, limit: int = 100
    ) -> list[InventorySnapshot]:
        """Get snapshots for a product, newest first."""
        pass
