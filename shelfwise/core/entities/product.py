"""Catalog product entity."""

from datetime import datetime
from uuid import uuid4

from pydantic import BaseModel, Field


class CatalogProduct(BaseModel):
    """A product the store sells, scoped to one store."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    store_id: str
    name: str
    sku: str | None = None
    barcode: str | None = None
    cost_price: float = 0.0
    selling_price: float = 0.0
    category: str = "Uncategorized"
    is_active: bool = True

    # None means "not tracked yet": no inventory decrement until the owner sets it
    initial_stock: float | None = None
    # Auto-created from a sales import and still waiting for review
    is_unmatched: bool = False

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def tracks_inventory(self) -> bool:
        return self.initial_stock is not None

    @property
    def margin_percent(self) -> float | None:
        """Current gross margin on selling price, or None without a price."""
        if self.selling_price <= 0:
            return None
        return (self.selling_price - self.cost_price) / self.selling_price * 100
