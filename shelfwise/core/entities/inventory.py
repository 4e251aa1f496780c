"""Inventory domain entities."""

from datetime import datetime

from pydantic import BaseModel, Field


class InventorySnapshot(BaseModel):
    """Quantity on hand for one product at a point in time."""

    id: int | None = None
    store_id: str
    product_id: str
    quantity_on_hand: float = 0.0
    snapshot_date: datetime = Field(default_factory=datetime.utcnow)
