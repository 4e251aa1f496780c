"""
Inventory reconciliation applier.

Applies confirmed invoice lines to the catalog and the inventory ledger:
cost price is overwritten with the invoice unit cost and a new snapshot
is appended with the received quantity added.
"""

import asyncio
import weakref
from collections import defaultdict

from shelfwise.config import get_logger
from shelfwise.core.entities.context import AuthContext
from shelfwise.core.entities.invoice import InventoryUpdate, MatchedLineItem
from shelfwise.core.exceptions import ProductNotFoundError
from shelfwise.core.interfaces.catalog_store import ICatalogStore
from shelfwise.core.interfaces.inventory_ledger import IInventoryLedger

logger = get_logger(__name__)

# Shared across applier instances so concurrent confirmations serialize per product
_product_locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()


def _lock_for(product_id: str) -> asyncio.Lock:
    lock = _product_locks.get(product_id)
    if lock is None:
        lock = asyncio.Lock()
        _product_locks[product_id] = lock
    return lock


class InventoryReconciler:
    """
    Applies cost and quantity mutations for confirmed invoice lines.

    Lines for the same product are applied serially under a per-product
    lock; different products are applied concurrently. There is no
    idempotency check here: the confirm use case guards against
    double application.
    """

    def __init__(self, catalog_store: ICatalogStore, ledger: IInventoryLedger) -> None:
        self._catalog_store = catalog_store
        self._ledger = ledger

    async def apply_inventory_updates(
        self,
        invoice_id: str,
        items: list[MatchedLineItem],
        ctx: AuthContext,
    ) -> list[InventoryUpdate]:
        """
        Apply matched lines and return one audit record per applied line.

        Args:
            invoice_id: Invoice being confirmed (for logging)
            items: Line items, possibly edited by the user
            ctx: Caller context; every product must belong to its store

        Returns:
            Audit records in input order. Unmatched lines are skipped.

        Raises:
            ProductNotFoundError: A referenced product is missing or
                belongs to another store. Raised before any write.
        """
        groups: dict[str, list[tuple[int, MatchedLineItem]]] = defaultdict(list)
        for index, item in enumerate(items):
            if item.matched_product_id:
                groups[item.matched_product_id].append((index, item))

        for product_id in groups:
            product = await self._catalog_store.find_by_id(product_id)
            if product is None or product.store_id != ctx.store_id:
                raise ProductNotFoundError(product_id, ctx.store_id)

        logger.info(
            "inventory_apply_started",
            invoice_id=invoice_id,
            store_id=ctx.store_id,
            lines=len(items),
            products=len(groups),
        )

        results = await asyncio.gather(
            *(
                self._apply_product(ctx.store_id, product_id, lines)
                for product_id, lines in groups.items()
            )
        )

        indexed = sorted(
            (pair for group in results for pair in group),
            key=lambda pair: pair[0],
        )
        updates = [update for _, update in indexed]

        logger.info(
            "inventory_apply_complete",
            invoice_id=invoice_id,
            applied=len(updates),
            skipped=len(items) - len(updates),
        )
        return updates

    async def _apply_product(
        self,
        store_id: str,
        product_id: str,
        lines: list[tuple[int, MatchedLineItem]],
    ) -> list[tuple[int, InventoryUpdate]]:
        applied: list[tuple[int, InventoryUpdate]] = []

        async with _lock_for(product_id):
            for index, item in lines:
                await self._catalog_store.update_cost_price(product_id, item.unit_cost)

                latest = await self._ledger.latest_snapshot(product_id)
                previous = latest.quantity_on_hand if latest else 0.0
                new_quantity = previous + item.quantity
                await self._ledger.append_snapshot(store_id, product_id, new_quantity)

                applied.append(
                    (
                        index,
                        InventoryUpdate(
                            product_id=product_id,
                            quantity_added=item.quantity,
                            new_cost=item.unit_cost,
                            previous_quantity=previous,
                            new_quantity=new_quantity,
                        ),
                    )
                )

        return applied
