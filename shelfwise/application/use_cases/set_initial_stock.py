"""Set Initial Stock Use Case: start tracking inventory for a product."""

from shelfwise.application.dto.requests import SetInitialStockRequest
from shelfwise.config import bind_log_context, get_logger
from shelfwise.core.entities.context import AuthContext
from shelfwise.core.entities.product import CatalogProduct
from shelfwise.core.exceptions import InvalidStockValueError, ProductNotFoundError
from shelfwise.core.interfaces import ICatalogStore, IInventoryLedger

logger = get_logger(__name__)


class SetInitialStockUseCase:
    """
    Record the owner-confirmed stock on hand for a product.

    Until this runs, sales imports leave the product's inventory alone.
    The value also becomes the product's newest snapshot.
    """

    def __init__(
        self,
        catalog_store: ICatalogStore | None = None,
        ledger: IInventoryLedger | None = None,
    ):
        self._catalog_store = catalog_store
        self._ledger = ledger

    async def _get_catalog_store(self) -> ICatalogStore:
        if self._catalog_store is None:
            from shelfwise.infrastructure.storage.sqlite import get_catalog_store

            self._catalog_store = await get_catalog_store()
        return self._catalog_store

    async def _get_ledger(self) -> IInventoryLedger:
        if self._ledger is None:
            from shelfwise.infrastructure.storage.sqlite import get_inventory_ledger

            self._ledger = await get_inventory_ledger()
        return self._ledger

    async def execute(self, request: SetInitialStockRequest, ctx: AuthContext) -> CatalogProduct:
        with bind_log_context(
            store_id=ctx.store_id, user_id=ctx.user_id, product_id=request.product_id
        ):
            return await self._set_stock(request, ctx)

    async def _set_stock(self, request: SetInitialStockRequest, ctx: AuthContext) -> CatalogProduct:
        """
        Raises:
            InvalidStockValueError: Quantity missing or negative
            ProductNotFoundError: Unknown product or another store's product
        """
        if request.quantity is None or request.quantity < 0:
            raise InvalidStockValueError("quantity", request.quantity)

        catalog = await self._get_catalog_store()
        product = await catalog.find_by_id(request.product_id)
        if product is None or product.store_id != ctx.store_id:
            raise ProductNotFoundError(request.product_id, ctx.store_id)

        await catalog.set_initial_stock(product.id, request.quantity)
        ledger = await self._get_ledger()
        await ledger.append_snapshot(ctx.store_id, product.id, request.quantity)

        logger.info(
            "initial_stock_set",
            product_id=product.id,
            quantity=request.quantity,
            previous=product.initial_stock,
        )
        return product.model_copy(update={"initial_stock": request.quantity})
