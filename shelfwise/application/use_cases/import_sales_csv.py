"""Import Sales CSV Use Case."""

from shelfwise.application.services import get_sales_ingestion_service
from shelfwise.config import bind_log_context, get_logger
from shelfwise.core.entities.context import AuthContext
from shelfwise.core.services import (
    SalesIngestionService,
    SalesIngestionSummary,
    parse_sales_csv,
)

logger = get_logger(__name__)


class ImportSalesCsvUseCase:
    """Parse a POS export and ingest its rows for the caller's store."""

    def __init__(self, ingestion_service: SalesIngestionService | None = None):
        self._service = ingestion_service

    async def _get_service(self) -> SalesIngestionService:
        if self._service is None:
            self._service = await get_sales_ingestion_service()
        return self._service

    async def execute(self, content: str | bytes, ctx: AuthContext) -> SalesIngestionSummary:
        with bind_log_context(store_id=ctx.store_id, user_id=ctx.user_id):
            rows = parse_sales_csv(content)
            logger.info("import_sales_csv_started", rows=len(rows))

            service = await self._get_service()
            return await service.ingest_sales_rows(ctx, rows)
