"""SQLite storage implementations."""

from shelfwise.infrastructure.storage.sqlite.catalog_store import SQLiteCatalogStore
from shelfwise.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from shelfwise.infrastructure.storage.sqlite.inventory_ledger import SQLiteInventoryLedger
from shelfwise.infrastructure.storage.sqlite.invoice_store import SQLiteInvoiceStore
from shelfwise.infrastructure.storage.sqlite.migrations.migrator import initialize_database
from shelfwise.infrastructure.storage.sqlite.sales_store import SQLiteSalesStore

# Singleton instances
_catalog_store: SQLiteCatalogStore | None = None
_inventory_ledger: SQLiteInventoryLedger | None = None
_invoice_store: SQLiteInvoiceStore | None = None
_sales_store: SQLiteSalesStore | None = None


async def get_catalog_store() -> SQLiteCatalogStore:
    """Get singleton catalog store instance."""
    global _catalog_store
    if _catalog_store is None:
        _catalog_store = SQLiteCatalogStore()
    return _catalog_store


async def get_inventory_ledger() -> SQLiteInventoryLedger:
    """Get singleton inventory ledger instance."""
    global _inventory_ledger
    if _inventory_ledger is None:
        _inventory_ledger = SQLiteInventoryLedger()
    return _inventory_ledger


async def get_invoice_store() -> SQLiteInvoiceStore:
    """Get singleton invoice store instance."""
    global _invoice_store
    if _invoice_store is None:
        _invoice_store = SQLiteInvoiceStore()
    return _invoice_store


async def get_sales_store() -> SQLiteSalesStore:
    """Get singleton sales store instance."""
    global _sales_store
    if _sales_store is None:
        _sales_store = SQLiteSalesStore()
    return _sales_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    "initialize_database",
    # Store classes
    "SQLiteCatalogStore",
    "SQLiteInventoryLedger",
    "SQLiteInvoiceStore",
    "SQLiteSalesStore",
    # Factory functions
    "get_catalog_store",
    "get_inventory_ledger",
    "get_invoice_store",
    "get_sales_store",
]
