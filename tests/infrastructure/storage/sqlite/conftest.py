"""Pytest fixtures for SQLite storage tests."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from shelfwise.config import get_settings
from shelfwise.infrastructure.storage.sqlite import (
    SQLiteCatalogStore,
    SQLiteInventoryLedger,
    SQLiteInvoiceStore,
    SQLiteSalesStore,
    close_pool,
    initialize_database,
)


@pytest.fixture
async def db_path() -> AsyncGenerator[Path, None]:
    """Migrated database under the per-test data directory; the global pool is closed afterwards."""
    path = get_settings().storage.db_path
    results = await initialize_database()
    assert all(r.success for r in results)
    yield path
    await close_pool()


@pytest.fixture
def catalog(db_path) -> SQLiteCatalogStore:
    return SQLiteCatalogStore()


@pytest.fixture
def ledger(db_path) -> SQLiteInventoryLedger:
    return SQLiteInventoryLedger()


@pytest.fixture
def invoices(db_path) -> SQLiteInvoiceStore:
    return SQLiteInvoiceStore()


@pytest.fixture
def sales(db_path) -> SQLiteSalesStore:
    return SQLiteSalesStore()
