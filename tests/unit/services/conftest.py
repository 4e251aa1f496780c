"""Fixtures for core service tests."""

from unittest.mock import AsyncMock

import pytest

from shelfwise.config import ReconciliationThresholds


@pytest.fixture
def thresholds() -> ReconciliationThresholds:
    return ReconciliationThresholds()


@pytest.fixture
def catalog_store():
    """Mock ICatalogStore returning an empty catalog by default."""
    store = AsyncMock()
    store.list_all = AsyncMock(return_value=[])
    store.find_by_id = AsyncMock(return_value=None)
    store.find_by_barcode = AsyncMock(return_value=None)
    store.find_by_name = AsyncMock(return_value=None)
    return store


@pytest.fixture
def ledger():
    """Mock IInventoryLedger with no snapshots."""
    store = AsyncMock()
    store.latest_snapshot = AsyncMock(return_value=None)
    return store
