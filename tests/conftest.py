"""Pytest configuration and shared fixtures."""

from collections.abc import Generator
from pathlib import Path

import pytest

from shelfwise.config import reset_settings
from shelfwise.core.entities import (
    AuthContext,
    CatalogProduct,
    ExtractedLineItem,
    MatchedLineItem,
)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Point storage at a temp directory and drop cached settings around each test."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def ctx() -> AuthContext:
    return AuthContext(user_id="user-1", store_id="store-1")


@pytest.fixture
def make_product():
    """Factory for catalog products in store-1."""

    def _make(product_id: str, name: str, **kwargs) -> CatalogProduct:
        kwargs.setdefault("store_id", "store-1")
        return CatalogProduct(id=product_id, name=name, **kwargs)

    return _make


@pytest.fixture
def make_item():
    """Factory for extracted line items."""

    def _make(description: str, **kwargs) -> ExtractedLineItem:
        return ExtractedLineItem(description=description, **kwargs)

    return _make


@pytest.fixture
def make_matched():
    """Factory for matched line items."""

    def _make(description: str, product_id: str | None = None, **kwargs) -> MatchedLineItem:
        if product_id is not None:
            kwargs.setdefault("confidence", 0.99)
            kwargs.setdefault("matched_product_name", description)
        return MatchedLineItem(description=description, matched_product_id=product_id, **kwargs)

    return _make
