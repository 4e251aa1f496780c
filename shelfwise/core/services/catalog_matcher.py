"""
Catalog matching service.

Resolves extracted invoice lines to catalog products using a prioritized
strategy: barcode, then SKU, then fuzzy name matching. Each line resolves
to at most one product; an unresolved line is not an error.
"""

from dataclasses import dataclass

from shelfwise.config import ReconciliationThresholds, get_logger
from shelfwise.core.entities.context import AuthContext
from shelfwise.core.entities.invoice import ExtractedLineItem, MatchedLineItem
from shelfwise.core.entities.product import CatalogProduct
from shelfwise.core.interfaces.catalog_store import ICatalogStore

logger = get_logger(__name__)


@dataclass
class MatchCandidate:
    """A catalog product that matches a line item with a confidence score."""

    product_id: str
    product_name: str
    score: float  # 0.0 to 1.0
    match_type: str  # "barcode", "sku", "contains", "tokens"


def _normalize(name: str | None) -> str:
    """Normalize a name or code for comparison: strip and lowercase."""
    return (name or "").strip().lower()


def _containment_score(a: str, b: str, weight: float) -> float:
    """Length ratio of two names when one contains the other, else 0."""
    if not a or not b:
        return 0.0
    if a in b or b in a:
        return min(len(a), len(b)) / max(len(a), len(b)) * weight
    return 0.0


def _token_overlap_score(a: str, b: str, weight: float) -> float:
    """Share of words in a that overlap some word in b, scaled by the larger word count."""
    a_words = a.split()
    b_words = b.split()
    if not a_words or not b_words:
        return 0.0
    overlapping = sum(
        1 for word in a_words if any(other in word or word in other for other in b_words)
    )
    return overlapping / max(len(a_words), len(b_words)) * weight


class CatalogMatcher:
    """
    Service for resolving invoice lines against a store catalog.

    Matching strategy (priority order, first tier with a hit wins):
    1. Exact barcode/UPC  -> barcode_confidence (0.99)
    2. Case-insensitive SKU -> sku_confidence (0.95)
    3. Fuzzy name match   -> best of containment and token overlap scores

    Fuzzy ties keep the first product encountered in catalog order.
    """

    def __init__(
        self,
        catalog_store: ICatalogStore | None = None,
        thresholds: ReconciliationThresholds | None = None,
    ) -> None:
        self._catalog_store = catalog_store
        self._thresholds = thresholds or ReconciliationThresholds()

    def find_best_match(
        self,
        item: ExtractedLineItem,
        catalog: list[CatalogProduct],
    ) -> MatchCandidate | None:
        """Find the single best catalog product for a line item."""
        t = self._thresholds

        upc = (item.upc or "").strip()
        if upc:
            for product in catalog:
                if (product.barcode or "").strip() == upc:
                    return MatchCandidate(product.id, product.name, t.barcode_confidence, "barcode")

        sku = _normalize(item.sku)
        if sku:
            for product in catalog:
                if _normalize(product.sku) == sku:
                    return MatchCandidate(product.id, product.name, t.sku_confidence, "sku")

        description = _normalize(item.description)
        best: MatchCandidate | None = None

        for product in catalog:
            name = _normalize(product.name)

            score = _containment_score(description, name, t.containment_weight)
            if score > 0 and (best is None or score > best.score):
                best = MatchCandidate(product.id, product.name, score, "contains")

            score = _token_overlap_score(description, name, t.token_overlap_weight)
            if score > t.token_overlap_floor and (best is None or score > best.score):
                best = MatchCandidate(product.id, product.name, score, "tokens")

        return best

    def match_items(
        self,
        items: list[ExtractedLineItem],
        catalog: list[CatalogProduct],
    ) -> list[MatchedLineItem]:
        """
        Match every line item against a catalog.

        Pure: the catalog is not modified and nothing is persisted. Output
        preserves input order and length; duplicate lines are not merged.
        """
        matched: list[MatchedLineItem] = []
        for item in items:
            candidate = self.find_best_match(item, catalog)
            fields = item.model_dump()
            if candidate is None:
                matched.append(MatchedLineItem(**fields))
                continue
            matched.append(
                MatchedLineItem(
                    **fields,
                    matched_product_id=candidate.product_id,
                    matched_product_name=candidate.product_name,
                    confidence=round(min(1.0, candidate.score), 4),
                )
            )
        return matched

    async def match_products_to_inventory(
        self,
        items: list[ExtractedLineItem],
        ctx: AuthContext,
    ) -> list[MatchedLineItem]:
        """Load the caller's store catalog and match every line item against it."""
        if self._catalog_store is None:
            raise RuntimeError("CatalogMatcher requires a catalog store to load products")

        catalog = await self._catalog_store.list_all(ctx.store_id)
        matched = self.match_items(items, catalog)

        logger.info(
            "catalog_match_complete",
            store_id=ctx.store_id,
            catalog_size=len(catalog),
            items=len(matched),
            matched=sum(1 for m in matched if m.is_matched),
        )
        return matched
