"""Configurable in-memory catalogue for development and testing.

Variants can be registered, removed, delayed or the whole catalogue can be
made unreachable, which is enough to exercise every hydration path without a
database.
"""

import asyncio

from catalogue.product.summary import ProductSummary, VariantWithProduct
from catalogue.provider.port import CatalogProvider
from shared.errors import UpstreamUnavailable


class FakeCatalog(CatalogProvider):
    """Configurable fake catalogue."""

    def __init__(self) -> None:
        self.records: dict[str, VariantWithProduct] = {}
        self.unavailable: bool = False
        self.delays: dict[str, float] = {}
        self.calls: list[str] = []

    def add(self, product: ProductSummary) -> None:
        for variant in product.variants:
            self.records[variant.id] = VariantWithProduct(product=product, variant=variant)

    def remove(self, variant_id: str) -> None:
        self.records.pop(variant_id, None)

    def configure(self, unavailable: bool = False, delays: dict[str, float] | None = None) -> None:
        """Configure catalogue behavior at runtime."""
        self.unavailable = unavailable
        self.delays = dict(delays or {})

    async def get_variant_with_product(self, variant_id: str) -> VariantWithProduct | None:
        self.calls.append(variant_id)

        if self.unavailable:
            raise UpstreamUnavailable("catalogue", "configured outage")

        delay = self.delays.get(variant_id)
        if delay:
            await asyncio.sleep(delay)

        return self.records.get(variant_id)
