"""Catalogue provider backed by the Product repository."""

import asyncio

import structlog
from sqlalchemy.exc import SQLAlchemyError

from catalogue.domain import catalogue
from catalogue.product.product import Product
from catalogue.product.summary import VariantWithProduct
from catalogue.provider.port import CatalogProvider
from shared.errors import UpstreamUnavailable

logger = structlog.get_logger(__name__)


class RepositoryCatalog(CatalogProvider):
    """Resolves variants from the catalogue domain's own persistence."""

    def __init__(self, domain=None) -> None:
        self.domain = domain or catalogue

    def _lookup(self, variant_id: str) -> VariantWithProduct | None:
        with self.domain.domain_context():
            product = self.domain.repository_for(Product).find_by_price_id(variant_id)
            if product is None:
                return None
            variant = product.active_variant(variant_id)
            if variant is None:
                return None
            return VariantWithProduct(product=product.to_summary(), variant=variant)

    async def get_variant_with_product(self, variant_id: str) -> VariantWithProduct | None:
        try:
            return await asyncio.to_thread(self._lookup, variant_id)
        except (SQLAlchemyError, ConnectionError) as exc:
            logger.error("catalogue_lookup_failed", variant_id=variant_id, error=str(exc))
            raise UpstreamUnavailable("catalogue", str(exc)) from exc
