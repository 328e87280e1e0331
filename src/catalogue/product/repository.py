"""Repository for the Product aggregate."""

from catalogue.domain import catalogue
from catalogue.product.product import Product


@catalogue.repository(part_of=Product)
class ProductRepository:
    """Product lookups used by the command handlers and the catalogue provider."""

    def find_by_slug(self, slug: str) -> Product | None:
        results = self._dao.query.filter(slug=slug).all().items
        return results[0] if results else None

    def find_by_price_id(self, price_id: str, include_inactive: bool = False) -> Product | None:
        """Find the product owning the variant with ``price_id``.

        Only active products are considered unless ``include_inactive`` is set.
        """
        query = self._dao.query if include_inactive else self._dao.query.filter(is_active=True)
        for product in query.all().items:
            if any(v.price_id == price_id for v in product.variants):
                return product
        return None
