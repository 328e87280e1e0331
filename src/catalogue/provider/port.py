"""Catalogue provider port (abstract interface).

The ordering context resolves variant ids through this contract only, so the
backing store (the Product repository, a fake, a remote catalogue) can be
swapped without touching cart code.
"""

from abc import ABC, abstractmethod

from catalogue.product.summary import VariantWithProduct


class CatalogProvider(ABC):
    """Abstract catalogue lookup interface."""

    @abstractmethod
    async def get_variant_with_product(self, variant_id: str) -> VariantWithProduct | None:
        """Resolve a purchasable variant and its product summary.

        Returns None when the variant does not exist or is not purchasable.
        Raises ``UpstreamUnavailable`` when the catalogue cannot be reached.
        """
        ...
