"""Read-only catalogue snapshots handed to other contexts.

These are plain frozen dataclasses: the ordering context copies them into cart
line items, so they must not drag aggregate state or lazy associations along.
"""

from dataclasses import dataclass

from catalogue.product.options import VariantOption
from catalogue.shared.money import Money


@dataclass(frozen=True)
class ProductVariant:
    """A purchasable variant. ``id`` is the external price identifier."""

    id: str
    price: Money
    images: tuple[str, ...] = ()
    options: tuple[VariantOption, ...] = ()

    @property
    def currency(self) -> str:
        return self.price.currency


@dataclass(frozen=True)
class ProductRef:
    """The minimal product fields a cart line needs for display."""

    id: str
    name: str
    slug: str
    images: tuple[str, ...] = ()


@dataclass(frozen=True)
class ProductSummary:
    id: str
    slug: str
    name: str
    images: tuple[str, ...] = ()
    variants: tuple[ProductVariant, ...] = ()

    def ref(self) -> ProductRef:
        return ProductRef(id=self.id, name=self.name, slug=self.slug, images=self.images)


@dataclass(frozen=True)
class VariantWithProduct:
    product: ProductSummary
    variant: ProductVariant
