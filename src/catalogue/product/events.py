"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from catalogue.domain import catalogue


@catalogue.event(part_of="Product")
class ProductCreated:
    """A new product was added to the catalogue."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    slug: String(required=True)
    created_at: DateTime(required=True)


@catalogue.event(part_of="Product")
class VariantAdded:
    """A new purchasable variant was added to a product."""

    __version__ = 1

    product_id: Identifier(required=True)
    variant_id: Identifier(required=True)
    price_id: String(required=True)
    price_amount: Integer(required=True)
    price_currency: String(required=True)
    created_at: DateTime(required=True)


@catalogue.event(part_of="Product")
class VariantPriceChanged:
    """A variant's amount changed. Amounts are minor units."""

    __version__ = 1

    product_id: Identifier(required=True)
    price_id: String(required=True)
    previous_amount: Integer(required=True)
    new_amount: Integer(required=True)
    currency: String(required=True)


@catalogue.event(part_of="Product")
class VariantDeactivated:
    """A variant stopped being purchasable; carts holding it drop it on next read."""

    __version__ = 1

    product_id: Identifier(required=True)
    price_id: String(required=True)


@catalogue.event(part_of="Product")
class ProductDeactivated:
    """A product and all of its variants stopped being purchasable."""

    __version__ = 1

    product_id: Identifier(required=True)
    deactivated_at: DateTime(required=True)
