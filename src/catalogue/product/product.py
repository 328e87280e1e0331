"""Product aggregate root with its purchasable Variant entities.

A variant is identified towards the rest of the system by its ``price_id``,
the external price identifier used by the payment provider. Only active
variants of active products are visible through the catalogue provider.
"""

import json
import re
from datetime import datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, HasMany, String, Text, ValueObject

from catalogue.domain import catalogue
from catalogue.product.options import dump_options, load_options
from catalogue.product.summary import ProductSummary, ProductVariant
from catalogue.shared.money import Money
from catalogue.shared.slug import slugify

_SLUG_FORMAT = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")


def _load_images(raw):
    return tuple(json.loads(raw)) if raw else ()


@catalogue.entity(part_of="Product")
class Variant:
    """Purchasable variant entity priced in exactly one currency."""

    price_id: String(required=True, max_length=255)
    price: ValueObject(Money, required=True)
    images: Text()
    variant_options: Text()  # JSON list of tagged options, see catalogue.product.options
    is_active: Boolean(default=True)

    def to_snapshot(self):
        return ProductVariant(
            id=self.price_id,
            price=self.price,
            images=_load_images(self.images),
            options=load_options(self.variant_options),
        )


@catalogue.aggregate
class Product:
    """Product aggregate root."""

    name: String(required=True, max_length=255)
    slug: String(required=True, max_length=200)
    description: Text()
    summary: Text()
    images: Text()
    is_active: Boolean(default=True)
    variants: HasMany(Variant)
    created_at: DateTime(default=datetime.now)
    updated_at: DateTime(default=datetime.now)

    @invariant.post
    def slug_must_be_url_safe(self):
        if not _SLUG_FORMAT.match(self.slug or ""):
            raise ValidationError(
                {"slug": ["Slug must be lowercase alphanumeric words separated by single hyphens"]}
            )

    @invariant.post
    def price_ids_must_be_unique(self):
        price_ids = [v.price_id for v in self.variants]
        if len(price_ids) != len(set(price_ids)):
            raise ValidationError({"variants": ["Each variant must have a distinct price id"]})

    @classmethod
    def create(cls, name, slug=None, description=None, summary=None, images=None):
        from catalogue.product.events import ProductCreated

        now = datetime.now()
        product = cls(
            name=name,
            slug=slug or slugify(name),
            description=description,
            summary=summary,
            images=json.dumps(list(images)) if images else None,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductCreated(
                product_id=product.id,
                name=product.name,
                slug=product.slug,
                created_at=now,
            )
        )
        return product

    def _variant(self, price_id):
        variant = next((v for v in self.variants if v.price_id == price_id), None)
        if variant is None:
            raise ValidationError({"variants": [f"Variant {price_id} not found"]})
        return variant

    def add_variant(self, price_id, price, images=None, options=None):
        from catalogue.product.events import VariantAdded

        variant = Variant(
            price_id=price_id,
            price=price,
            images=json.dumps(list(images)) if images else None,
            variant_options=dump_options(options or []),
        )
        self.add_variants(variant)
        self.updated_at = datetime.now()

        self.raise_(
            VariantAdded(
                product_id=self.id,
                variant_id=variant.id,
                price_id=price_id,
                price_amount=price.amount,
                price_currency=price.currency,
                created_at=datetime.now(),
            )
        )
        return variant

    def update_variant_price(self, price_id, new_price):
        """Change a variant's amount. Its currency is fixed at creation."""
        from catalogue.product.events import VariantPriceChanged

        variant = self._variant(price_id)
        if new_price.currency != variant.price.currency:
            raise ValidationError(
                {"currency": [f"Variant {price_id} is priced in {variant.price.currency} and cannot change currency"]}
            )

        previous_amount = variant.price.amount
        variant.price = new_price
        self.updated_at = datetime.now()

        self.raise_(
            VariantPriceChanged(
                product_id=self.id,
                price_id=price_id,
                previous_amount=previous_amount,
                new_amount=new_price.amount,
                currency=new_price.currency,
            )
        )

    def deactivate_variant(self, price_id):
        from catalogue.product.events import VariantDeactivated

        variant = self._variant(price_id)
        if not variant.is_active:
            raise ValidationError({"variants": [f"Variant {price_id} is already inactive"]})

        variant.is_active = False
        self.updated_at = datetime.now()

        self.raise_(VariantDeactivated(product_id=self.id, price_id=price_id))

    def deactivate(self):
        from catalogue.product.events import ProductDeactivated

        if not self.is_active:
            raise ValidationError({"is_active": ["Product is already inactive"]})

        self.is_active = False
        now = datetime.now()
        self.updated_at = now

        self.raise_(ProductDeactivated(product_id=self.id, deactivated_at=now))

    def active_variant(self, price_id):
        """Return the snapshot of an active variant, or None."""
        if not self.is_active:
            return None
        variant = next((v for v in self.variants if v.price_id == price_id and v.is_active), None)
        return variant.to_snapshot() if variant else None

    def to_summary(self):
        return ProductSummary(
            id=str(self.id),
            slug=self.slug,
            name=self.name,
            images=_load_images(self.images),
            variants=tuple(v.to_snapshot() for v in self.variants if v.is_active),
        )
