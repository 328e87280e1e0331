"""Variant management: commands and handler.

Option metadata arrives as free-form provider key/value pairs and is turned
into typed options here, once, before it is stored on the variant.
"""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.options import parse_variant_options
from catalogue.product.product import Product
from catalogue.shared.money import Money


@catalogue.command(part_of="Product")
class AddVariant:
    product_id: Identifier(required=True)
    price_id: String(required=True, max_length=255)
    price: String(required=True, max_length=20)  # Minor units as a decimal string, e.g. "4999"
    currency: String(required=True, max_length=3)
    images: Text()  # JSON list of image URLs
    provider_metadata: Text()  # JSON object; "option*" keys become options


@catalogue.command(part_of="Product")
class UpdateVariantPrice:
    product_id: Identifier(required=True)
    price_id: String(required=True, max_length=255)
    price: String(required=True, max_length=20)
    currency: String(required=True, max_length=3)


@catalogue.command(part_of="Product")
class DeactivateVariant:
    product_id: Identifier(required=True)
    price_id: String(required=True, max_length=255)


@catalogue.command_handler(part_of=Product)
class ManageVariantsHandler:
    @handle(AddVariant)
    def add_variant(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)

        # Price ids identify variants across the whole catalogue
        owner = repo.find_by_price_id(command.price_id, include_inactive=True)
        if owner is not None and str(owner.id) != str(product.id):
            raise ValidationError({"price_id": [f"Variant {command.price_id} already belongs to another product"]})

        metadata = json.loads(command.provider_metadata) if command.provider_metadata else {}
        product.add_variant(
            price_id=command.price_id,
            price=Money.parse(command.price, command.currency),
            images=json.loads(command.images) if command.images else None,
            options=parse_variant_options(metadata),
        )
        repo.add(product)

    @handle(UpdateVariantPrice)
    def update_variant_price(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.update_variant_price(
            price_id=command.price_id,
            new_price=Money.parse(command.price, command.currency),
        )
        repo.add(product)

    @handle(DeactivateVariant)
    def deactivate_variant(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.deactivate_variant(command.price_id)
        repo.add(product)
