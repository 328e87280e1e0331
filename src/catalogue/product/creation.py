"""Product creation: command and handler."""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String, Text
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.product import Product
from catalogue.shared.slug import slugify


@catalogue.command(part_of="Product")
class CreateProduct:
    name: String(required=True, max_length=255)
    slug: String(max_length=200)  # Derived from name when omitted
    description: Text()
    summary: Text()
    images: Text()  # JSON list of image URLs


@catalogue.command_handler(part_of=Product)
class CreateProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        repo = current_domain.repository_for(Product)

        slug = command.slug or slugify(command.name)
        if repo.find_by_slug(slug) is not None:
            raise ValidationError({"slug": [f"A product with slug '{slug}' already exists"]})

        product = Product.create(
            name=command.name,
            slug=slug,
            description=command.description,
            summary=command.summary,
            images=json.loads(command.images) if command.images else None,
        )
        repo.add(product)
        return str(product.id)
