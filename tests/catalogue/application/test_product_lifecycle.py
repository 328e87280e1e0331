"""Application tests for the product lifecycle handler."""

from catalogue.product.creation import CreateProduct
from catalogue.product.lifecycle import DeactivateProduct
from catalogue.product.product import Product
from catalogue.product.variants import AddVariant
from protean.utils.globals import current_domain


def _create_product_with_variant():
    product_id = current_domain.process(CreateProduct(name="Camp Mug"), asynchronous=False)
    current_domain.process(
        AddVariant(product_id=product_id, price_id="price_mug", price="1999", currency="USD"),
        asynchronous=False,
    )
    return product_id


class TestDeactivateProductHandler:
    def test_deactivate_product(self):
        product_id = _create_product_with_variant()

        current_domain.process(DeactivateProduct(product_id=product_id), asynchronous=False)

        product = current_domain.repository_for(Product).get(product_id)
        assert product.is_active is False

    def test_deactivated_product_is_hidden_from_price_lookup(self):
        product_id = _create_product_with_variant()
        repo = current_domain.repository_for(Product)
        assert str(repo.find_by_price_id("price_mug").id) == product_id

        current_domain.process(DeactivateProduct(product_id=product_id), asynchronous=False)

        assert repo.find_by_price_id("price_mug") is None
