import pytest


@pytest.fixture(autouse=True)
def _ctx(catalogue_bed):
    """Push domain context before each test, cleanup after."""
    with catalogue_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()


# ---------------------------------------------------------------------------
# Catalogue fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def make_product():
    """Build a ProductSummary whose variants are ``(price_id, amount, currency)`` triples."""
    from catalogue.product.options import StringOption
    from catalogue.product.summary import ProductSummary, ProductVariant
    from catalogue.shared.money import Money

    def _make(name, variants, slug=None):
        slug = slug or name.lower().replace(" ", "-")
        return ProductSummary(
            id=f"prod-{slug}",
            slug=slug,
            name=name,
            images=(f"https://cdn.example.com/{slug}.jpg",),
            variants=tuple(
                ProductVariant(
                    id=price_id,
                    price=Money(amount=amount, currency=currency),
                    options=(StringOption(key="option_size", label="Size", value="M"),),
                )
                for price_id, amount, currency in variants
            ),
        )

    return _make


@pytest.fixture()
def tee(make_product):
    return make_product("Sage Tee", [("price_tee_m", 4999, "USD"), ("price_tee_l", 5499, "USD")])


@pytest.fixture()
def mug(make_product):
    return make_product("Camp Mug", [("price_mug", 1999, "USD")])


@pytest.fixture()
def scarf(make_product):
    return make_product("Wool Scarf", [("price_scarf_eur", 3500, "EUR")])


@pytest.fixture()
def catalog(tee, mug, scarf):
    from catalogue.provider.fake_adapter import FakeCatalog

    fake = FakeCatalog()
    for product in (tee, mug, scarf):
        fake.add(product)
    return fake


@pytest.fixture()
def line_for(catalog):
    """Return a CartLineItem for a catalogued price id."""
    from ordering.cart.cart import CartLineItem

    def _line(price_id, quantity=1):
        return CartLineItem.from_record(catalog.records[price_id], quantity)

    return _line
