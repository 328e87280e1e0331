"""Tests for the in-memory catalogue provider and the provider factory."""

import asyncio

import pytest
from catalogue.product.summary import ProductSummary, ProductVariant
from catalogue.provider import get_catalog, reset_catalog, set_catalog
from catalogue.provider.fake_adapter import FakeCatalog
from catalogue.provider.repository_adapter import RepositoryCatalog
from catalogue.shared.money import Money
from shared.errors import UpstreamUnavailable


@pytest.fixture()
def fake():
    catalog = FakeCatalog()
    catalog.add(
        ProductSummary(
            id="prod-1",
            slug="camp-mug",
            name="Camp Mug",
            variants=(ProductVariant(id="price_mug", price=Money(amount=1999, currency="USD")),),
        )
    )
    return catalog


class TestFakeCatalog:
    def test_lookup(self, fake):
        record = asyncio.run(fake.get_variant_with_product("price_mug"))
        assert record.product.name == "Camp Mug"
        assert record.variant.price.amount == 1999
        assert fake.calls == ["price_mug"]

    def test_missing_variant(self, fake):
        assert asyncio.run(fake.get_variant_with_product("price_missing")) is None

    def test_removed_variant(self, fake):
        fake.remove("price_mug")
        assert asyncio.run(fake.get_variant_with_product("price_mug")) is None

    def test_outage(self, fake):
        fake.configure(unavailable=True)
        with pytest.raises(UpstreamUnavailable):
            asyncio.run(fake.get_variant_with_product("price_mug"))


class TestCatalogFactory:
    def test_repository_by_default(self, monkeypatch):
        monkeypatch.delenv("CATALOG_ADAPTER", raising=False)
        reset_catalog()
        assert isinstance(get_catalog(), RepositoryCatalog)

    def test_fake_from_environment(self, monkeypatch):
        monkeypatch.setenv("CATALOG_ADAPTER", "fake")
        reset_catalog()
        assert isinstance(get_catalog(), FakeCatalog)

    def test_unknown_adapter(self, monkeypatch):
        monkeypatch.setenv("CATALOG_ADAPTER", "graphql")
        reset_catalog()
        with pytest.raises(ValueError):
            get_catalog()

    def test_set_catalog_overrides(self, fake):
        set_catalog(fake)
        assert get_catalog() is fake
