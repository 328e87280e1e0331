"""Application tests for the cart service: load, reduce, persist, hydrate."""

import pytest
from catalogue.shared.money import Money
from ordering.cart.cart import StoredCart, StoredCartItem, subtotal
from ordering.cart.service import CartService
from ordering.cart.storage import MemoryCartStorage, load, persist
from ordering.checkout.initiation import Buyer
from ordering.settings import CartSettings
from payments.gateway.fake_adapter import FakeGateway
from shared.errors import FailureReason

SETTINGS = CartSettings(base_url="https://shop.example.com")


@pytest.fixture()
def storage():
    return MemoryCartStorage()


@pytest.fixture()
def gateway():
    return FakeGateway()


@pytest.fixture()
def service(storage, catalog, gateway):
    return CartService(storage, catalog=catalog, gateway=gateway, settings=SETTINGS)


@pytest.mark.asyncio
class TestGetCart:
    async def test_no_cart(self, service):
        assert await service.get_cart() is None
        assert service.get_cart_id() is None

    async def test_hydrates_stored_cart(self, service, storage):
        persist(storage, StoredCart(id="cart-1", currency="USD", items=(StoredCartItem("price_tee_m", 2),)), 60)
        cart = await service.get_cart()
        assert cart.id == "cart-1"
        assert cart.items[0].product.name == "Sage Tee"
        assert service.get_cart_id() == "cart-1"


@pytest.mark.asyncio
class TestAddToCart:
    async def test_first_add_creates_a_durable_cart(self, service, storage):
        result = await service.add_to_cart("price_tee_m", 2)

        assert result.success is True
        assert result.cart.id != "optimistic"
        assert [(i.variant_id, i.quantity) for i in result.cart.items] == [("price_tee_m", 2)]
        assert load(storage) == StoredCart(id=result.cart.id, currency="USD", items=(StoredCartItem("price_tee_m", 2),))

    async def test_repeat_adds_merge(self, service):
        await service.add_to_cart("price_tee_m", 2)
        await service.add_to_cart("price_mug", 1)
        result = await service.add_to_cart("price_tee_m", 1)

        assert [(i.variant_id, i.quantity) for i in result.cart.items] == [("price_tee_m", 3), ("price_mug", 1)]

    async def test_subtotal_is_exact(self, service):
        await service.add_to_cart("price_tee_m", 2)
        result = await service.add_to_cart("price_mug", 1)
        assert subtotal(result.cart) == Money(amount=11997, currency="USD")

    async def test_unknown_variant(self, service, storage):
        result = await service.add_to_cart("price_missing")
        assert result.success is False
        assert result.error == FailureReason.VARIANT_NOT_FOUND
        assert result.message == "Variant price_missing not found"
        assert load(storage) is None

    async def test_currency_mismatch_leaves_cart_unchanged(self, service, storage):
        await service.add_to_cart("price_tee_m", 1)
        before = load(storage)

        result = await service.add_to_cart("price_scarf_eur", 1)

        assert result.success is False
        assert result.error == FailureReason.CURRENCY_MISMATCH
        assert result.message
        assert load(storage) == before

    @pytest.mark.parametrize("quantity", [0, -2])
    async def test_invalid_quantity(self, service, quantity):
        result = await service.add_to_cart("price_tee_m", quantity)
        assert result.error == FailureReason.INVALID_QUANTITY

    async def test_quantity_cap(self, service, storage):
        await service.add_to_cart("price_tee_m", 999)
        result = await service.add_to_cart("price_tee_m", 1)
        assert result.error == FailureReason.QUANTITY_LIMIT_EXCEEDED
        assert load(storage).items == (StoredCartItem("price_tee_m", 999),)

    async def test_catalogue_outage(self, service, catalog):
        catalog.configure(unavailable=True)
        result = await service.add_to_cart("price_tee_m")
        assert result.success is False
        assert result.error == FailureReason.UPSTREAM_UNAVAILABLE

    async def test_corrupt_blob_is_replaced_by_a_fresh_cart(self, service, storage):
        storage.write("not-a-cart", "cart-1", 60)
        assert await service.get_cart() is None

        result = await service.add_to_cart("price_mug", 1)

        assert result.success is True
        assert result.cart.id != "cart-1"
        assert [i.variant_id for i in result.cart.items] == ["price_mug"]

    async def test_phantom_items_do_not_block_adds(self, service, storage, catalog):
        await service.add_to_cart("price_tee_m", 1)
        catalog.remove("price_tee_m")

        result = await service.add_to_cart("price_mug", 1)

        assert [i.variant_id for i in result.cart.items] == ["price_mug"]
        assert [i.variant_id for i in load(storage).items] == ["price_mug"]

    async def test_cart_emptied_by_catalogue_adopts_new_currency(self, service, storage, catalog):
        await service.add_to_cart("price_tee_m", 1)
        catalog.remove("price_tee_m")
        assert (await service.get_cart()).items == ()

        result = await service.add_to_cart("price_scarf_eur", 1)

        assert result.success is True
        assert result.cart.currency == "EUR"
        assert load(storage).currency == "EUR"
        assert [i.variant_id for i in load(storage).items] == ["price_scarf_eur"]

    async def test_timed_out_lines_are_kept_on_add(self, service, storage, catalog):
        await service.add_to_cart("price_tee_m", 1)
        catalog.configure(delays={"price_tee_m": 10})
        service.settings = CartSettings(item_timeout=0.05)

        result = await service.add_to_cart("price_mug", 1)

        assert result.success is True
        assert [i.variant_id for i in load(storage).items] == ["price_tee_m", "price_mug"]


@pytest.mark.asyncio
class TestRemoveAndSetQuantity:
    async def test_remove(self, service):
        await service.add_to_cart("price_tee_m", 1)
        await service.add_to_cart("price_mug", 1)

        result = await service.remove_from_cart("price_tee_m")
        assert [i.variant_id for i in result.cart.items] == ["price_mug"]

    async def test_remove_absent_variant_is_a_no_op(self, service):
        await service.add_to_cart("price_tee_m", 1)
        result = await service.remove_from_cart("price_mug")
        assert result.success is True
        assert [i.variant_id for i in result.cart.items] == ["price_tee_m"]

    async def test_remove_without_cart(self, service):
        result = await service.remove_from_cart("price_tee_m")
        assert result.success is False
        assert result.error == FailureReason.CART_NOT_FOUND

    async def test_set_quantity(self, service):
        await service.add_to_cart("price_tee_m", 1)
        result = await service.set_cart_quantity("price_tee_m", 4)
        assert result.cart.items[0].quantity == 4

    async def test_set_quantity_zero_removes(self, service):
        await service.add_to_cart("price_tee_m", 1)
        result = await service.set_cart_quantity("price_tee_m", 0)
        assert result.success is True
        assert result.cart.items == ()

    async def test_set_quantity_without_cart(self, service):
        result = await service.set_cart_quantity("price_tee_m", 2)
        assert result.error == FailureReason.CART_NOT_FOUND

    async def test_set_quantity_above_cap(self, service):
        await service.add_to_cart("price_tee_m", 1)
        result = await service.set_cart_quantity("price_tee_m", 1000)
        assert result.error == FailureReason.QUANTITY_LIMIT_EXCEEDED

    async def test_mutation_persists_when_hydration_fails(self, service, storage, catalog):
        await service.add_to_cart("price_tee_m", 1)
        catalog.configure(unavailable=True)

        result = await service.set_cart_quantity("price_tee_m", 3)

        assert result.error == FailureReason.UPSTREAM_UNAVAILABLE
        assert load(storage).items == (StoredCartItem("price_tee_m", 3),)


@pytest.mark.asyncio
class TestClearAndCheckout:
    async def test_clear(self, service):
        await service.add_to_cart("price_tee_m", 1)
        result = service.clear_cart()
        assert result.success is True
        assert await service.get_cart() is None

    async def test_checkout_empty_cart(self, service, gateway):
        result = await service.start_checkout()
        assert result.success is False
        assert result.error == FailureReason.EMPTY_CART_CHECKOUT
        assert gateway.calls == []

    async def test_checkout_cart_emptied_by_catalogue_drift(self, service, catalog, gateway):
        await service.add_to_cart("price_mug", 1)
        catalog.remove("price_mug")

        result = await service.start_checkout()

        assert result.error == FailureReason.EMPTY_CART_CHECKOUT
        assert gateway.calls == []

    async def test_checkout(self, service, gateway):
        added = await service.add_to_cart("price_tee_m", 2)

        result = await service.start_checkout(Buyer(id="cust-1", email="ada@example.com"))

        assert result.success is True
        assert result.url.startswith("https://checkout.fake/pay/")
        request = gateway.calls[0]
        assert [(line.variant_id, line.quantity) for line in request.line_items] == [("price_tee_m", 2)]
        assert request.metadata == {"cart_id": added.cart.id}
        assert request.buyer_email == "ada@example.com"
        assert request.success_url == "https://shop.example.com/checkout/success?session_id={CHECKOUT_SESSION_ID}"
        assert request.cancel_url == "https://shop.example.com/checkout/cancel"

    async def test_checkout_leaves_cart_untouched(self, service, storage):
        await service.add_to_cart("price_tee_m", 2)
        before = load(storage)
        await service.start_checkout()
        assert load(storage) == before

    async def test_checkout_catalogue_outage(self, service, catalog):
        await service.add_to_cart("price_tee_m", 2)
        catalog.configure(unavailable=True)

        result = await service.start_checkout()
        assert result.error == FailureReason.UPSTREAM_UNAVAILABLE


class TestServiceDefaults:
    def test_falls_back_to_configured_adapters(self, storage, monkeypatch):
        from catalogue.provider import set_catalog
        from catalogue.provider.fake_adapter import FakeCatalog

        catalog = FakeCatalog()
        set_catalog(catalog)
        monkeypatch.setenv("PAYMENT_GATEWAY", "fake")

        service = CartService(storage)

        assert service.catalog is catalog
        assert isinstance(service.gateway, FakeGateway)
        assert service.settings == CartSettings.from_env()
