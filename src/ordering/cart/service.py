"""Server-side cart operations exposed to the UI layer.

Every mutating call follows the same path within one request: load the
StoredCart, apply the equivalent reducer action, persist, then hydrate against
the catalogue and return the authoritative cart. Nothing is cached between
requests. Two requests racing on the same cart resolve as last write wins.

All failures come back as structured results; nothing here raises to the
route handlers except ``get_cart``, which lets ``UpstreamUnavailable``
through so the caller can answer "try again" instead of "empty".
"""

from dataclasses import dataclass

import structlog

from catalogue.provider import get_catalog
from catalogue.provider.port import CatalogProvider
from ordering.cart import storage as cart_storage
from ordering.cart.cart import Cart, StoredCart, StoredCartItem
from ordering.cart.hydration import hydrate, prune
from ordering.cart.reducer import AddItem, Remove, SetQuantity, reduce
from ordering.cart.storage import CartStorage
from ordering.checkout.initiation import Buyer, CheckoutResult, CheckoutUrls, start_checkout
from ordering.settings import CartSettings
from payments.gateway import get_gateway
from payments.gateway.port import PaymentGateway
from shared.errors import (
    CurrencyMismatch,
    FailureReason,
    InvalidQuantity,
    QuantityLimitExceeded,
    UpstreamUnavailable,
    VariantNotFound,
    first_message,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CartResult:
    success: bool
    cart: Cart | None = None
    error: FailureReason | None = None
    message: str | None = None


class CartService:
    def __init__(
        self,
        storage: CartStorage,
        catalog: CatalogProvider | None = None,
        gateway: PaymentGateway | None = None,
        settings: CartSettings | None = None,
    ) -> None:
        self.storage = storage
        self.catalog = catalog or get_catalog()
        self.gateway = gateway or get_gateway()
        self.settings = settings or CartSettings.from_env()

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _load(self) -> StoredCart | None:
        return cart_storage.load(self.storage)

    def _save(self, stored: StoredCart) -> None:
        cart_storage.persist(self.storage, stored, self.settings.max_age)

    async def _hydrate(self, stored: StoredCart) -> Cart:
        return await hydrate(stored, self.catalog, self.settings.default_currency, self.settings.item_timeout)

    async def _apply(self, stored: StoredCart, action) -> CartResult:
        try:
            stored = reduce(stored, action, self.settings.max_quantity)
        except (CurrencyMismatch, QuantityLimitExceeded, InvalidQuantity) as exc:
            logger.info("cart_action_rejected", cart_id=stored.id, reason=exc.reason.value)
            return CartResult(success=False, error=exc.reason, message=first_message(exc))

        self._save(stored)
        try:
            cart = await self._hydrate(stored)
        except UpstreamUnavailable as exc:
            logger.error("cart_hydration_failed", cart_id=stored.id, error=str(exc))
            return CartResult(success=False, error=exc.reason, message=str(exc))
        return CartResult(success=True, cart=cart)

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    async def get_cart(self) -> Cart | None:
        stored = self._load()
        if stored is None:
            return None
        return await self._hydrate(stored)

    def get_cart_id(self) -> str | None:
        stored = self._load()
        return stored.id if stored else None

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    async def _find_variant(self, variant_id: str):
        record = await self.catalog.get_variant_with_product(variant_id)
        if record is None:
            raise VariantNotFound(variant_id)
        return record

    async def add_to_cart(self, variant_id: str, quantity: int = 1) -> CartResult:
        try:
            if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
                raise InvalidQuantity(quantity)
            record = await self._find_variant(variant_id)
        except (InvalidQuantity, VariantNotFound) as exc:
            logger.info("add_to_cart_rejected", variant_id=variant_id, reason=exc.reason.value)
            return CartResult(success=False, error=exc.reason, message=first_message(exc))
        except UpstreamUnavailable as exc:
            logger.error("add_to_cart_catalogue_unavailable", variant_id=variant_id, error=str(exc))
            return CartResult(success=False, error=exc.reason, message=str(exc))

        stored = self._load()
        if stored is None:
            stored = StoredCart.new()
            logger.info("cart_created", cart_id=stored.id)
        else:
            # Lines the catalogue dropped would otherwise pin the cart's currency
            try:
                stored = await prune(stored, self.catalog, self.settings.item_timeout)
            except UpstreamUnavailable as exc:
                logger.error("add_to_cart_catalogue_unavailable", cart_id=stored.id, error=str(exc))
                return CartResult(success=False, error=exc.reason, message=str(exc))

        action = AddItem(StoredCartItem(variant_id=variant_id, quantity=quantity), record.variant.currency)
        return await self._apply(stored, action)

    async def remove_from_cart(self, variant_id: str) -> CartResult:
        stored = self._load()
        if stored is None:
            return CartResult(success=False, error=FailureReason.CART_NOT_FOUND)
        return await self._apply(stored, Remove(variant_id))

    async def set_cart_quantity(self, variant_id: str, quantity: int) -> CartResult:
        stored = self._load()
        if stored is None:
            return CartResult(success=False, error=FailureReason.CART_NOT_FOUND)
        return await self._apply(stored, SetQuantity(variant_id, quantity))

    def clear_cart(self) -> CartResult:
        cart_id = self.get_cart_id()
        cart_storage.clear(self.storage)
        logger.info("cart_cleared", cart_id=cart_id)
        return CartResult(success=True)

    # -------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------
    async def start_checkout(self, buyer: Buyer | None = None) -> CheckoutResult:
        stored = self._load()
        try:
            cart = await self._hydrate(stored) if stored else None
        except UpstreamUnavailable as exc:
            logger.error("checkout_hydration_failed", cart_id=stored.id, error=str(exc))
            return CheckoutResult(success=False, error=exc.reason, message=str(exc))

        urls = CheckoutUrls(success_url=self.settings.success_url, cancel_url=self.settings.cancel_url)
        return await start_checkout(cart, self.gateway, urls, buyer)
