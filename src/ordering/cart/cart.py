"""Cart line-item model.

Two cart shapes share the same invariants:

- ``Cart``: the display-ready cart, each line carrying a snapshot of its
  variant and product so it renders without a second lookup.
- ``StoredCart``: the durable form, only ``(variant_id, quantity)`` pairs.

Both are frozen. The functions below never mutate their input; they return a
new cart (or the very same object when nothing changed) and enforce:

1. every line shares the cart currency; an empty cart adopts the currency of
   the first line added,
2. at most one line per variant id (quantities merge),
3. every line has quantity >= 1; a line reaching 0 is removed.
"""

from dataclasses import dataclass, replace
from uuid import uuid4

from catalogue.product.summary import ProductRef, ProductVariant, VariantWithProduct
from catalogue.shared.money import Money, sum_money
from shared.errors import CurrencyMismatch, InvalidQuantity, QuantityLimitExceeded

PLACEHOLDER_CART_ID = "optimistic"
DEFAULT_CURRENCY = "USD"
MAX_LINE_QUANTITY = 999


# ---------------------------------------------------------------------------
# Cart shapes
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class CartLineItem:
    quantity: int
    variant: ProductVariant
    product: ProductRef

    @property
    def variant_id(self) -> str:
        return self.variant.id

    @property
    def currency(self) -> str:
        return self.variant.currency

    @property
    def line_total(self) -> Money:
        return self.variant.price.multiply(self.quantity)

    @classmethod
    def from_record(cls, record: VariantWithProduct, quantity: int) -> "CartLineItem":
        return cls(quantity=quantity, variant=record.variant, product=record.product.ref())


@dataclass(frozen=True)
class Cart:
    id: str
    currency: str
    items: tuple[CartLineItem, ...] = ()


@dataclass(frozen=True)
class StoredCartItem:
    variant_id: str
    quantity: int


@dataclass(frozen=True)
class StoredCart:
    id: str
    currency: str | None = None
    items: tuple[StoredCartItem, ...] = ()

    @classmethod
    def new(cls) -> "StoredCart":
        return cls(id=str(uuid4()))


# ---------------------------------------------------------------------------
# Line-item operations (generic over Cart and StoredCart)
# ---------------------------------------------------------------------------
def _find(cart, variant_id):
    return next((item for item in cart.items if item.variant_id == variant_id), None)


def _check_limit(variant_id, quantity, limit):
    if quantity > limit:
        raise QuantityLimitExceeded(variant_id, quantity, limit)


def _with_quantity(cart, variant_id, quantity):
    items = tuple(replace(item, quantity=quantity) if item.variant_id == variant_id else item for item in cart.items)
    return replace(cart, items=items)


def add_item(cart, item, currency, limit=MAX_LINE_QUANTITY):
    """Add ``item`` to ``cart``, merging with an existing line for the same variant.

    ``cart`` may be None, in which case a placeholder ``Cart`` is seeded with
    ``currency``. Raises ``CurrencyMismatch`` when the cart already holds items
    in another currency and ``QuantityLimitExceeded`` above ``limit``.
    """
    if isinstance(item.quantity, bool) or not isinstance(item.quantity, int) or item.quantity < 1:
        raise InvalidQuantity(item.quantity)

    if cart is None:
        _check_limit(item.variant_id, item.quantity, limit)
        return Cart(id=PLACEHOLDER_CART_ID, currency=currency, items=(item,))

    if not cart.items:
        _check_limit(item.variant_id, item.quantity, limit)
        return replace(cart, currency=currency, items=(item,))

    if currency != cart.currency:
        raise CurrencyMismatch(cart.currency, currency)

    existing = _find(cart, item.variant_id)
    if existing is None:
        _check_limit(item.variant_id, item.quantity, limit)
        return replace(cart, items=cart.items + (item,))

    quantity = existing.quantity + item.quantity
    _check_limit(item.variant_id, quantity, limit)
    return _with_quantity(cart, item.variant_id, quantity)


def set_quantity(cart, variant_id, quantity, limit=MAX_LINE_QUANTITY):
    """Set a line's quantity exactly; ``quantity <= 0`` removes the line."""
    if cart is None or _find(cart, variant_id) is None:
        return cart
    if quantity <= 0:
        return remove_item(cart, variant_id)
    _check_limit(variant_id, quantity, limit)
    return _with_quantity(cart, variant_id, quantity)


def increment(cart, variant_id, delta, limit=MAX_LINE_QUANTITY):
    """Change a line's quantity by ``delta``; a result <= 0 removes the line."""
    if cart is None:
        return cart
    existing = _find(cart, variant_id)
    if existing is None:
        return cart
    return set_quantity(cart, variant_id, existing.quantity + delta, limit)


def remove_item(cart, variant_id):
    if cart is None or _find(cart, variant_id) is None:
        return cart
    return replace(cart, items=tuple(item for item in cart.items if item.variant_id != variant_id))


# ---------------------------------------------------------------------------
# Derived views
# ---------------------------------------------------------------------------
def item_count(cart) -> int:
    if cart is None:
        return 0
    return sum(item.quantity for item in cart.items)


def cart_currency(cart, default=DEFAULT_CURRENCY) -> str:
    if cart is None or not cart.items:
        return default
    return cart.currency


def subtotal(cart: Cart | None, default_currency=DEFAULT_CURRENCY) -> Money:
    currency = cart_currency(cart, default_currency)
    if cart is None:
        return Money.zero(currency)
    return sum_money((item.line_total for item in cart.items), currency=currency)
