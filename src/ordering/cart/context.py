"""Per-session cart context holding the optimistic and confirmed views.

A ``CartContext`` is created for one client session and passed explicitly to
whatever needs the cart. It keeps two tracks driven by the same reducer:

- ``confirmed``: the last cart the server returned,
- ``optimistic``: ``confirmed`` plus actions not yet acknowledged.

``run`` applies an action optimistically, awaits the server call and then
replaces the optimistic state wholesale with ``Sync``: the server's cart on
success, the confirmed cart on failure. States are never diffed or merged.
"""

from collections.abc import Awaitable, Callable

from catalogue.shared.money import Money
from ordering.cart import cart as lines
from ordering.cart.cart import MAX_LINE_QUANTITY, PLACEHOLDER_CART_ID, Cart
from ordering.cart.reducer import Sync, reduce
from shared.errors import UpstreamUnavailable


class CartContext:
    def __init__(
        self,
        initial: Cart | None = None,
        default_currency: str = lines.DEFAULT_CURRENCY,
        max_quantity: int = MAX_LINE_QUANTITY,
    ) -> None:
        self.confirmed = initial
        self.optimistic = initial
        self.default_currency = default_currency
        self.max_quantity = max_quantity

    def dispatch(self, action):
        """Apply ``action`` to the optimistic view only."""
        self.optimistic = reduce(self.optimistic, action, self.max_quantity)
        return self.optimistic

    def confirm(self, cart: Cart | None) -> None:
        self.confirmed = cart
        self.optimistic = reduce(self.optimistic, Sync(cart))

    def rollback(self) -> None:
        self.optimistic = reduce(self.optimistic, Sync(self.confirmed))

    async def run(self, action, server_call: Callable[[], Awaitable]):
        """Apply ``action`` now and reconcile with ``server_call``'s result.

        ``server_call`` returns a ``CartResult``. Validation errors raised by the
        optimistic step propagate before the server is called.
        """
        self.dispatch(action)
        try:
            result = await server_call()
        except UpstreamUnavailable:
            self.rollback()
            raise

        if result.success:
            self.confirm(result.cart)
        else:
            self.rollback()
        return result

    # -------------------------------------------------------------------
    # Views over the optimistic cart
    # -------------------------------------------------------------------
    @property
    def items(self):
        return self.optimistic.items if self.optimistic else ()

    @property
    def item_count(self) -> int:
        return lines.item_count(self.optimistic)

    @property
    def subtotal(self) -> Money:
        return lines.subtotal(self.optimistic, self.default_currency)

    @property
    def currency(self) -> str:
        return lines.cart_currency(self.optimistic, self.default_currency)

    @property
    def cart_id(self) -> str | None:
        for cart in (self.optimistic, self.confirmed):
            if cart is not None and cart.id != PLACEHOLDER_CART_ID:
                return cart.id
        return None
