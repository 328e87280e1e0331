"""Cart reducer: ``reduce(state, action) -> next state``.

The same pure function drives the optimistic view held by ``CartContext`` and
the authoritative ``StoredCart`` mutation performed by ``CartService``. The two
tracks are reconciled only by ``Sync``, which replaces the state wholesale.

Transitions:

    Action        Empty                          Populated
    ------------  -----------------------------  --------------------------------
    AddItem       seed cart with item currency   merge by variant id or append
    Increase      no-op                          quantity + 1 (no-op if absent)
    Decrease      no-op                          quantity - 1, removed at 0
    Remove        no-op                          drop line (no-op if absent)
    SetQuantity   no-op                          set exactly, removed at <= 0
    Sync          replace state with the given cart (or None)
"""

from dataclasses import dataclass

from ordering.cart.cart import MAX_LINE_QUANTITY, add_item, increment, remove_item, set_quantity


@dataclass(frozen=True)
class AddItem:
    item: object  # CartLineItem or StoredCartItem
    currency: str


@dataclass(frozen=True)
class Increase:
    variant_id: str


@dataclass(frozen=True)
class Decrease:
    variant_id: str


@dataclass(frozen=True)
class Remove:
    variant_id: str


@dataclass(frozen=True)
class SetQuantity:
    variant_id: str
    quantity: int


@dataclass(frozen=True)
class Sync:
    cart: object | None


def reduce(state, action, limit=MAX_LINE_QUANTITY):
    if isinstance(action, Sync):
        return action.cart

    if isinstance(action, AddItem):
        return add_item(state, action.item, action.currency, limit)

    if state is None or not state.items:
        return state

    if isinstance(action, Increase):
        return increment(state, action.variant_id, 1, limit)
    if isinstance(action, Decrease):
        return increment(state, action.variant_id, -1, limit)
    if isinstance(action, Remove):
        return remove_item(state, action.variant_id)
    if isinstance(action, SetQuantity):
        return set_quantity(state, action.variant_id, action.quantity, limit)

    raise TypeError(f"Unknown cart action: {action!r}")
