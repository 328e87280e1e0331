"""Error taxonomy shared by the catalogue, ordering and payments contexts.

Recoverable, user-facing conditions subclass protean's ``ValidationError`` so
they carry a ``messages`` dict like every other domain rule violation.
``UpstreamUnavailable`` is an infrastructure failure and deliberately is not a
validation error: callers must surface it as "try again", never as an empty
result.
"""

from enum import Enum

from protean.exceptions import ValidationError


class FailureReason(Enum):
    CURRENCY_MISMATCH = "currency_mismatch"
    VARIANT_NOT_FOUND = "variant_not_found"
    CORRUPT_PERSISTED_STATE = "corrupt_persisted_state"
    EMPTY_CART_CHECKOUT = "empty_cart_checkout"
    QUANTITY_LIMIT_EXCEEDED = "quantity_limit_exceeded"
    INVALID_QUANTITY = "invalid_quantity"
    CART_NOT_FOUND = "cart_not_found"
    CHECKOUT_FAILED = "checkout_failed"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"


class CurrencyMismatch(ValidationError):
    """An amount or item in one currency met a cart or amount in another."""

    reason = FailureReason.CURRENCY_MISMATCH

    def __init__(self, expected, actual):
        self.expected = expected
        self.actual = actual
        super().__init__({"currency": [f"Mixed currency carts are not supported ({expected} vs {actual})"]})


class VariantNotFound(ValidationError):
    reason = FailureReason.VARIANT_NOT_FOUND

    def __init__(self, variant_id):
        self.variant_id = variant_id
        super().__init__({"variant_id": [f"Variant {variant_id} not found"]})


class CorruptPersistedState(ValidationError):
    """The stored cart blob failed schema validation."""

    reason = FailureReason.CORRUPT_PERSISTED_STATE

    def __init__(self, detail):
        super().__init__({"cart": [f"Stored cart is corrupt: {detail}"]})


class EmptyCartCheckout(ValidationError):
    reason = FailureReason.EMPTY_CART_CHECKOUT

    def __init__(self):
        super().__init__({"cart": ["Cart is empty"]})


class QuantityLimitExceeded(ValidationError):
    reason = FailureReason.QUANTITY_LIMIT_EXCEEDED

    def __init__(self, variant_id, quantity, limit):
        self.variant_id = variant_id
        self.quantity = quantity
        self.limit = limit
        super().__init__({"quantity": [f"Quantity {quantity} for {variant_id} exceeds the limit of {limit}"]})


class UpstreamUnavailable(Exception):
    """The catalogue or payment collaborator could not be reached at all."""

    reason = FailureReason.UPSTREAM_UNAVAILABLE

    def __init__(self, service, detail=""):
        self.service = service
        self.detail = detail
        super().__init__(f"{service} is unavailable{': ' + detail if detail else ''}")


class InvalidQuantity(ValidationError):
    reason = FailureReason.INVALID_QUANTITY

    def __init__(self, quantity):
        self.quantity = quantity
        super().__init__({"quantity": [f"Quantity must be a positive whole number, got {quantity!r}"]})


def first_message(exc):
    """Return the first human-readable message carried by a validation error."""
    return next((messages[0] for messages in exc.messages.values() if messages), None)
