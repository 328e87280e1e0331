"""Checkout initiation: turn a hydrated cart into a hosted payment session.

The cart is never modified here and nothing is reserved, so calling
``start_checkout`` again after a failure is always safe. Retrying is left to
the caller.
"""

from dataclasses import dataclass

import structlog

from catalogue.shared.money import CURRENCY_CODE
from ordering.cart.cart import Cart
from payments.gateway.port import CheckoutSessionRequest, PaymentGateway, SessionLineItem
from shared.errors import CurrencyMismatch, EmptyCartCheckout, FailureReason, UpstreamUnavailable, first_message

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Buyer:
    id: str | None = None
    email: str | None = None


@dataclass(frozen=True)
class CheckoutUrls:
    success_url: str
    cancel_url: str


@dataclass(frozen=True)
class CheckoutResult:
    success: bool
    url: str | None = None
    error: FailureReason | None = None
    message: str | None = None


def validate_for_checkout(cart: Cart | None) -> Cart:
    """Return ``cart`` if it can be checked out, else raise."""
    if cart is None or not cart.items:
        raise EmptyCartCheckout()
    if not CURRENCY_CODE.match(cart.currency or ""):
        raise CurrencyMismatch(cart.currency, None)
    for item in cart.items:
        if item.currency != cart.currency:
            raise CurrencyMismatch(cart.currency, item.currency)
    return cart


def build_session_request(cart: Cart, urls: CheckoutUrls, buyer: Buyer | None = None) -> CheckoutSessionRequest:
    buyer = buyer or Buyer()
    return CheckoutSessionRequest(
        line_items=tuple(SessionLineItem(variant_id=item.variant_id, quantity=item.quantity) for item in cart.items),
        success_url=urls.success_url,
        cancel_url=urls.cancel_url,
        currency=cart.currency,
        buyer_email=buyer.email,
        buyer_id=buyer.id,
        metadata={"cart_id": cart.id},
    )


async def start_checkout(
    cart: Cart | None,
    gateway: PaymentGateway,
    urls: CheckoutUrls,
    buyer: Buyer | None = None,
) -> CheckoutResult:
    try:
        validate_for_checkout(cart)
    except (EmptyCartCheckout, CurrencyMismatch) as exc:
        logger.info("checkout_rejected", reason=exc.reason.value)
        return CheckoutResult(success=False, error=exc.reason, message=first_message(exc))

    request = build_session_request(cart, urls, buyer)
    try:
        session = await gateway.create_session(request)
    except UpstreamUnavailable as exc:
        logger.error("checkout_gateway_unavailable", cart_id=cart.id, error=str(exc))
        return CheckoutResult(success=False, error=exc.reason, message=str(exc))

    if not session.success:
        logger.warning("checkout_session_failed", cart_id=cart.id, reason=session.failure_reason)
        return CheckoutResult(success=False, error=FailureReason.CHECKOUT_FAILED, message=session.failure_reason)

    logger.info("checkout_session_created", cart_id=cart.id, session_id=session.session_id)
    return CheckoutResult(success=True, url=session.url)
