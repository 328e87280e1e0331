"""FastAPI routes for the Ordering domain: the cart and checkout redirects."""

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from ordering.api.schemas import (
    AddToCartRequest,
    CartResultResponse,
    CartSchema,
    CheckoutRequest,
    CheckoutResponse,
    SetQuantityRequest,
    StatusResponse,
)
from ordering.cart.service import CartResult, CartService
from ordering.cart.storage import CookieCartStorage
from ordering.checkout.initiation import Buyer, CheckoutResult
from ordering.settings import CartSettings
from shared.errors import FailureReason, UpstreamUnavailable

_FAILURE_STATUS = {
    FailureReason.VARIANT_NOT_FOUND: 404,
    FailureReason.CART_NOT_FOUND: 404,
    FailureReason.CURRENCY_MISMATCH: 409,
    FailureReason.QUANTITY_LIMIT_EXCEEDED: 422,
    FailureReason.INVALID_QUANTITY: 422,
    FailureReason.EMPTY_CART_CHECKOUT: 422,
    FailureReason.CHECKOUT_FAILED: 502,
    FailureReason.UPSTREAM_UNAVAILABLE: 503,
}


def get_cart_service(request: Request, response: Response) -> CartService:
    """Build a CartService bound to this request's cookies."""
    settings = CartSettings.from_env()
    storage = CookieCartStorage(request, response, secure=settings.secure_cookies)
    return CartService(storage, settings=settings)


def _cart_result(result: CartResult, response: Response) -> CartResultResponse:
    if not result.success:
        response.status_code = _FAILURE_STATUS.get(result.error, 400)
    return CartResultResponse(
        success=result.success,
        cart=CartSchema.from_cart(result.cart) if result.cart else None,
        error=result.error.value if result.error else None,
        message=result.message,
    )


def _checkout_result(result: CheckoutResult, response: Response) -> CheckoutResponse:
    if not result.success:
        response.status_code = _FAILURE_STATUS.get(result.error, 400)
    return CheckoutResponse(
        success=result.success,
        url=result.url,
        error=result.error.value if result.error else None,
        message=result.message,
    )


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartSchema | None)
async def get_cart(service: CartService = Depends(get_cart_service)) -> CartSchema | None:
    try:
        cart = await service.get_cart()
    except UpstreamUnavailable as exc:
        raise HTTPException(status_code=503, detail="Catalogue is unavailable, please try again") from exc
    return CartSchema.from_cart(cart) if cart else None


@cart_router.post("/items", response_model=CartResultResponse)
async def add_cart_item(
    body: AddToCartRequest,
    response: Response,
    service: CartService = Depends(get_cart_service),
) -> CartResultResponse:
    result = await service.add_to_cart(body.variant_id, body.quantity)
    return _cart_result(result, response)


@cart_router.put("/items/{variant_id}", response_model=CartResultResponse)
async def set_cart_item_quantity(
    variant_id: str,
    body: SetQuantityRequest,
    response: Response,
    service: CartService = Depends(get_cart_service),
) -> CartResultResponse:
    result = await service.set_cart_quantity(variant_id, body.quantity)
    return _cart_result(result, response)


@cart_router.delete("/items/{variant_id}", response_model=CartResultResponse)
async def remove_cart_item(
    variant_id: str,
    response: Response,
    service: CartService = Depends(get_cart_service),
) -> CartResultResponse:
    result = await service.remove_from_cart(variant_id)
    return _cart_result(result, response)


@cart_router.delete("", response_model=CartResultResponse)
async def clear_cart(response: Response, service: CartService = Depends(get_cart_service)) -> CartResultResponse:
    return _cart_result(service.clear_cart(), response)


@cart_router.post("/checkout", response_model=CheckoutResponse)
async def checkout_cart(
    request: Request,
    response: Response,
    body: CheckoutRequest | None = None,
    service: CartService = Depends(get_cart_service),
) -> CheckoutResponse:
    """Create a hosted payment session for the current cart.

    The buyer identity, when present, is set on ``request.state.buyer`` by the
    authentication layer in front of this app.
    """
    buyer = getattr(request.state, "buyer", None) or Buyer()
    if body and body.email and not buyer.email:
        buyer = Buyer(id=buyer.id, email=body.email)
    result = await service.start_checkout(buyer)
    return _checkout_result(result, response)


# ---------------------------------------------------------------------------
# Checkout Router (payment provider redirects)
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])


@checkout_router.get("/success", response_model=StatusResponse)
async def checkout_success(
    session_id: str | None = None,
    service: CartService = Depends(get_cart_service),
) -> StatusResponse:
    """Payment completed: the cart has become an order upstream, so drop it."""
    service.clear_cart()
    return StatusResponse(status="completed")


@checkout_router.get("/cancel", response_model=StatusResponse)
async def checkout_cancel() -> StatusResponse:
    """Payment abandoned: the cart is left untouched."""
    return StatusResponse(status="cancelled")
