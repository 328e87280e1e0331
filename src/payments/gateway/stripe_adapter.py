"""Stripe payment gateway adapter.

Creates hosted Checkout Sessions through Stripe's REST API with httpx. The
request is form-encoded with Stripe's bracket notation for nested fields.
"""

import httpx
import structlog

from payments.gateway.port import CheckoutSessionRequest, PaymentGateway, SessionResult
from shared.errors import UpstreamUnavailable

logger = structlog.get_logger(__name__)


class StripeGateway(PaymentGateway):
    """Production Stripe gateway adapter."""

    BASE_URL = "https://api.stripe.com"

    def __init__(self, api_key: str, timeout: float = 10.0, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport

    @staticmethod
    def encode_session(request: CheckoutSessionRequest) -> dict[str, str]:
        form = {
            "mode": "payment",
            "success_url": request.success_url,
            "cancel_url": request.cancel_url,
        }
        for index, line in enumerate(request.line_items):
            form[f"line_items[{index}][price]"] = line.variant_id
            form[f"line_items[{index}][quantity]"] = str(line.quantity)
        if request.buyer_id:
            form["client_reference_id"] = request.buyer_id
        if request.buyer_email:
            form["customer_email"] = request.buyer_email
        for key, value in request.metadata.items():
            form[f"metadata[{key}]"] = str(value)
        return form

    async def create_session(self, request: CheckoutSessionRequest) -> SessionResult:
        async with httpx.AsyncClient(
            base_url=self.BASE_URL,
            timeout=self.timeout,
            transport=self.transport,
            headers={"Authorization": f"Bearer {self.api_key}"},
        ) as client:
            try:
                response = await client.post("/v1/checkout/sessions", data=self.encode_session(request))
            except httpx.HTTPError as exc:
                logger.error("stripe_session_transport_error", error=str(exc))
                raise UpstreamUnavailable("payments", str(exc)) from exc

        if response.status_code >= 500:
            logger.error("stripe_session_server_error", status_code=response.status_code)
            raise UpstreamUnavailable("payments", f"HTTP {response.status_code}")

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.is_error:
            error = body.get("error") if isinstance(body, dict) else None
            message = error.get("message") if isinstance(error, dict) else None
            message = message or f"HTTP {response.status_code}"
            logger.warning("stripe_session_rejected", status_code=response.status_code, reason=message)
            return SessionResult(success=False, failure_reason=message)

        if not isinstance(body, dict) or not body.get("id") or not body.get("url"):
            logger.error("stripe_session_unreadable", status_code=response.status_code)
            raise UpstreamUnavailable("payments", "unreadable checkout session response")

        return SessionResult(success=True, session_id=body["id"], url=body["url"])
