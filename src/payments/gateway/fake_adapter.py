"""Configurable fake payment gateway for development and testing.

This adapter simulates hosted checkout sessions without any external calls.
It can be configured at runtime to succeed, reject the request, or behave as
if the provider were down, making it useful for:
- Manual API testing
- Automated tests with predictable outcomes
- Development without real gateway credentials
"""

from uuid import uuid4

from payments.gateway.port import CheckoutSessionRequest, PaymentGateway, SessionResult
from shared.errors import UpstreamUnavailable


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Session rejected"
        self.unavailable: bool = False
        self.calls: list[CheckoutSessionRequest] = []

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "Session rejected",
        unavailable: bool = False,
    ) -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.unavailable = unavailable

    async def create_session(self, request: CheckoutSessionRequest) -> SessionResult:
        self.calls.append(request)

        if self.unavailable:
            raise UpstreamUnavailable("payments", "configured outage")

        if self.should_succeed:
            session_id = f"cs_fake_{uuid4().hex[:12]}"
            return SessionResult(
                success=True,
                session_id=session_id,
                url=f"https://checkout.fake/pay/{session_id}",
            )
        return SessionResult(success=False, failure_reason=self.failure_reason)
