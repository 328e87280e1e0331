"""Payment gateway port (abstract interface).

Defines the contract that all payment gateway adapters must implement.
This enables swapping between FakeGateway (dev/test) and StripeGateway
(production) without changing any cart or checkout code. The storefront only
needs one thing from the provider: a hosted checkout session to redirect to.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class SessionLineItem:
    """One checkout line: the external price identifier and a quantity."""

    variant_id: str
    quantity: int


@dataclass(frozen=True)
class CheckoutSessionRequest:
    line_items: tuple[SessionLineItem, ...]
    success_url: str
    cancel_url: str
    currency: str
    buyer_email: str | None = None
    buyer_id: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class SessionResult:
    """Result of a checkout session creation attempt."""

    success: bool
    session_id: str | None = None
    url: str | None = None
    failure_reason: str | None = None


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    async def create_session(self, request: CheckoutSessionRequest) -> SessionResult:
        """Create a hosted checkout session.

        A rejected request comes back as an unsuccessful ``SessionResult``;
        an unreachable provider raises ``UpstreamUnavailable``.
        """
        ...
