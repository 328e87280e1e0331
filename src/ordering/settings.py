"""Cart engine settings read from the environment."""

import os
from dataclasses import dataclass

from catalogue.shared.money import normalize_currency


@dataclass(frozen=True)
class CartSettings:
    ttl_days: int = 30
    default_currency: str = "USD"
    max_quantity: int = 999
    item_timeout: float = 5.0
    base_url: str = "http://localhost:8000"
    secure_cookies: bool = False

    @classmethod
    def from_env(cls) -> "CartSettings":
        return cls(
            ttl_days=int(os.environ.get("CART_TTL_DAYS", "30")),
            default_currency=normalize_currency(os.environ.get("DEFAULT_CURRENCY", "USD")),
            max_quantity=int(os.environ.get("CART_MAX_QUANTITY", "999")),
            item_timeout=float(os.environ.get("CART_ITEM_TIMEOUT", "5.0")),
            base_url=os.environ.get("STORE_BASE_URL", "http://localhost:8000").rstrip("/"),
            secure_cookies=os.environ.get("PROTEAN_ENV", "development").lower() == "production",
        )

    @property
    def max_age(self) -> int:
        """Cookie lifetime in seconds."""
        return self.ttl_days * 24 * 60 * 60

    @property
    def success_url(self) -> str:
        # {CHECKOUT_SESSION_ID} is expanded by the payment provider
        return f"{self.base_url}/checkout/success?session_id={{CHECKOUT_SESSION_ID}}"

    @property
    def cancel_url(self) -> str:
        return f"{self.base_url}/checkout/cancel"
