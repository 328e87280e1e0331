"""Durable storage of the minimal cart.

The stored cart travels as URL-safe base64 of a small JSON document next to a
separate identity token. Both are written with the same max-age so they
expire together. A blob that fails validation is treated as no cart at all.
"""

import base64
import json
import math
import time
from abc import ABC, abstractmethod
from collections.abc import Callable

import structlog
from fastapi import Request, Response
from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, model_validator

from ordering.cart.cart import StoredCart, StoredCartItem
from shared.errors import CorruptPersistedState

logger = structlog.get_logger(__name__)

CART_COOKIE = "cart"
CART_ID_COOKIE = "cartId"


# ---------------------------------------------------------------------------
# Storage port and adapters
# ---------------------------------------------------------------------------
class CartStorage(ABC):
    """Scoped read/write of the cart blob and its identity token."""

    @abstractmethod
    def read(self) -> tuple[str | None, str | None]:
        """Return ``(blob, token)``; either may be None."""
        ...

    @abstractmethod
    def write(self, blob: str, token: str, max_age: int) -> None: ...

    @abstractmethod
    def delete(self) -> None: ...


class CookieCartStorage(CartStorage):
    """Cookie-backed storage bound to one FastAPI request/response pair.

    Writes are visible to later reads within the same request.
    """

    def __init__(self, request: Request, response: Response, secure: bool = False) -> None:
        self.response = response
        self.secure = secure
        self._blob = request.cookies.get(CART_COOKIE)
        self._token = request.cookies.get(CART_ID_COOKIE)

    def read(self) -> tuple[str | None, str | None]:
        return self._blob, self._token

    def write(self, blob: str, token: str, max_age: int) -> None:
        for key, value in ((CART_COOKIE, blob), (CART_ID_COOKIE, token)):
            self.response.set_cookie(
                key,
                value,
                max_age=max_age,
                path="/",
                secure=self.secure,
                httponly=True,
                samesite="lax",
            )
        self._blob, self._token = blob, token

    def delete(self) -> None:
        for key in (CART_COOKIE, CART_ID_COOKIE):
            self.response.delete_cookie(key, path="/", secure=self.secure, httponly=True, samesite="lax")
        self._blob = self._token = None


class MemoryCartStorage(CartStorage):
    """In-process storage for one client, with expiry against an injectable clock."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self.clock = clock
        self._blob: str | None = None
        self._token: str | None = None
        self._expires_at: float | None = None

    def read(self) -> tuple[str | None, str | None]:
        if self._expires_at is not None and self.clock() >= self._expires_at:
            self.delete()
        return self._blob, self._token

    def write(self, blob: str, token: str, max_age: int) -> None:
        self._blob, self._token = blob, token
        self._expires_at = self.clock() + max_age

    def delete(self) -> None:
        self._blob = self._token = self._expires_at = None


# ---------------------------------------------------------------------------
# Serialisation
# ---------------------------------------------------------------------------
class StoredCartItemPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    variant_id: str = Field(min_length=1)
    # Any JSON number, including NaN/Infinity; unusable values are filtered after validation
    quantity: StrictInt | StrictFloat


class StoredCartPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1)
    currency: str | None = Field(default=None, pattern=r"^[A-Z]{3}$")
    items: list[StoredCartItemPayload] = Field(default_factory=list)

    @model_validator(mode="after")
    def variant_ids_must_be_unique(self):
        variant_ids = [item.variant_id for item in self.items]
        if len(variant_ids) != len(set(variant_ids)):
            raise ValueError("duplicate variant ids")
        return self


def _usable_quantity(quantity) -> bool:
    return math.isfinite(quantity) and quantity > 0 and float(quantity).is_integer()


def encode_stored_cart(stored: StoredCart) -> str:
    payload = StoredCartPayload(
        id=stored.id,
        currency=stored.currency,
        items=[StoredCartItemPayload(variant_id=i.variant_id, quantity=i.quantity) for i in stored.items],
    )
    # Unpadded so the cookie value needs no quoting
    return base64.urlsafe_b64encode(payload.model_dump_json().encode("utf-8")).decode("ascii").rstrip("=")


def decode_stored_cart(blob: str) -> StoredCart:
    """Parse a blob back into a StoredCart. Raises ``CorruptPersistedState``."""
    try:
        raw = blob.encode("ascii") + b"=" * (-len(blob) % 4)
        # stdlib json keeps NaN/Infinity literals so they can be filtered below
        data = json.loads(base64.b64decode(raw, altchars=b"-_", validate=True))
        payload = StoredCartPayload.model_validate(data)
    except (ValueError, RecursionError) as exc:
        raise CorruptPersistedState(str(exc).splitlines()[0] if str(exc) else type(exc).__name__) from exc

    return StoredCart(
        id=payload.id,
        currency=payload.currency,
        items=tuple(
            StoredCartItem(variant_id=item.variant_id, quantity=int(item.quantity))
            for item in payload.items
            if _usable_quantity(item.quantity)
        ),
    )


# ---------------------------------------------------------------------------
# Persist / load
# ---------------------------------------------------------------------------
def persist(storage: CartStorage, stored: StoredCart, max_age: int) -> None:
    """Write the cart blob and refresh its identity token with the same lifetime."""
    storage.write(encode_stored_cart(stored), stored.id, max_age)


def load(storage: CartStorage) -> StoredCart | None:
    """Read the stored cart; absent, expired or corrupt data all yield None."""
    blob, token = storage.read()
    if not blob:
        return None

    try:
        stored = decode_stored_cart(blob)
    except CorruptPersistedState as exc:
        logger.warning("stored_cart_corrupt", error=exc.messages)
        return None

    if token is not None and token != stored.id:
        logger.warning("stored_cart_token_mismatch", cart_id=stored.id)
        return None

    return stored


def clear(storage: CartStorage) -> None:
    storage.delete()
