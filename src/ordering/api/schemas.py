"""Pydantic request/response schemas for the Cart API.

These are external contracts (anti-corruption layer), separate from the
internal cart dataclasses. Amounts are decimal strings of minor units and
currencies are uppercase ISO codes.
"""

from pydantic import BaseModel, Field

from catalogue.shared.money import Money, format_money
from ordering.cart.cart import Cart, CartLineItem, item_count, subtotal


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class MoneySchema(BaseModel):
    amount: str = Field(pattern=r"^[0-9]+$")
    currency: str = Field(pattern=r"^[A-Z]{3}$")
    formatted: str

    @classmethod
    def from_money(cls, money: Money) -> "MoneySchema":
        return cls(
            amount=money.to_minor_units(),
            currency=money.currency,
            formatted=format_money(money.amount, money.currency),
        )


class VariantOptionSchema(BaseModel):
    key: str
    label: str
    value: str
    type: str
    color_value: str | None = None


class CartLineItemSchema(BaseModel):
    variant_id: str
    quantity: int
    product_id: str
    product_name: str
    product_slug: str
    images: list[str] = Field(default_factory=list)
    options: list[VariantOptionSchema] = Field(default_factory=list)
    unit_price: MoneySchema
    line_total: MoneySchema

    @classmethod
    def from_line(cls, line: CartLineItem) -> "CartLineItemSchema":
        return cls(
            variant_id=line.variant_id,
            quantity=line.quantity,
            product_id=line.product.id,
            product_name=line.product.name,
            product_slug=line.product.slug,
            images=list(line.variant.images or line.product.images),
            options=[VariantOptionSchema(**option.to_dict()) for option in line.variant.options],
            unit_price=MoneySchema.from_money(line.variant.price),
            line_total=MoneySchema.from_money(line.line_total),
        )


class CartSchema(BaseModel):
    id: str
    currency: str
    item_count: int
    subtotal: MoneySchema
    items: list[CartLineItemSchema] = Field(default_factory=list)

    @classmethod
    def from_cart(cls, cart: Cart) -> "CartSchema":
        return cls(
            id=cart.id,
            currency=cart.currency,
            item_count=item_count(cart),
            subtotal=MoneySchema.from_money(subtotal(cart, cart.currency)),
            items=[CartLineItemSchema.from_line(line) for line in cart.items],
        )


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    variant_id: str = Field(min_length=1)
    quantity: int = 1

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "variant_id": "price_1PbXk2Hs9",
                    "quantity": 2,
                }
            ]
        }
    }


class SetQuantityRequest(BaseModel):
    quantity: int


class CheckoutRequest(BaseModel):
    email: str | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class CartResultResponse(BaseModel):
    success: bool
    cart: CartSchema | None = None
    error: str | None = None
    message: str | None = None


class CheckoutResponse(BaseModel):
    success: bool
    url: str | None = None
    error: str | None = None
    message: str | None = None


class StatusResponse(BaseModel):
    status: str = "ok"
