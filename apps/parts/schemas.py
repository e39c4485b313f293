from pydantic import BaseModel, Field, field_validator
from typing import Any, Optional
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

NAME_ERROR = "Part name cannot be empty."
QUANTITY_ERROR = "Quantity must be a non-negative number."
PRICE_ERROR = "Price must be a non-negative number or empty."

# Column bounds: quantity is a 32-bit INTEGER, price is NUMERIC(10, 2)
MAX_QUANTITY = 2 ** 31 - 1
PRICE_LIMIT = Decimal(10) ** 8
PRICE_STEP = Decimal("0.01")


def is_blank(value: Any) -> bool:
    """True for values the API treats as "not supplied": null or whitespace-only strings."""
    return value is None or (isinstance(value, str) and value.strip() == "")


def parse_name(value: Any) -> str:
    if is_blank(value) or isinstance(value, (dict, list, bool)):
        raise ValueError(NAME_ERROR)
    return str(value).strip()


def parse_optional_text(value: Any) -> Optional[str]:
    # Falsy and blank values are stored as NULL, never as ""
    if not value or is_blank(value):
        return None
    if isinstance(value, (dict, list)):
        raise ValueError("Text fields must be strings.")
    return str(value)


def parse_quantity(value: Any) -> int:
    if is_blank(value):
        return 0
    if isinstance(value, bool):
        raise ValueError(QUANTITY_ERROR)
    if isinstance(value, int):
        quantity = value
    elif isinstance(value, float):
        if not value.is_integer():
            raise ValueError(QUANTITY_ERROR)
        quantity = int(value)
    elif isinstance(value, str):
        try:
            quantity = int(value.strip())
        except ValueError:
            raise ValueError(QUANTITY_ERROR)
    else:
        raise ValueError(QUANTITY_ERROR)

    if quantity < 0 or quantity > MAX_QUANTITY:
        raise ValueError(QUANTITY_ERROR)
    return quantity


def parse_price(value: Any) -> Optional[Decimal]:
    if is_blank(value):
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise ValueError(PRICE_ERROR)
    try:
        price = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(PRICE_ERROR)

    if not price.is_finite() or price < 0 or price >= PRICE_LIMIT:
        raise ValueError(PRICE_ERROR)
    # Round the way the column stores it so responses match later reads
    price = price.quantize(PRICE_STEP, rounding=ROUND_HALF_UP)
    if price >= PRICE_LIMIT:
        raise ValueError(PRICE_ERROR)
    return price


class PartPayload(BaseModel):
    """Request body shared by create and update; every field is parsed explicitly."""

    name: str = Field(None, description="Part name, trimmed")
    description: Optional[str] = Field(None, description="Detailed description")
    quantity: int = Field(None, description="Units in stock, 0 when blank")
    price: Optional[Decimal] = Field(None, description="Unit price, null when blank")
    category: Optional[str] = Field(None, description="Category")

    model_config = {"validate_default": True}

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v):
        return parse_name(v)

    @field_validator("description", "category", mode="before")
    @classmethod
    def validate_optional_text(cls, v):
        return parse_optional_text(v)

    @field_validator("quantity", mode="before")
    @classmethod
    def validate_quantity(cls, v):
        return parse_quantity(v)

    @field_validator("price", mode="before")
    @classmethod
    def validate_price(cls, v):
        return parse_price(v)


class PartResponse(BaseModel):
    part_id: str
    name: str
    description: Optional[str] = None
    quantity: int
    price: Optional[float] = None
    category: Optional[str] = None

    model_config = {"from_attributes": True}

    @field_validator("part_id", mode="before")
    @classmethod
    def part_id_as_string(cls, v):
        # Identifiers are BIGINT; strings keep JSON clients from losing precision
        return str(v)


class PartDetailResponse(PartResponse):
    created_at: datetime
    updated_at: datetime


class MessageResponse(BaseModel):
    message: str
