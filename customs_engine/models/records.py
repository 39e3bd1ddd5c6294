"""Pydantic models for order items and customs declaration lines."""
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator


def normalize_country(value: Optional[str]) -> Optional[str]:
    """Coerce a country name or code to ISO-2 ("Canada" -> "CA", "USA" -> "US")."""
    if value is None:
        return None
    country = str(value).strip().upper()
    if not country:
        return None
    if country == "CANADA":
        return "CA"
    if country in ("UNITED STATES", "USA"):
        return "US"
    return country[:2] if len(country) > 2 else country


def _blank_to_none(v):
    if v is None:
        return None
    v = str(v).strip()
    return v or None


class Item(BaseModel):
    """One sold unit-type within an order.

    Attributes:
        name: Storefront title of the item
        quantity: Units sold (positive)
        unit_price: Price per unit (non-negative)
        sku: Item SKU, if the order feed carries one
        external_id: Order-item identifier from the order feed
        product_id: Catalog product identifier
        category: Raw storefront category (e.g., "2026 Planners - Hardcover")
    """

    name: str = Field(..., max_length=500, description="Item title")
    quantity: int = Field(..., gt=0, description="Units sold")
    unit_price: Decimal = Field(default=Decimal("0"), ge=0, description="Unit price")
    sku: Optional[str] = Field(default=None, max_length=255)
    external_id: Optional[str] = Field(default=None, max_length=255)
    product_id: Optional[str] = Field(default=None, max_length=255)
    category: Optional[str] = Field(default=None, max_length=500)

    @field_validator("sku", "external_id", "product_id", "category", mode="before")
    @classmethod
    def strip_identifiers(cls, v):
        """Treat blank identifiers as missing; accept numeric ids."""
        return _blank_to_none(v)

    @property
    def line_value(self) -> Decimal:
        """Total value of this item (unit price x quantity), quantized to cents."""
        return (self.unit_price * self.quantity).quantize(Decimal("0.01"))

    model_config = {
        "json_schema_extra": {
            "example": {
                "name": "A5 Dotted Notebook - Wisteria",
                "quantity": 2,
                "unit_price": "28.00",
                "sku": "NTB-A5-DOT-WIS",
                "external_id": "771203",
                "product_id": "551",
                "category": "A5 Notebooks",
            }
        }
    }


class DeclarationLine(BaseModel):
    """One taxed entry on a customs declaration.

    Attributes:
        description: Customs description of the goods
        code: Harmonized tariff code (any formatting; compared digit-wise)
        quantity: Declared units (positive)
        value: Declared value (non-negative, quantized to cents)
        origin_country: ISO-2 country of origin
        sku: SKU carried on the line, if any
        declaration_id: Opaque identifier owned by the declaration system
        external_id: Order-item identifier the line was created for
        product_id: Catalog product identifier the line was created for
    """

    description: str = Field(..., max_length=500)
    code: Optional[str] = Field(default=None, max_length=32)
    quantity: int = Field(default=1, gt=0)
    value: Decimal = Field(default=Decimal("0"), ge=0)
    origin_country: Optional[str] = Field(default=None)
    sku: Optional[str] = Field(default=None, max_length=255)
    declaration_id: Optional[str] = Field(default=None, max_length=255)
    external_id: Optional[str] = Field(default=None, max_length=255)
    product_id: Optional[str] = Field(default=None, max_length=255)

    @field_validator("value")
    @classmethod
    def validate_value_precision(cls, v: Decimal) -> Decimal:
        """Quantize declared value to 2 decimal places."""
        return v.quantize(Decimal("0.01"))

    @field_validator("origin_country", mode="before")
    @classmethod
    def validate_origin_country(cls, v):
        """Normalize country of origin to ISO-2."""
        return normalize_country(v)

    @field_validator("code", "sku", "declaration_id", "external_id", "product_id", mode="before")
    @classmethod
    def strip_identifiers(cls, v):
        """Treat blank identifiers as missing; accept numeric ids."""
        return _blank_to_none(v)

    model_config = {
        "json_schema_extra": {
            "example": {
                "description": "Notebook (bound journal)",
                "code": "4820.10.2060",
                "quantity": 2,
                "value": "56.00",
                "origin_country": "CA",
                "declaration_id": "90817263",
            }
        }
    }
