"""Line Item Value Object

One priced, discounted and taxed row on an invoice. Only the input fields
are stored; every monetary breakdown is derived on demand.
"""

from decimal import Decimal, InvalidOperation
from typing import Any
from pydantic import ConfigDict, Field, ValidationInfo, field_validator
from src.domain.base import BaseModel, generate_uuid
from src.domain.exceptions import ValidationError
from src.domain.money import round2, round4, to_decimal


def _parse_number(field: str, value: Any) -> Decimal:
    try:
        return to_decimal(value)
    except InvalidOperation:
        raise ValidationError(field, f"{field} must be a finite number") from None


class LineItem(BaseModel):
    """
    Line Item - immutable invoice row

    Domain Rules:
    - description is non-blank
    - quantity > 0
    - unit_price >= 0, normalized to 2 decimals
    - discount_percent in [0, 1], normalized to 4 decimals
    - tax_rate >= 0, normalized to 4 decimals
    - each derived amount is rounded half-up to 2 decimals independently
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=generate_uuid)
    description: str = Field(default=None, validate_default=True)
    quantity: int = Field(default=None, validate_default=True)
    unit_price: Decimal = Field(default=None, validate_default=True)
    discount_percent: Decimal = Field(default=None, validate_default=True)
    tax_rate: Decimal = Field(default=None, validate_default=True)

    @field_validator("id", mode="before")
    @classmethod
    def _default_id(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return generate_uuid()
        return value

    @field_validator("description", mode="before")
    @classmethod
    def _require_description(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError("description", "Description is required")
        return value

    @field_validator("quantity", mode="before")
    @classmethod
    def _require_quantity(cls, value: Any) -> Any:
        if value is None:
            raise ValidationError("quantity", "Quantity is required")
        return value

    @field_validator("quantity")
    @classmethod
    def _check_quantity(cls, value: int) -> int:
        if value <= 0:
            raise ValidationError("quantity", "Quantity must be positive")
        return value

    @field_validator("unit_price", mode="before")
    @classmethod
    def _require_unit_price(cls, value: Any) -> Any:
        if value is None:
            raise ValidationError("unit_price", "Unit price is required")
        return _parse_number("unit_price", value)

    @field_validator("unit_price")
    @classmethod
    def _check_unit_price(cls, value: Decimal) -> Decimal:
        if value < 0:
            raise ValidationError("unit_price", "Unit price cannot be negative")
        return round2(value)

    @field_validator("discount_percent", "tax_rate", mode="before")
    @classmethod
    def _default_rate(cls, value: Any, info: ValidationInfo) -> Any:
        return Decimal("0") if value is None else _parse_number(info.field_name, value)

    @field_validator("discount_percent")
    @classmethod
    def _check_discount(cls, value: Decimal) -> Decimal:
        if value < 0 or value > 1:
            raise ValidationError(
                "discount_percent", "Discount percent must be between 0 and 1"
            )
        return round4(value)

    @field_validator("tax_rate")
    @classmethod
    def _check_tax_rate(cls, value: Decimal) -> Decimal:
        if value < 0:
            raise ValidationError("tax_rate", "Tax rate cannot be negative")
        return round4(value)

    @property
    def subtotal(self) -> Decimal:
        return round2(self.unit_price * self.quantity)

    @property
    def discount_amount(self) -> Decimal:
        return round2(self.subtotal * self.discount_percent)

    @property
    def taxable_amount(self) -> Decimal:
        return round2(self.subtotal - self.discount_amount)

    @property
    def tax_amount(self) -> Decimal:
        return round2(self.taxable_amount * self.tax_rate)

    @property
    def total(self) -> Decimal:
        return round2(self.taxable_amount + self.tax_amount)

    def breakdown(self) -> dict[str, Decimal]:
        """All derived amounts, keyed by name"""
        return {
            "subtotal": self.subtotal,
            "discount_amount": self.discount_amount,
            "taxable_amount": self.taxable_amount,
            "tax_amount": self.tax_amount,
            "total": self.total,
        }

    def with_id(self, line_item_id: str) -> "LineItem":
        return self.model_copy(update={"id": line_item_id})

    def to_storage(self) -> dict[str, Any]:
        """Stored fields only, decimals rendered as strings"""
        return self.model_dump(mode="json")
