from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union
from uuid import UUID

from pydantic import BaseModel

CENTS = Decimal("0.01")


def to_money(value: Optional[Union[Decimal, float, int, str]]) -> Decimal:
    """Quantize a monetary value to 2 places with half-up rounding; None counts as zero."""
    if value is None:
        return Decimal("0.00")
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


class TotalResponse(BaseModel):
    """Sum of amounts for one account or category"""
    id: UUID
    total: Decimal
