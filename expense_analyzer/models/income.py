from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from expense_analyzer.models.money import to_money
from expense_analyzer.models.timestamps import to_utc_naive


# ===== INCOME PYDANTIC MODELS =====

class IncomeCreate(BaseModel):
    # Optional here so a missing id is reported as a 400 by the endpoint, not a 422
    category_id: Optional[UUID] = Field(None, description="Category of the income")
    account_id: Optional[UUID] = Field(None, description="Account receiving the income")
    amount: Decimal = Field(..., description="Amount, rounded to 2 decimal places")
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    comment: Optional[str] = Field(None, max_length=1000)

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v: Decimal) -> Decimal:
        return to_money(v)

    @field_validator('timestamp')
    @classmethod
    def validate_timestamp(cls, v: datetime) -> datetime:
        return to_utc_naive(v)


class IncomeUpdate(IncomeCreate):
    """Full replace of the income's mutable fields"""
    pass


class IncomeResponse(BaseModel):
    id: UUID
    category_id: UUID
    account_id: UUID
    amount: Decimal
    timestamp: datetime
    comment: Optional[str]

    class Config:
        from_attributes = True
