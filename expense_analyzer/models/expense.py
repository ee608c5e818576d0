from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from expense_analyzer.models.money import to_money
from expense_analyzer.models.timestamps import to_utc_naive


# ===== EXPENSE PYDANTIC MODELS =====

class ExpenseCreate(BaseModel):
    category_id: Optional[UUID] = Field(None, description="Category of the expense")
    account_id: Optional[UUID] = Field(None, description="Account the expense was paid from")
    amount: Decimal = Field(..., description="Amount, rounded to 2 decimal places")
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    comment: Optional[str] = Field(None, max_length=1000)
    tag_ids: List[UUID] = Field(default_factory=list, description="Tags applied to the expense")

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v: Decimal) -> Decimal:
        return to_money(v)

    @field_validator('timestamp')
    @classmethod
    def validate_timestamp(cls, v: datetime) -> datetime:
        return to_utc_naive(v)


class ExpenseUpdate(ExpenseCreate):
    """Full replace, including the tag set"""
    pass


class ExpenseResponse(BaseModel):
    id: UUID
    category_id: UUID
    account_id: UUID
    amount: Decimal
    timestamp: datetime
    comment: Optional[str]
    tag_ids: List[UUID] = []

    class Config:
        from_attributes = True
