from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from expense_analyzer.models.money import to_money
from expense_analyzer.models.timestamps import to_utc_naive


# ===== TRANSFER PYDANTIC MODELS =====

class TransferCreate(BaseModel):
    outgoing_account_id: Optional[UUID] = Field(None, description="Account the money leaves")
    incoming_account_id: Optional[UUID] = Field(None, description="Account the money arrives in")
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


class TransferUpdate(TransferCreate):
    pass


class TransferResponse(BaseModel):
    id: UUID
    outgoing_account_id: UUID
    incoming_account_id: UUID
    amount: Decimal
    timestamp: datetime
    comment: Optional[str]

    class Config:
        from_attributes = True


class TransferTotalsResponse(BaseModel):
    """Money moved out of and into one account by transfers"""
    account_id: UUID
    outgoing: Decimal
    incoming: Decimal
