from pydantic import BaseModel, Field, field_validator
from uuid import UUID


# ===== ACCOUNT PYDANTIC MODELS =====

class AccountCreate(BaseModel):
    name: str = Field(..., max_length=255, description="Unique account name")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        return v.strip()


class AccountUpdate(AccountCreate):
    """Full replace of the account's mutable fields"""
    pass


class AccountResponse(BaseModel):
    id: UUID
    name: str

    class Config:
        from_attributes = True
