from pydantic import BaseModel, Field, field_validator
from uuid import UUID


# ===== TAG PYDANTIC MODELS =====

class TagCreate(BaseModel):
    name: str = Field(..., max_length=255, description="Tag name")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        return v.strip()


class TagUpdate(TagCreate):
    pass


class TagResponse(BaseModel):
    """Tag data returned to client"""
    id: UUID
    name: str

    class Config:
        from_attributes = True
