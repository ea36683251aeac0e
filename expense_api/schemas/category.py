# expense_api/schemas/category.py
from typing import Optional
from pydantic import BaseModel, Field, field_validator
import uuid


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=60)
    color: Optional[str] = Field(None, max_length=16)

    @field_validator("name", "color", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value


class CategoryRename(BaseModel):
    name: str = Field(..., min_length=1, max_length=60)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value


class CategoryRead(BaseModel):
    id: uuid.UUID
    name: str
    color: Optional[str] = None

    class Config:
        from_attributes = True
