# expense_api/schemas/goal.py
from typing import Optional
from pydantic import BaseModel, Field, field_validator
from datetime import date


class GoalWrite(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    target_amount: float = Field(..., gt=0)
    target_date: Optional[date] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value


class GoalRead(BaseModel):
    id: int
    name: str
    target_amount: float
    target_date: Optional[date] = None

    class Config:
        from_attributes = True


class GoalCreated(BaseModel):
    id: int
