# expense_api/schemas/expense.py
from typing import Optional
from pydantic import BaseModel, Field
from datetime import date, datetime
import uuid


class ExpenseCreate(BaseModel):
    amount: float = Field(..., gt=0, description="Amount must be greater than 0")
    incurred_on: date = Field(..., description="Date the money was spent, YYYY-MM-DD")
    category_id: Optional[uuid.UUID] = None
    note: Optional[str] = Field(None, max_length=280)


class ExpenseUpdate(BaseModel):
    amount: Optional[float] = Field(None, gt=0)
    incurred_on: Optional[date] = None
    category_id: Optional[uuid.UUID] = None
    note: Optional[str] = Field(None, max_length=280)


class ExpenseRead(BaseModel):
    id: uuid.UUID
    amount: float
    incurred_on: date
    note: Optional[str] = None
    category_id: Optional[uuid.UUID] = None
    category_name: Optional[str] = None
    category_color: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class ExpenseCreated(BaseModel):
    id: uuid.UUID
    ok: bool = True
