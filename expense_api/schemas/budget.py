# expense_api/schemas/budget.py
from typing import Optional
from pydantic import BaseModel
import uuid


class BudgetAmount(BaseModel):
    amount: float = 0.0


class BudgetUpsert(BudgetAmount):
    category_id: Optional[uuid.UUID] = None


class BudgetRead(BaseModel):
    category_id: uuid.UUID
    category_name: str
    amount: Optional[float] = None
