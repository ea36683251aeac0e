# expense_api/schemas/dashboard.py
from typing import List, Optional, Literal
from pydantic import BaseModel
from datetime import date
import uuid


class CategorySpend(BaseModel):
    category_id: Optional[uuid.UUID] = None
    name: str
    total: float


class BudgetHealth(BaseModel):
    category_id: uuid.UUID
    category_name: str
    limit: float
    spent: float
    remaining: float
    percentage: float
    over: bool


class GoalStatus(BaseModel):
    id: int
    name: str
    target_amount: float
    target_date: Optional[date] = None
    days_until: Optional[int] = None
    percentage_of_income: float
    amount_to_goal: float
    cushion: float
    status: Literal["over_budget", "on_track", "missed", "spending_high"]


class DashboardSummary(BaseModel):
    period_start: date
    period_end: date
    currency: str
    income: float
    spent: float
    leftover: float
    usage_percentage: float
    usage_status: Literal["safe", "watch", "high"]
    by_category: List[CategorySpend]
    budgets: List[BudgetHealth]
    goals: List[GoalStatus]
