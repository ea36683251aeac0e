# expense_api/api/v1/routes/dashboard.py
from datetime import date, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from expense_api.api.deps import get_current_user
from expense_api.core.auth import User
from expense_api.core.database import get_async_session
from expense_api.core.exceptions import InvalidInput
from expense_api.crud.budget import get_budgets_for_user
from expense_api.crud.expense import get_expenses_in_range
from expense_api.crud.goal import get_goals_for_user
from expense_api.schemas.dashboard import DashboardSummary
from expense_api.utils.budgeting import (
    budget_health,
    goal_status,
    spend_by_category,
    usage_percentage,
    usage_status,
)

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

DEFAULT_WINDOW_DAYS = 30


@router.get("/summary", response_model=DashboardSummary)
async def get_dashboard_summary(
    start: Optional[date] = Query(None, alias="from"),
    end: Optional[date] = Query(None, alias="to"),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """
    Income usage, spend by category, budget health and goal status for a
    date range (inclusive). Defaults to the 30 days ending today.
    """
    today = date.today()
    end = end or today
    start = start or end - timedelta(days=DEFAULT_WINDOW_DAYS - 1)
    if start > end:
        raise InvalidInput.for_field("from", "Start date must not be after end date")

    income = float(user.monthly_income) if user.monthly_income else 0.0
    expenses = await get_expenses_in_range(user.id, start, end, db)
    spent = round(sum(ex.amount for ex in expenses), 2)
    usage = usage_percentage(spent, income)

    by_category = spend_by_category(expenses)
    budgets = budget_health(await get_budgets_for_user(user.id, db), by_category)
    goals = [goal_status(g, income, spent, today) for g in await get_goals_for_user(user.id, db)]

    return {
        "period_start": start,
        "period_end": end,
        "currency": user.currency,
        "income": income,
        "spent": spent,
        "leftover": round(income - spent, 2),
        "usage_percentage": round(usage, 2),
        "usage_status": usage_status(usage),
        "by_category": by_category,
        "budgets": budgets,
        "goals": goals,
    }
