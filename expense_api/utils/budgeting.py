# expense_api/utils/budgeting.py
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional

from expense_api.models.expense import Expense
from expense_api.models.goal import Goal

UNCATEGORIZED = "Uncategorized"


# ────────────────────────────────────────────────────────────────────────────────
# INCOME USAGE
# ────────────────────────────────────────────────────────────────────────────────
def usage_percentage(spent: float, income: float) -> float:
    """Share of income already spent, clamped to 0..100 (0 when no income is set)."""
    if income <= 0:
        return 0.0
    return min(100.0, max(0.0, spent / income * 100))


def usage_status(percentage: float) -> str:
    if percentage < 60:
        return "safe"
    if percentage < 90:
        return "watch"
    return "high"


# ────────────────────────────────────────────────────────────────────────────────
# CATEGORIES AND BUDGETS
# ────────────────────────────────────────────────────────────────────────────────
def spend_by_category(expenses: Iterable[Expense]) -> List[Dict]:
    """Total spent per category, largest first; expenses without a category are grouped."""
    totals: Dict = defaultdict(float)
    names: Dict = {}
    for ex in expenses:
        totals[ex.category_id] += ex.amount
        if ex.category_id is not None and ex.category is not None:
            names[ex.category_id] = ex.category.name
    rows = [
        {
            "category_id": category_id,
            "name": names.get(category_id, UNCATEGORIZED),
            "total": round(total, 2),
        }
        for category_id, total in totals.items()
    ]
    rows.sort(key=lambda r: r["total"], reverse=True)
    return rows


def budget_health(budgets: Iterable[Dict], by_category: Iterable[Dict]) -> List[Dict]:
    spent_for = {row["category_id"]: row["total"] for row in by_category}
    health = []
    for budget in budgets:
        limit = budget["amount"]
        if limit is None:
            continue
        spent = spent_for.get(budget["category_id"], 0.0)
        health.append({
            "category_id": budget["category_id"],
            "category_name": budget["category_name"],
            "limit": limit,
            "spent": round(spent, 2),
            "remaining": round(limit - spent, 2),
            "percentage": round(spent / limit * 100, 2) if limit > 0 else (100.0 if spent > 0 else 0.0),
            "over": spent > limit,
        })
    return health


# ────────────────────────────────────────────────────────────────────────────────
# GOALS
# ────────────────────────────────────────────────────────────────────────────────
def days_until(target: Optional[date], today: date) -> Optional[int]:
    if target is None:
        return None
    return (target - today).days


def goal_status(goal: Goal, income: float, spent: float, today: date) -> Dict:
    """
    Compare what is left of the income with a goal's target.

    Order matters: spending the whole income is reported before anything
    else, then a covered goal, then a passed target date.
    """
    income = max(0.0, income)
    spent = max(0.0, spent)
    remaining = max(0.0, income - spent)
    target = goal.target_amount
    days = days_until(goal.target_date, today)

    if usage_percentage(spent, income) >= 100 and income > 0:
        status = "over_budget"
    elif remaining >= target:
        status = "on_track"
    elif days is not None and days < 0:
        status = "missed"
    else:
        status = "spending_high"

    return {
        "id": goal.id,
        "name": goal.name,
        "target_amount": target,
        "target_date": goal.target_date,
        "days_until": days,
        "percentage_of_income": round(min(100.0, target / income * 100), 2) if income > 0 else 0.0,
        "amount_to_goal": round(max(0.0, target - remaining), 2),
        "cushion": round(max(0.0, remaining - target), 2),
        "status": status,
    }
