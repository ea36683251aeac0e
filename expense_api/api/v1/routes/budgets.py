# expense_api/api/v1/routes/budgets.py
import math
import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from expense_api.api.deps import get_current_user
from expense_api.core.auth import User
from expense_api.core.database import get_async_session
from expense_api.core.exceptions import AppError, InvalidInput, NotFound
from expense_api.crud.budget import delete_budget, get_budgets_for_user, upsert_budget
from expense_api.crud.category import get_category_by_id
from expense_api.schemas.budget import BudgetAmount, BudgetRead, BudgetUpsert

router = APIRouter(prefix="/budgets", tags=["budgets"])


async def _set_budget(category_id: uuid.UUID, amount: float, user: User, db: AsyncSession) -> dict:
    if not math.isfinite(amount) or amount < 0:
        raise AppError("invalid_amount", 400)
    if await get_category_by_id(category_id, user.id, db) is None:
        raise NotFound()
    await upsert_budget(user.id, category_id, amount, db)
    return {"ok": True}


@router.get("", response_model=List[BudgetRead])
async def read_budgets(
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """Every category with its monthly budget (null when none is set)."""
    return await get_budgets_for_user(user.id, db)


@router.put("/{category_id}")
async def put_budget(
    category_id: uuid.UUID,
    budget_in: BudgetAmount,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await _set_budget(category_id, budget_in.amount, user, db)


@router.post("")
async def post_budget(
    budget_in: BudgetUpsert,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    if budget_in.category_id is None:
        raise InvalidInput.for_field("category_id", "Category is required")
    return await _set_budget(budget_in.category_id, budget_in.amount, user, db)


@router.delete("/{category_id}")
async def remove_budget(
    category_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    # Idempotent: clearing a budget that is not set still succeeds
    deleted = await delete_budget(user.id, category_id, db)
    return {"ok": True, "deleted": deleted}
