# expense_api/api/v1/routes/expenses.py
import uuid
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from expense_api.api.deps import get_current_user
from expense_api.core.auth import User
from expense_api.core.database import get_async_session
from expense_api.core.exceptions import InvalidInput, NotFound
from expense_api.crud.category import get_category_by_id
from expense_api.crud.expense import (
    create_expense_for_user,
    delete_expense,
    get_expense_by_id,
    get_expenses_in_range,
    update_expense,
)
from expense_api.models.expense import Expense
from expense_api.schemas.expense import ExpenseCreate, ExpenseCreated, ExpenseRead, ExpenseUpdate

router = APIRouter(prefix="/expenses", tags=["expenses"])


def expense_to_read(expense: Expense) -> ExpenseRead:
    category = expense.category
    return ExpenseRead(
        id=expense.id,
        amount=expense.amount,
        incurred_on=expense.incurred_on,
        note=expense.note,
        category_id=expense.category_id,
        category_name=category.name if category else None,
        category_color=category.color if category else None,
        created_at=expense.created_at,
    )


async def _ensure_owned_category(category_id: Optional[uuid.UUID], user: User, db: AsyncSession) -> None:
    if category_id is not None and await get_category_by_id(category_id, user.id, db) is None:
        raise InvalidInput.for_field("category_id", "Unknown category")


@router.get("", response_model=List[ExpenseRead])
async def read_expenses(
    start: date = Query(..., alias="from", description="First day, YYYY-MM-DD"),
    end: date = Query(..., alias="to", description="Last day (inclusive), YYYY-MM-DD"),
    limit: int = Query(100, ge=1, le=1000),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    expenses = await get_expenses_in_range(user.id, start, end, db, limit=limit)
    return [expense_to_read(e) for e in expenses]


@router.post("", response_model=ExpenseCreated, status_code=status.HTTP_201_CREATED)
async def create_expense(
    ex_in: ExpenseCreate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    await _ensure_owned_category(ex_in.category_id, user, db)
    expense = await create_expense_for_user(user.id, ex_in, db)
    return {"id": expense.id, "ok": True}


@router.put("/{expense_id}")
async def update_expense_endpoint(
    expense_id: uuid.UUID,
    ex_in: ExpenseUpdate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    expense = await get_expense_by_id(expense_id, user.id, db)
    if not expense:
        raise NotFound()
    updates = ex_in.model_dump(exclude_unset=True)
    if not updates:
        return {"ok": True}
    if "amount" in updates and updates["amount"] is None:
        raise InvalidInput.for_field("amount", "Amount must be greater than 0")
    if "incurred_on" in updates and updates["incurred_on"] is None:
        raise InvalidInput.for_field("incurred_on", "Date must be YYYY-MM-DD")
    await _ensure_owned_category(updates.get("category_id"), user, db)
    await update_expense(expense, ex_in, db)
    return {"ok": True}


@router.delete("/{expense_id}")
async def delete_expense_endpoint(
    expense_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    expense = await get_expense_by_id(expense_id, user.id, db)
    if not expense:
        raise NotFound()
    await delete_expense(expense, db)
    return {"ok": True}
