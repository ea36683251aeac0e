# expense_api/crud/expense.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from expense_api.models.expense import Expense
from typing import List, Optional
from datetime import date
import uuid
from expense_api.schemas.expense import ExpenseCreate, ExpenseUpdate

async def get_expenses_in_range(
    user_id: uuid.UUID,
    start: date,
    end: date,
    db: AsyncSession,
    limit: Optional[int] = None,
) -> List[Expense]:
    """Expenses with incurred_on between start and end (inclusive), newest first."""
    query = (
        select(Expense)
        .where(
            Expense.user_id == user_id,
            Expense.incurred_on >= start,
            Expense.incurred_on <= end,
        )
        .order_by(Expense.incurred_on.desc(), Expense.created_at.desc())
    )
    if limit is not None:
        query = query.limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())

async def get_expense_by_id(expense_id: uuid.UUID, user_id: uuid.UUID, db: AsyncSession) -> Optional[Expense]:
    result = await db.execute(
        select(Expense).where(Expense.id == expense_id, Expense.user_id == user_id)
    )
    return result.scalar_one_or_none()

async def create_expense_for_user(user_id: uuid.UUID, ex_in: ExpenseCreate, db: AsyncSession) -> Expense:
    new_ex = Expense(**ex_in.model_dump(), user_id=user_id)
    db.add(new_ex)
    await db.commit()
    await db.refresh(new_ex)
    return new_ex

async def update_expense(expense: Expense, ex_in: ExpenseUpdate, db: AsyncSession) -> Expense:
    for field, value in ex_in.model_dump(exclude_unset=True).items():
        setattr(expense, field, value)
    db.add(expense)
    await db.commit()
    await db.refresh(expense)
    return expense

async def delete_expense(expense: Expense, db: AsyncSession) -> None:
    await db.delete(expense)
    await db.commit()
