# expense_api/crud/budget.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import and_, delete, func, select
from expense_api.models.budget import Budget
from expense_api.models.category import Category
from typing import List, Optional
import uuid

async def get_budgets_for_user(user_id: uuid.UUID, db: AsyncSession) -> List[dict]:
    """Every category of the user with its budget amount (None when no budget is set)."""
    result = await db.execute(
        select(Category.id, Category.name, Budget.amount)
        .outerjoin(
            Budget,
            and_(Budget.user_id == Category.user_id, Budget.category_id == Category.id),
        )
        .where(Category.user_id == user_id)
        .order_by(func.lower(Category.name))
    )
    return [
        {"category_id": row.id, "category_name": row.name, "amount": row.amount}
        for row in result.all()
    ]

async def get_budget(user_id: uuid.UUID, category_id: uuid.UUID, db: AsyncSession) -> Optional[Budget]:
    return await db.get(Budget, (user_id, category_id))

async def upsert_budget(user_id: uuid.UUID, category_id: uuid.UUID, amount: float, db: AsyncSession) -> Budget:
    budget = await get_budget(user_id, category_id, db)
    if budget is None:
        budget = Budget(user_id=user_id, category_id=category_id, amount=amount)
    else:
        budget.amount = amount
    db.add(budget)
    await db.commit()
    await db.refresh(budget)
    return budget

async def delete_budget(user_id: uuid.UUID, category_id: uuid.UUID, db: AsyncSession) -> bool:
    result = await db.execute(
        delete(Budget).where(Budget.user_id == user_id, Budget.category_id == category_id)
    )
    await db.commit()
    return result.rowcount > 0
