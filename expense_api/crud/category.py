# expense_api/crud/category.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import delete, func, select, update
from expense_api.models.budget import Budget
from expense_api.models.category import Category
from expense_api.models.expense import Expense
from typing import List, Optional
import uuid

async def get_categories_for_user(user_id: uuid.UUID, db: AsyncSession) -> List[Category]:
    result = await db.execute(
        select(Category).where(Category.user_id == user_id).order_by(func.lower(Category.name))
    )
    return list(result.scalars().all())

async def get_category_by_id(category_id: uuid.UUID, user_id: uuid.UUID, db: AsyncSession) -> Optional[Category]:
    result = await db.execute(
        select(Category).where(Category.id == category_id, Category.user_id == user_id)
    )
    return result.scalar_one_or_none()

async def get_category_by_name_for_user(name: str, user_id: uuid.UUID, db: AsyncSession) -> Optional[Category]:
    """Case-insensitive lookup of a category by name for a given user."""
    result = await db.execute(
        select(Category).where(
            Category.user_id == user_id,
            func.lower(Category.name) == func.lower(name),
        )
    )
    return result.scalars().first()

async def create_category_for_user(user_id: uuid.UUID, name: str, color: Optional[str], db: AsyncSession) -> Category:
    new_cat = Category(user_id=user_id, name=name, color=color)
    db.add(new_cat)
    await db.commit()
    await db.refresh(new_cat)
    return new_cat

async def rename_category(category: Category, name: str, db: AsyncSession) -> Category:
    category.name = name
    db.add(category)
    await db.commit()
    await db.refresh(category)
    return category

async def delete_category(category: Category, db: AsyncSession) -> None:
    # Expenses keep their history, only the link is dropped
    await db.execute(
        update(Expense)
        .where(Expense.user_id == category.user_id, Expense.category_id == category.id)
        .values(category_id=None)
    )
    await db.execute(
        delete(Budget).where(Budget.user_id == category.user_id, Budget.category_id == category.id)
    )
    await db.delete(category)
    await db.commit()


# Default categories to be created for every new user
DEFAULT_CATEGORIES: List[dict] = [
    {"name": "Food & Dining", "color": "#EF4444"},
    {"name": "Transport", "color": "#3B82F6"},
    {"name": "Shopping", "color": "#F59E0B"},
    {"name": "Bills", "color": "#10B981"},
]

async def seed_default_categories_for_user(user_id: uuid.UUID, db: AsyncSession) -> List[Category]:
    """Ensure the user has the default categories; create missing ones.

    Returns the list of categories that were created (empty if none were needed).
    """
    # Fetch existing category names for the user (case-insensitive set)
    result = await db.execute(select(Category.name).where(Category.user_id == user_id))
    existing_names_lower = {row[0].lower() for row in result.all()}

    categories_to_create: List[Category] = [
        Category(user_id=user_id, name=cat["name"], color=cat["color"])
        for cat in DEFAULT_CATEGORIES
        if cat["name"].lower() not in existing_names_lower
    ]

    if categories_to_create:
        db.add_all(categories_to_create)
        await db.commit()
        for c in categories_to_create:
            await db.refresh(c)

    return categories_to_create
