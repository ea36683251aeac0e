# expense_api/api/v1/routes/categories.py
import logging
import uuid
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from expense_api.api.deps import get_current_user
from expense_api.core.auth import User
from expense_api.core.database import get_async_session
from expense_api.core.exceptions import Conflict, NotFound
from expense_api.crud.category import (
    create_category_for_user,
    delete_category,
    get_categories_for_user,
    get_category_by_id,
    get_category_by_name_for_user,
    rename_category,
)
from expense_api.schemas.category import CategoryCreate, CategoryRead, CategoryRename

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=List[CategoryRead])
async def read_categories(
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await get_categories_for_user(user.id, db)


@router.post("", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
async def create_category(
    cat_in: CategoryCreate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    if await get_category_by_name_for_user(cat_in.name, user.id, db):
        raise Conflict("category_exists")
    try:
        return await create_category_for_user(user.id, cat_in.name, cat_in.color or None, db)
    except IntegrityError:
        await db.rollback()
        raise Conflict("category_exists")


@router.put("/{category_id}")
async def rename_category_endpoint(
    category_id: uuid.UUID,
    cat_in: CategoryRename,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    category = await get_category_by_id(category_id, user.id, db)
    if not category:
        raise NotFound()
    existing = await get_category_by_name_for_user(cat_in.name, user.id, db)
    if existing is not None and existing.id != category.id:
        raise Conflict("category_exists")
    try:
        await rename_category(category, cat_in.name, db)
    except IntegrityError:
        await db.rollback()
        raise Conflict("category_exists")
    return {"ok": True}


@router.delete("/{category_id}")
async def delete_category_endpoint(
    category_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """Delete a category; its expenses stay, uncategorized, and its budget goes."""
    category = await get_category_by_id(category_id, user.id, db)
    if not category:
        raise NotFound()
    await delete_category(category, db)
    logger.info(f"User {user.id} deleted category {category_id}")
    return {"ok": True}
