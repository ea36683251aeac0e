# expense_api/api/v1/routes/goals.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from expense_api.api.deps import get_current_user
from expense_api.core.auth import User
from expense_api.core.database import get_async_session
from expense_api.core.exceptions import NotFound
from expense_api.crud.goal import (
    create_goal_for_user,
    delete_goal,
    get_goal_by_id,
    get_goals_for_user,
    update_goal,
)
from expense_api.schemas.goal import GoalCreated, GoalRead, GoalWrite

router = APIRouter(prefix="/goals", tags=["goals"])


@router.get("", response_model=List[GoalRead])
async def read_goals(
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """Savings goals, dated ones first by target date."""
    return await get_goals_for_user(user.id, db)


@router.post("", response_model=GoalCreated, status_code=status.HTTP_201_CREATED)
async def create_goal(
    goal_in: GoalWrite,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    goal = await create_goal_for_user(user.id, goal_in, db)
    return {"id": goal.id}


@router.put("/{goal_id}")
async def update_goal_endpoint(
    goal_id: int,
    goal_in: GoalWrite,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    goal = await get_goal_by_id(goal_id, user.id, db)
    if not goal:
        raise NotFound()
    await update_goal(goal, goal_in, db)
    return {"ok": True}


@router.delete("/{goal_id}")
async def delete_goal_endpoint(
    goal_id: int,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    goal = await get_goal_by_id(goal_id, user.id, db)
    if not goal:
        raise NotFound()
    await delete_goal(goal, db)
    return {"ok": True}
