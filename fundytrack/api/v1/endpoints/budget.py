# fundytrack/api/v1/endpoints/budget.py
import logging
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from datetime import date

from fundytrack import schemas
from fundytrack import crud
from fundytrack.db import models
from fundytrack.api.v1 import deps
from fundytrack.core.config import settings
from fundytrack.core.dates import month_key
from fundytrack.schemas.budget import MONTH_PATTERN
from fundytrack.services.dashboard import build_dashboard

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=schemas.MonthlyBudget)
async def read_monthly_budget(
    *,
    month: Optional[str] = Query(None, pattern=MONTH_PATTERN, description="YYYY-MM, current month by default"),
    db: AsyncSession = Depends(deps.get_async_db),
    current_user: models.User = Depends(deps.get_current_user),
    today: date = Depends(deps.get_today)
):
    """
    Overall budget for a month. amount is null when no budget is set.
    """
    month = month or month_key(today)
    budget = await crud.crud_budget.get_monthly_budget(db=db, user_id=current_user.id, month=month)
    if not budget:
        return schemas.MonthlyBudget(month=month, amount=None)
    return budget


@router.put("/", response_model=schemas.MonthlyBudget)
async def save_monthly_budget(
    *,
    budget_in: schemas.MonthlyBudgetUpdate,
    db: AsyncSession = Depends(deps.get_async_db),
    current_user: models.User = Depends(deps.get_current_user),
    today: date = Depends(deps.get_today)
):
    """
    Create or replace the overall budget for a month.
    """
    month = budget_in.month or month_key(today)
    try:
        return await crud.crud_budget.upsert_monthly_budget(
            db=db, user_id=current_user.id, month=month, amount=budget_in.amount
        )
    except IntegrityError:
        logger.warning("Constraint violation saving budget %s for user %s", month, current_user.id)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Budget violates a data constraint")
    except Exception:
        logger.exception("Error saving budget %s for user %s", month, current_user.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to save budget")


@router.get("/categories", response_model=schemas.CategoryBudgetList)
async def read_category_budgets(
    *,
    month: Optional[str] = Query(None, pattern=MONTH_PATTERN, description="YYYY-MM, current month by default"),
    db: AsyncSession = Depends(deps.get_async_db),
    current_user: models.User = Depends(deps.get_current_user),
    today: date = Depends(deps.get_today)
):
    month = month or month_key(today)
    budgets = await crud.crud_budget.get_category_budgets(db=db, user_id=current_user.id, month=month)
    return schemas.CategoryBudgetList(
        month=month,
        budgets=[schemas.CategoryBudget.model_validate(row) for row in budgets],
    )


@router.put("/categories/{category_id}", response_model=schemas.CategoryBudget)
async def save_category_budget(
    *,
    category_id: int,
    budget_in: schemas.CategoryBudgetUpdate,
    db: AsyncSession = Depends(deps.get_async_db),
    current_user: models.User = Depends(deps.get_current_user),
    today: date = Depends(deps.get_today)
):
    """
    Create or replace the budget of one category for a month.
    """
    category = await crud.crud_category.get_category(db=db, user_id=current_user.id, category_id=category_id)
    if not category:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")

    month = budget_in.month or month_key(today)
    try:
        return await crud.crud_budget.upsert_category_budget(
            db=db,
            user_id=current_user.id,
            category_id=category_id,
            month=month,
            amount=budget_in.amount,
        )
    except IntegrityError:
        logger.warning("Constraint violation saving category budget %s/%s", category_id, month)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Category budget violates a data constraint")
    except Exception:
        logger.exception("Error saving category budget %s/%s", category_id, month)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to save category budget")


@router.get("/evaluation", response_model=schemas.BudgetEvaluation)
async def read_budget_evaluation(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    current_user: models.User = Depends(deps.get_current_user),
    today: date = Depends(deps.get_today)
):
    """
    Utilization of the overall and per-category budgets for the current month.
    """
    try:
        _, evaluation = await build_dashboard(
            db, user_id=current_user.id, today=today, low_spend_threshold=settings.LOW_SPEND_THRESHOLD
        )
    except Exception:
        logger.exception("Error evaluating budgets for user %s", current_user.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not evaluate budgets")
    return schemas.BudgetEvaluation.model_validate(evaluation)
