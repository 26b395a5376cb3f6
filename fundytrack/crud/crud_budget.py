# fundytrack/crud/crud_budget.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy import func
from typing import Optional, List, Dict
from decimal import Decimal

from fundytrack.db.models.budget import MonthlyBudget as MonthlyBudgetModel, CategoryBudget as CategoryBudgetModel

# --- Overall monthly budget ---

async def get_monthly_budget(db: AsyncSession, *, user_id: int, month: str) -> Optional[MonthlyBudgetModel]:
    """
    The user's overall budget for 'YYYY-MM', or None when none is set.
    """
    result = await db.execute(
        select(MonthlyBudgetModel).filter(
            MonthlyBudgetModel.user_id == user_id,
            MonthlyBudgetModel.month == month,
        )
    )
    return result.scalar_one_or_none()

async def upsert_monthly_budget(db: AsyncSession, *, user_id: int, month: str, amount: Decimal) -> MonthlyBudgetModel:
    """
    INSERT ... ON CONFLICT (user_id, month) DO UPDATE.
    Concurrent writers on the same key never produce two rows; the last one wins.
    """
    stmt = (
        pg_insert(MonthlyBudgetModel)
        .values(user_id=user_id, month=month, amount=amount)
        .on_conflict_do_update(
            constraint="uq_budget_user_month",
            set_={"amount": amount, "updated_at": func.now()},
        )
        .returning(MonthlyBudgetModel)
    )
    # populate_existing: an instance already in the identity map gets the new amount
    result = await db.execute(stmt, execution_options={"populate_existing": True})
    return result.scalar_one()

# --- Per-category monthly budgets ---

async def get_category_budgets(db: AsyncSession, *, user_id: int, month: str) -> List[CategoryBudgetModel]:
    result = await db.execute(
        select(CategoryBudgetModel)
        .filter(
            CategoryBudgetModel.user_id == user_id,
            CategoryBudgetModel.month == month,
        )
        .order_by(CategoryBudgetModel.category_id)
    )
    return list(result.scalars().all())

async def get_category_budget_map(db: AsyncSession, *, user_id: int, month: str) -> Dict[int, Decimal]:
    """category_id -> amount for the month, the shape budget evaluation takes."""
    return {row.category_id: row.amount for row in await get_category_budgets(db, user_id=user_id, month=month)}

async def upsert_category_budget(
    db: AsyncSession,
    *,
    user_id: int,
    category_id: int,
    month: str,
    amount: Decimal
) -> CategoryBudgetModel:
    """
    INSERT ... ON CONFLICT (user_id, category_id, month) DO UPDATE.
    The caller checks that the category belongs to the user.
    """
    stmt = (
        pg_insert(CategoryBudgetModel)
        .values(user_id=user_id, category_id=category_id, month=month, amount=amount)
        .on_conflict_do_update(
            constraint="uq_category_budget_user_category_month",
            set_={"amount": amount, "updated_at": func.now()},
        )
        .returning(CategoryBudgetModel)
    )
    result = await db.execute(stmt, execution_options={"populate_existing": True})
    return result.scalar_one()
