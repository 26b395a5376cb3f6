# fundytrack/services/dashboard.py
"""
Loads a user's snapshot through the gateway and runs the pure
aggregation and budget evaluation over it.
"""
import logging
from datetime import date
from typing import Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from fundytrack import crud
from fundytrack.core.dates import month_key
from fundytrack.services.aggregation import MonthlySummary, build_monthly_summary, LOW_SPEND_THRESHOLD
from fundytrack.services.budget_evaluation import BudgetEvaluation, evaluate_budget

logger = logging.getLogger(__name__)


async def build_dashboard(
    db: AsyncSession,
    *,
    user_id: int,
    today: date,
    low_spend_threshold=LOW_SPEND_THRESHOLD,
) -> Tuple[MonthlySummary, BudgetEvaluation]:
    month = month_key(today)

    transactions, _ = await crud.crud_transaction.get_transactions(db=db, user_id=user_id)
    categories = await crud.crud_category.get_categories(db=db, user_id=user_id)
    monthly_budget = await crud.crud_budget.get_monthly_budget(db=db, user_id=user_id, month=month)
    category_budgets = await crud.crud_budget.get_category_budget_map(db=db, user_id=user_id, month=month)

    summary = build_monthly_summary(transactions, categories, today, low_spend_threshold=low_spend_threshold)
    evaluation = evaluate_budget(
        summary,
        global_budget=monthly_budget.amount if monthly_budget else None,
        category_budgets=category_budgets,
        categories=categories,
    )
    logger.debug(
        "Dashboard for user %s, %s: %d transactions, expense=%s, over_budget=%s",
        user_id, month, len(transactions), summary.total_expense, evaluation.over_budget,
    )
    return summary, evaluation
