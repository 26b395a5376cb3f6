# fundytrack/api/v1/endpoints/dashboard.py
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import date

from fundytrack import schemas
from fundytrack.db import models
from fundytrack.api.v1 import deps
from fundytrack.core.config import settings
from fundytrack.services.dashboard import build_dashboard

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=schemas.DashboardResponse)
async def read_dashboard(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    current_user: models.User = Depends(deps.get_current_user),
    today: date = Depends(deps.get_today)
):
    """
    This month's overview: totals, category breakdown, daily spending,
    no-spend challenges, recent transactions and budget utilization.
    Recomputed from the stored ledger on every call.
    """
    try:
        summary, evaluation = await build_dashboard(
            db, user_id=current_user.id, today=today, low_spend_threshold=settings.LOW_SPEND_THRESHOLD
        )
    except Exception:
        logger.exception("Dashboard load error for user %s", current_user.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to load dashboard data")

    return schemas.DashboardResponse(
        summary=schemas.MonthlySummary.model_validate(summary),
        budget=schemas.BudgetEvaluation.model_validate(evaluation),
    )
