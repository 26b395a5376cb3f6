# fundytrack/schemas/dashboard.py
from pydantic import BaseModel
from typing import Optional, List
from datetime import date as date_type
from fundytrack.db.models.transaction import TransactionType

class _FromAttributes(BaseModel):
    class Config:
        from_attributes = True

class CategoryExpense(_FromAttributes):
    category_id: Optional[int] = None
    name: str
    total: float

class DailySpending(_FromAttributes):
    day: int
    date: date_type
    label: str
    total: float

class StreakStats(_FromAttributes):
    no_spend_days: int
    best_no_spend_streak: int
    current_no_spend_streak: int
    low_spend_days_count: int

class RecentTransaction(_FromAttributes):
    id: int
    date: Optional[date_type] = None
    description: Optional[str] = None
    amount: float
    type: Optional[TransactionType] = None
    category_id: Optional[int] = None

class MonthlySummary(_FromAttributes):
    month: str
    total_expense: float
    total_income: float
    net: float
    category_breakdown: List[CategoryExpense]
    daily_series: List[DailySpending]
    streaks: StreakStats
    recent_five: List[RecentTransaction]

class CategoryBudgetStatus(_FromAttributes):
    category_id: Optional[int] = None
    name: str
    spent: float
    budget: Optional[float] = None # None means "no budget", not 0%
    has_budget: bool
    utilization_percent: Optional[float] = None
    over_budget: bool

class BudgetEvaluation(_FromAttributes):
    month: str
    total_expense: float
    global_budget: Optional[float] = None
    utilization_percent: float
    over_budget: bool
    remaining: Optional[float] = None
    categories: List[CategoryBudgetStatus]

class DashboardResponse(BaseModel):
    summary: MonthlySummary
    budget: BudgetEvaluation
