# fundytrack/schemas/budget.py
from pydantic import BaseModel, Field
from typing import Optional, List
from decimal import Decimal

from fundytrack.schemas.transaction import AMOUNT_CONSTRAINTS

MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$" # "YYYY-MM"

class MonthlyBudgetUpdate(BaseModel):
    month: Optional[str] = Field(None, pattern=MONTH_PATTERN) # Current month when omitted
    amount: Decimal = Field(..., **AMOUNT_CONSTRAINTS)

class MonthlyBudget(BaseModel):
    month: str
    amount: Optional[float] = None # None when no budget is set for the month

    class Config:
        from_attributes = True

class CategoryBudgetUpdate(BaseModel):
    month: Optional[str] = Field(None, pattern=MONTH_PATTERN)
    amount: Decimal = Field(..., **AMOUNT_CONSTRAINTS)

class CategoryBudget(BaseModel):
    category_id: int
    month: str
    amount: float

    class Config:
        from_attributes = True

class CategoryBudgetList(BaseModel):
    month: str
    budgets: List[CategoryBudget]
