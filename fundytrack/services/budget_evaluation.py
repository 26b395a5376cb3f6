# fundytrack/services/budget_evaluation.py
"""
Budget evaluation on top of a MonthlySummary.

A budget of 0 (or no stored budget) means "no budget set": utilization is
reported as 0 globally and as None per category, and nothing is ever over
budget.
"""
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Mapping, Optional

from fundytrack.services.aggregation import MonthlySummary, UNCATEGORIZED_NAME

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


@dataclass(frozen=True)
class CategoryBudgetStatus:
    category_id: Optional[int]
    name: str
    spent: Decimal
    budget: Optional[Decimal]
    has_budget: bool
    utilization_percent: Optional[Decimal]
    over_budget: bool


@dataclass(frozen=True)
class BudgetEvaluation:
    month: str
    total_expense: Decimal
    global_budget: Optional[Decimal]
    utilization_percent: Decimal
    over_budget: bool
    remaining: Optional[Decimal] = None
    categories: List[CategoryBudgetStatus] = field(default_factory=list)


def _as_budget(value: Any) -> Decimal:
    """Stored budget amount; absent or unreadable counts as 0."""
    if value is None:
        return _ZERO
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return _ZERO


def utilization(spent: Decimal, budget: Decimal) -> Decimal:
    """spent / budget * 100, defined as 0 when budget is 0."""
    if budget <= _ZERO:
        return _ZERO
    return spent / budget * _HUNDRED


def is_over_budget(spent: Decimal, budget: Decimal) -> bool:
    return budget > _ZERO and spent > budget


def _category_status(category_id: Optional[int], name: str, spent: Decimal, raw_budget: Any) -> CategoryBudgetStatus:
    budget = _as_budget(raw_budget)
    has_budget = budget > _ZERO
    return CategoryBudgetStatus(
        category_id=category_id,
        name=name,
        spent=spent,
        budget=budget if has_budget else None,
        has_budget=has_budget,
        utilization_percent=utilization(spent, budget) if has_budget else None,
        over_budget=is_over_budget(spent, budget),
    )


def evaluate_budget(
    summary: MonthlySummary,
    global_budget: Any = None,
    category_budgets: Optional[Mapping[int, Any]] = None,
    categories: Optional[Iterable[Any]] = None,
) -> BudgetEvaluation:
    """
    Args:
        summary: output of build_monthly_summary for the month being evaluated.
        global_budget: overall budget amount for the month, None if not set.
        category_budgets: category id -> budget amount for the month.
        categories: optional list of the user's categories; when given, every
            category gets a row even without spending this month.
    """
    if summary is None:
        raise ValueError("A monthly summary is required to evaluate budgets")

    category_budgets = category_budgets or {}
    budget = _as_budget(global_budget)
    has_global_budget = budget > _ZERO

    rows: List[CategoryBudgetStatus] = []
    seen = set()
    for entry in summary.category_breakdown:
        raw = category_budgets.get(entry.category_id) if entry.category_id is not None else None
        rows.append(_category_status(entry.category_id, entry.name, entry.total, raw))
        seen.add(entry.category_id)

    for category in categories or []:
        if category.id in seen:
            continue
        rows.append(_category_status(category.id, category.name or UNCATEGORIZED_NAME, _ZERO, category_budgets.get(category.id)))
        seen.add(category.id)

    return BudgetEvaluation(
        month=summary.month,
        total_expense=summary.total_expense,
        global_budget=budget if has_global_budget else None,
        utilization_percent=utilization(summary.total_expense, budget),
        over_budget=is_over_budget(summary.total_expense, budget),
        remaining=budget - summary.total_expense if has_global_budget else None,
        categories=rows,
    )
