"""
Tests for budget evaluation over a monthly summary.
"""
from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from fundytrack.services.aggregation import MonthlySummary, build_monthly_summary
from fundytrack.services.budget_evaluation import evaluate_budget, utilization


TODAY = date(2025, 11, 10)


def _tx(id, amount, category_id=None, type="expense", day=5):
    return SimpleNamespace(
        id=id, date=date(2025, 11, day), description="x",
        amount=Decimal(amount), type=type, category_id=category_id,
    )


@pytest.fixture
def categories():
    return [
        SimpleNamespace(id=1, name="Food"),
        SimpleNamespace(id=2, name="Transport"),
        SimpleNamespace(id=3, name="Gifts"),
    ]


@pytest.fixture
def summary(categories):
    transactions = [
        _tx(1, "60", category_id=1),
        _tx(2, "40", category_id=1),
        _tx(3, "25", category_id=2),
        _tx(4, "5"),
    ]
    return build_monthly_summary(transactions, categories, TODAY)


def test_zero_budget_is_not_over_budget():
    summary = MonthlySummary(month="2025-11", total_expense=Decimal("50"))

    evaluation = evaluate_budget(summary, global_budget=0)

    assert evaluation.utilization_percent == 0
    assert evaluation.over_budget is False
    assert evaluation.global_budget is None
    assert evaluation.remaining is None


def test_missing_budget_counts_as_no_budget(summary):
    evaluation = evaluate_budget(summary, global_budget=None)

    assert evaluation.utilization_percent == 0
    assert evaluation.over_budget is False


def test_global_utilization(summary):
    evaluation = evaluate_budget(summary, global_budget=Decimal("200"))

    assert evaluation.month == "2025-11"
    assert evaluation.total_expense == Decimal("130")
    assert evaluation.utilization_percent == Decimal("65")
    assert evaluation.over_budget is False
    assert evaluation.remaining == Decimal("70")


def test_over_budget_needs_spending_above_the_budget(summary):
    assert evaluate_budget(summary, global_budget="130").over_budget is False
    assert evaluate_budget(summary, global_budget="129.99").over_budget is True


def test_category_rows_follow_the_breakdown(summary):
    evaluation = evaluate_budget(summary, category_budgets={1: Decimal("80"), 2: Decimal("100")})

    rows = {row.name: row for row in evaluation.categories}
    assert set(rows) == {"Food", "Transport", "Uncategorized"}

    food = rows["Food"]
    assert food.spent == Decimal("100")
    assert food.budget == Decimal("80")
    assert food.utilization_percent == Decimal("125")
    assert food.over_budget is True

    transport = rows["Transport"]
    assert transport.utilization_percent == Decimal("25")
    assert transport.over_budget is False


def test_category_without_budget_reports_no_budget(summary):
    evaluation = evaluate_budget(summary, category_budgets={2: 0})

    rows = {row.name: row for row in evaluation.categories}
    for name in ("Food", "Transport", "Uncategorized"):
        assert rows[name].has_budget is False
        assert rows[name].budget is None
        assert rows[name].utilization_percent is None
        assert rows[name].over_budget is False


def test_all_categories_listed_when_given(summary, categories):
    evaluation = evaluate_budget(summary, category_budgets={3: Decimal("30")}, categories=categories)

    rows = {row.category_id: row for row in evaluation.categories}
    assert set(rows) == {1, 2, 3, None}
    gifts = rows[3]
    assert gifts.spent == 0
    assert gifts.has_budget is True
    assert gifts.utilization_percent == 0
    assert gifts.over_budget is False


def test_utilization_zero_guard():
    assert utilization(Decimal("10"), Decimal("0")) == 0
    assert utilization(Decimal("0"), Decimal("40")) == 0
    assert utilization(Decimal("10"), Decimal("40")) == Decimal("25")


def test_summary_is_required():
    with pytest.raises(ValueError):
        evaluate_budget(None, global_budget=10)
