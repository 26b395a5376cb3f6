# fundytrack/services/aggregation.py
"""
Monthly aggregation engine.

Turns a snapshot of a user's transactions into the dashboard figures for the
calendar month of a reference day:

  1. totals (expense, income, net) for the month
  2. expense breakdown per category, with an "Uncategorized" bucket
  3. sparse daily spending series
  4. no-spend / low-spend streak statistics over the elapsed days
  5. the five most recent transactions over all months

Pure: no I/O, no clock. The caller passes "today" explicitly.
"""
import calendar
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Optional

logger = logging.getLogger(__name__)

LOW_SPEND_THRESHOLD = Decimal("20")
RECENT_LIMIT = 5
UNCATEGORIZED_NAME = "Uncategorized"

EXPENSE = "expense"
INCOME = "income"

_ZERO = Decimal("0")


class SummaryInputError(ValueError):
    pass


@dataclass(frozen=True)
class CategoryExpense:
    category_id: Optional[int]
    name: str
    total: Decimal


@dataclass(frozen=True)
class DailySpending:
    day: int
    date: date
    label: str
    total: Decimal


@dataclass(frozen=True)
class StreakStats:
    no_spend_days: int = 0
    best_no_spend_streak: int = 0
    current_no_spend_streak: int = 0
    low_spend_days_count: int = 0


@dataclass(frozen=True)
class RecentTransaction:
    id: Optional[int]
    date: Optional[date]
    description: Optional[str]
    amount: Decimal
    type: Optional[str]
    category_id: Optional[int]


@dataclass(frozen=True)
class MonthlySummary:
    month: str
    total_expense: Decimal = _ZERO
    total_income: Decimal = _ZERO
    net: Decimal = _ZERO
    category_breakdown: List[CategoryExpense] = field(default_factory=list)
    daily_series: List[DailySpending] = field(default_factory=list)
    streaks: StreakStats = field(default_factory=StreakStats)
    recent_five: List[RecentTransaction] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Record coercion
# ---------------------------------------------------------------------------

def _as_date(value: Any) -> Optional[date]:
    """Calendar day of a transaction, or None when missing/unparseable."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            # Accept "YYYY-MM-DD" and full ISO timestamps
            return date.fromisoformat(value[:10])
        except ValueError:
            return None
    return None


def _as_amount(value: Any) -> Decimal:
    if value is None:
        return _ZERO
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return _ZERO


def _as_type(value: Any) -> Optional[str]:
    # Enum members (TransactionType) and plain strings are both accepted
    raw = getattr(value, "value", value)
    return raw if isinstance(raw, str) else None


def _as_reference_day(today: Any) -> date:
    if today is None:
        raise SummaryInputError("A reference day is required to build a monthly summary")
    if isinstance(today, datetime):
        return today.date()
    if isinstance(today, date):
        return today
    raise SummaryInputError(f"Reference day must be a date or datetime, got {type(today).__name__}")


# ---------------------------------------------------------------------------
# Building blocks
# ---------------------------------------------------------------------------

def month_bounds(today: date) -> tuple[str, int]:
    """('YYYY-MM', number of days) for the month containing `today`."""
    return f"{today.year:04d}-{today.month:02d}", calendar.monthrange(today.year, today.month)[1]


def daily_expense_totals(expenses: Iterable[tuple[date, Decimal]], days_in_month: int) -> List[Decimal]:
    """
    Expense total per day of month. Index 0 is unused so that
    totals[d] is the total of day d (1..days_in_month).
    """
    totals = [_ZERO] * (days_in_month + 1)
    for day, amount in expenses:
        totals[day.day] += amount
    return totals


def sparse_daily_series(totals: List[Decimal], year: int, month: int) -> List[DailySpending]:
    """Days with non-zero spending only."""
    return [
        DailySpending(day=d, date=date(year, month, d), label=f"{month}/{d}", total=totals[d])
        for d in range(1, len(totals))
        if totals[d] != _ZERO
    ]


def streak_stats(totals: List[Decimal], elapsed_days: int, low_spend_threshold: Decimal = LOW_SPEND_THRESHOLD) -> StreakStats:
    """
    Scan days 1..elapsed_days. A zero day extends the no-spend streak,
    any spending resets it. Low-spend days need non-zero spending.
    """
    no_spend_days = 0
    best = 0
    streak = 0
    low_spend = 0
    for d in range(1, min(elapsed_days, len(totals) - 1) + 1):
        total = totals[d]
        if total == _ZERO:
            no_spend_days += 1
            streak += 1
            best = max(best, streak)
        else:
            if total <= low_spend_threshold:
                low_spend += 1
            streak = 0
    return StreakStats(
        no_spend_days=no_spend_days,
        best_no_spend_streak=best,
        current_no_spend_streak=streak,
        low_spend_days_count=low_spend,
    )


def category_breakdown(expenses: Iterable[tuple[Optional[int], Decimal]], category_names: dict) -> List[CategoryExpense]:
    totals: dict = {}
    for category_id, amount in expenses:
        # A reference to a category we do not know lands in the uncategorized bucket
        key = category_id if category_id in category_names else None
        totals[key] = totals.get(key, _ZERO) + amount

    entries = [
        CategoryExpense(
            category_id=key,
            name=category_names[key] if key is not None else UNCATEGORIZED_NAME,
            total=total,
        )
        for key, total in totals.items()
        if total != _ZERO
    ]
    entries.sort(key=lambda e: (-e.total, e.name, e.category_id or 0))
    return entries


def most_recent(transactions: Iterable[Any], limit: int = RECENT_LIMIT) -> List[RecentTransaction]:
    """Newest first by (date, id); undated records go last."""
    rows = [
        RecentTransaction(
            id=getattr(tx, "id", None),
            date=_as_date(getattr(tx, "date", None)),
            description=getattr(tx, "description", None),
            amount=_as_amount(getattr(tx, "amount", None)),
            type=_as_type(getattr(tx, "type", None)),
            category_id=getattr(tx, "category_id", None),
        )
        for tx in transactions
    ]
    rows.sort(key=lambda r: (r.date or date.min, r.id or 0), reverse=True)
    return rows[:limit]


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def build_monthly_summary(
    transactions: Iterable[Any],
    categories: Iterable[Any],
    today: Any,
    low_spend_threshold: Any = LOW_SPEND_THRESHOLD,
) -> MonthlySummary:
    """
    Aggregate a transaction snapshot for the calendar month of `today`.

    Args:
        transactions: objects with id, date, description, amount, type, category_id.
        categories: objects with id and name.
        today: reference day (date or datetime). Required.
        low_spend_threshold: inclusive upper bound of a low-spend day.

    Returns:
        MonthlySummary. Transactions of other months only show up in recent_five.
    """
    reference = _as_reference_day(today)
    month, days_in_month = month_bounds(reference)
    threshold = _as_amount(low_spend_threshold)

    transactions = list(transactions or [])
    if not transactions:
        # Nothing recorded at all: no streaks either, not a month of no-spend days
        return MonthlySummary(month=month)

    category_names = {c.id: c.name for c in (categories or [])}

    total_expense = _ZERO
    total_income = _ZERO
    expenses_by_day: List[tuple[date, Decimal]] = []
    expenses_by_category: List[tuple[Optional[int], Decimal]] = []

    for tx in transactions:
        tx_date = _as_date(getattr(tx, "date", None))
        if tx_date is None:
            logger.debug("Skipping transaction %s without a usable date", getattr(tx, "id", None))
            continue
        if (tx_date.year, tx_date.month) != (reference.year, reference.month):
            continue

        amount = _as_amount(getattr(tx, "amount", None))
        tx_type = _as_type(getattr(tx, "type", None))
        if tx_type == EXPENSE:
            total_expense += amount
            expenses_by_day.append((tx_date, amount))
            expenses_by_category.append((getattr(tx, "category_id", None), amount))
        elif tx_type == INCOME:
            total_income += amount

    totals = daily_expense_totals(expenses_by_day, days_in_month)

    return MonthlySummary(
        month=month,
        total_expense=total_expense,
        total_income=total_income,
        net=total_income - total_expense,
        category_breakdown=category_breakdown(expenses_by_category, category_names),
        daily_series=sparse_daily_series(totals, reference.year, reference.month),
        streaks=streak_stats(totals, reference.day, threshold),
        recent_five=most_recent(transactions),
    )
