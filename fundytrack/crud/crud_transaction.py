# fundytrack/crud/crud_transaction.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import joinedload
from sqlalchemy import func, desc, and_
from typing import Optional, List, Union, Dict, Any, Tuple
from datetime import date
import calendar

from fundytrack.db.models.transaction import Transaction as TransactionModel, TransactionType
from fundytrack.schemas.transaction import TransactionCreate, TransactionUpdate


def _month_range(month: str) -> Tuple[date, date]:
    """First and last calendar day of a 'YYYY-MM' month."""
    year, month_num = (int(part) for part in month.split("-"))
    return date(year, month_num, 1), date(year, month_num, calendar.monthrange(year, month_num)[1])


def _filter_conditions(user_id: int, filters: Optional[Dict[str, Any]]) -> list:
    conditions = [TransactionModel.user_id == user_id]
    filters = filters or {}

    if filters.get("type") and filters["type"] != "all":
        conditions.append(TransactionModel.type == TransactionType(filters["type"]))
    if filters.get("category_id") is not None:
        conditions.append(TransactionModel.category_id == filters["category_id"])
    if filters.get("uncategorized"):
        conditions.append(TransactionModel.category_id.is_(None))
    if filters.get("month"):
        first_day, last_day = _month_range(filters["month"])
        conditions.append(TransactionModel.date >= first_day)
        conditions.append(TransactionModel.date <= last_day)
    if filters.get("start_date"):
        conditions.append(TransactionModel.date >= filters["start_date"])
    if filters.get("end_date"):
        conditions.append(TransactionModel.date <= filters["end_date"])
    return conditions

# --- Read Operations ---

async def get_transaction(db: AsyncSession, *, user_id: int, transaction_id: int) -> Optional[TransactionModel]:
    """
    Get a transaction by id, with its category loaded.
    Transactions of other users are reported as missing.
    """
    result = await db.execute(
        select(TransactionModel)
        .options(joinedload(TransactionModel.category))
        .filter(TransactionModel.id == transaction_id, TransactionModel.user_id == user_id)
    )
    return result.scalar_one_or_none()

async def get_transactions(
    db: AsyncSession,
    *,
    user_id: int,
    filters: Optional[Dict[str, Any]] = None,
    skip: int = 0,
    limit: Optional[int] = None
) -> Tuple[List[TransactionModel], int]:
    """
    Transactions of the user, newest first (date desc, id desc).
    Returns (transactions, total count matching the filters).
    Without a limit the whole ledger is returned, which is what the
    dashboard aggregation needs.
    """
    conditions = _filter_conditions(user_id, filters)

    count_query = select(func.count(TransactionModel.id)).where(and_(*conditions))
    total_count = (await db.execute(count_query)).scalar_one()

    query = (
        select(TransactionModel)
        .options(joinedload(TransactionModel.category))
        .filter(and_(*conditions))
        .order_by(desc(TransactionModel.date), desc(TransactionModel.id))
        .offset(skip)
    )
    if limit is not None:
        query = query.limit(limit)

    result = await db.execute(query)
    return list(result.scalars().all()), int(total_count or 0)

# --- Create Operation ---

async def create_transaction(db: AsyncSession, *, user_id: int, obj_in: TransactionCreate) -> TransactionModel:
    db_obj = TransactionModel(
        user_id=user_id,
        date=obj_in.date,
        description=obj_in.description,
        amount=obj_in.amount,
        type=obj_in.type,
        category_id=obj_in.category_id,
    )
    db.add(db_obj)
    await db.flush() # Constraint violations surface here, inside the request
    await db.refresh(db_obj, attribute_names=["category"])
    return db_obj

# --- Update Operation ---

async def update_transaction(
    db: AsyncSession,
    *,
    db_obj: TransactionModel,
    obj_in: Union[TransactionUpdate, Dict[str, Any]]
) -> TransactionModel:
    """
    Apply the fields that were sent. An explicit null category_id moves the
    transaction to "Uncategorized"; nulls for required fields are ignored.
    """
    if isinstance(obj_in, dict):
        update_data = obj_in
    else:
        update_data = obj_in.model_dump(exclude_unset=True)

    for field, value in update_data.items():
        if value is None and field != "category_id":
            continue
        if hasattr(db_obj, field):
            setattr(db_obj, field, value)

    db.add(db_obj)
    await db.flush()
    await db.refresh(db_obj, attribute_names=["category"])
    return db_obj

# --- Delete Operation ---

async def remove_transaction(db: AsyncSession, *, user_id: int, transaction_id: int) -> Optional[TransactionModel]:
    db_obj = await get_transaction(db, user_id=user_id, transaction_id=transaction_id)
    if not db_obj:
        return None

    await db.delete(db_obj)
    await db.flush()
    return db_obj
