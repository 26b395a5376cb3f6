# fundytrack/crud/crud_category.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import func
from typing import Optional, List, Union

from fundytrack.db.models.category import Category as CategoryModel, DEFAULT_CATEGORY_COLOR
from fundytrack.db.models.transaction import Transaction as TransactionModel
from fundytrack.schemas.category import CategoryCreate, CategoryUpdate


class CategoryInUseError(ValueError):
    """The category is still referenced by at least one transaction."""

    def __init__(self, category_id: int, transaction_count: int):
        self.category_id = category_id
        self.transaction_count = transaction_count
        super().__init__(
            f"Category {category_id} is used by {transaction_count} transaction(s) and cannot be deleted"
        )

# --- Read Operations ---

async def get_category(db: AsyncSession, *, user_id: int, category_id: int) -> Optional[CategoryModel]:
    """
    Get a category by id. Categories of other users are reported as missing.
    """
    result = await db.execute(
        select(CategoryModel).filter(CategoryModel.id == category_id, CategoryModel.user_id == user_id)
    )
    return result.scalar_one_or_none()

async def get_categories(db: AsyncSession, *, user_id: int) -> List[CategoryModel]:
    """
    All categories of the user, ordered by name.
    """
    result = await db.execute(
        select(CategoryModel)
        .filter(CategoryModel.user_id == user_id)
        .order_by(CategoryModel.name.asc(), CategoryModel.id.asc())
    )
    return list(result.scalars().all())

async def count_category_transactions(db: AsyncSession, *, user_id: int, category_id: int) -> int:
    result = await db.execute(
        select(func.count(TransactionModel.id)).filter(
            TransactionModel.user_id == user_id,
            TransactionModel.category_id == category_id,
        )
    )
    return int(result.scalar_one() or 0)

# --- Create Operation ---

async def create_category(db: AsyncSession, *, user_id: int, obj_in: CategoryCreate) -> CategoryModel:
    db_obj = CategoryModel(
        user_id=user_id,
        name=obj_in.name,
        color=obj_in.color or DEFAULT_CATEGORY_COLOR,
    )
    db.add(db_obj)
    await db.flush() # Generates the id
    return db_obj

# --- Update Operation ---

async def update_category(
    db: AsyncSession,
    *,
    db_obj: CategoryModel,
    obj_in: Union[CategoryUpdate, dict]
) -> CategoryModel:
    """
    Update name and/or color. An explicit empty color resets it to gray.
    """
    if isinstance(obj_in, dict):
        update_data = obj_in
    else:
        update_data = obj_in.model_dump(exclude_unset=True)

    for field, value in update_data.items():
        if field == "color" and not value:
            value = DEFAULT_CATEGORY_COLOR
        if field == "name" and value is None:
            continue # name is NOT NULL, a null in a partial update means "leave as is"
        if hasattr(db_obj, field):
            setattr(db_obj, field, value)

    db.add(db_obj)
    await db.flush()
    return db_obj

# --- Delete Operation ---

async def remove_category(db: AsyncSession, *, user_id: int, category_id: int) -> Optional[CategoryModel]:
    """
    Delete a category.
    Refuses (CategoryInUseError) while transactions reference it; the
    category's monthly budgets are deleted together with it.
    """
    db_obj = await get_category(db, user_id=user_id, category_id=category_id)
    if not db_obj:
        return None

    transaction_count = await count_category_transactions(db, user_id=user_id, category_id=category_id)
    if transaction_count > 0:
        raise CategoryInUseError(category_id, transaction_count)

    await db.delete(db_obj)
    await db.flush()
    return db_obj
