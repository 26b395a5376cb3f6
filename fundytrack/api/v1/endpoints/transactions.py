# fundytrack/api/v1/endpoints/transactions.py
import logging
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from datetime import date

from fundytrack import schemas
from fundytrack import crud
from fundytrack.db import models
from fundytrack.api.v1 import deps
from fundytrack.db.models.transaction import TransactionType
from fundytrack.schemas.budget import MONTH_PATTERN

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_schema(transaction: models.Transaction) -> schemas.Transaction:
    trans_schema = schemas.Transaction.model_validate(transaction)
    trans_schema.category_name = transaction.category.name if transaction.category else "Uncategorized"
    return trans_schema


async def _check_category(db: AsyncSession, user_id: int, category_id: Optional[int]) -> None:
    """A transaction may only point at one of the user's own categories."""
    if category_id is None:
        return
    category = await crud.crud_category.get_category(db=db, user_id=user_id, category_id=category_id)
    if not category:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Category not found")


@router.get("/", response_model=schemas.TransactionListResponse)
async def read_transactions(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    current_user: models.User = Depends(deps.get_current_user),
    skip: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, gt=0, le=1000, description="No limit returns the whole ledger"),
    type: Optional[TransactionType] = Query(None, description="expense or income"),
    category_id: Optional[int] = Query(None),
    uncategorized: bool = Query(False, description="Only transactions without a category"),
    month: Optional[str] = Query(None, pattern=MONTH_PATTERN, description="YYYY-MM"),
    start_date: Optional[date] = Query(None, description="YYYY-MM-DD"),
    end_date: Optional[date] = Query(None, description="YYYY-MM-DD"),
):
    """
    Transactions of the current user, newest first (date desc, id desc).
    """
    filters = {
        "type": type.value if type else None,
        "category_id": category_id,
        "uncategorized": uncategorized,
        "month": month,
        "start_date": start_date,
        "end_date": end_date,
    }
    active_filters = {k: v for k, v in filters.items() if v}

    try:
        transactions_list, total_count = await crud.crud_transaction.get_transactions(
            db=db,
            user_id=current_user.id,
            filters=active_filters,
            skip=skip,
            limit=limit,
        )
    except Exception:
        logger.exception("Error reading transactions for user %s", current_user.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not retrieve transactions")

    return schemas.TransactionListResponse(
        transactions=[_to_schema(trans) for trans in transactions_list],
        total_count=total_count,
    )


@router.post("/", response_model=schemas.Transaction, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    *,
    transaction_in: schemas.TransactionCreate,
    db: AsyncSession = Depends(deps.get_async_db),
    current_user: models.User = Depends(deps.get_current_user)
):
    await _check_category(db, current_user.id, transaction_in.category_id)

    try:
        transaction = await crud.crud_transaction.create_transaction(
            db=db, user_id=current_user.id, obj_in=transaction_in
        )
    except IntegrityError:
        logger.warning("Constraint violation creating transaction for user %s", current_user.id)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Transaction violates a data constraint")
    except Exception:
        logger.exception("Error creating transaction for user %s", current_user.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not create transaction")

    return _to_schema(transaction)


@router.get("/{transaction_id}", response_model=schemas.Transaction)
async def read_transaction(
    *,
    transaction_id: int,
    db: AsyncSession = Depends(deps.get_async_db),
    current_user: models.User = Depends(deps.get_current_user)
):
    transaction = await crud.crud_transaction.get_transaction(
        db=db, user_id=current_user.id, transaction_id=transaction_id
    )
    if not transaction:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")
    return _to_schema(transaction)


@router.put("/{transaction_id}", response_model=schemas.Transaction)
@router.patch("/{transaction_id}", response_model=schemas.Transaction)
async def update_transaction(
    *,
    transaction_id: int,
    transaction_in: schemas.TransactionUpdate,
    db: AsyncSession = Depends(deps.get_async_db),
    current_user: models.User = Depends(deps.get_current_user)
):
    try:
        db_transaction = await crud.crud_transaction.get_transaction(
            db=db, user_id=current_user.id, transaction_id=transaction_id
        )
        if not db_transaction:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")

        if transaction_in.category_id != db_transaction.category_id:
            await _check_category(db, current_user.id, transaction_in.category_id)

        updated_transaction = await crud.crud_transaction.update_transaction(
            db=db, db_obj=db_transaction, obj_in=transaction_in
        )
        return _to_schema(updated_transaction)

    except HTTPException:
        raise
    except IntegrityError:
        logger.warning("Constraint violation updating transaction %s", transaction_id)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Transaction violates a data constraint")
    except Exception:
        logger.exception("Error updating transaction %s", transaction_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not update transaction")


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction(
    *,
    transaction_id: int,
    db: AsyncSession = Depends(deps.get_async_db),
    current_user: models.User = Depends(deps.get_current_user)
):
    try:
        deleted_transaction = await crud.crud_transaction.remove_transaction(
            db=db, user_id=current_user.id, transaction_id=transaction_id
        )
    except Exception:
        logger.exception("Error deleting transaction %s", transaction_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not delete transaction")

    if not deleted_transaction:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")

    return None # 204 No Content
