# fundytrack/api/v1/endpoints/categories.py
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from fundytrack import schemas
from fundytrack import crud
from fundytrack.db import models
from fundytrack.api.v1 import deps
from fundytrack.crud.crud_category import CategoryInUseError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=List[schemas.Category])
async def read_categories(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    current_user: models.User = Depends(deps.get_current_user)
):
    """
    All categories of the current user, ordered by name.
    """
    try:
        return await crud.crud_category.get_categories(db=db, user_id=current_user.id)
    except Exception:
        logger.exception("Error reading categories for user %s", current_user.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not retrieve categories")


@router.post("/", response_model=schemas.Category, status_code=status.HTTP_201_CREATED)
async def create_category(
    *,
    category_in: schemas.CategoryCreate,
    db: AsyncSession = Depends(deps.get_async_db),
    current_user: models.User = Depends(deps.get_current_user)
):
    try:
        return await crud.crud_category.create_category(db=db, user_id=current_user.id, obj_in=category_in)
    except Exception:
        logger.exception("Error creating category for user %s", current_user.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not create category")


@router.get("/{category_id}", response_model=schemas.Category)
async def read_category(
    *,
    category_id: int,
    db: AsyncSession = Depends(deps.get_async_db),
    current_user: models.User = Depends(deps.get_current_user)
):
    category = await crud.crud_category.get_category(db=db, user_id=current_user.id, category_id=category_id)
    if not category:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return category


@router.put("/{category_id}", response_model=schemas.Category)
@router.patch("/{category_id}", response_model=schemas.Category)
async def update_category(
    *,
    category_id: int,
    category_in: schemas.CategoryUpdate,
    db: AsyncSession = Depends(deps.get_async_db),
    current_user: models.User = Depends(deps.get_current_user)
):
    """
    Rename or recolor a category. PUT and PATCH both accept partial bodies.
    """
    try:
        db_category = await crud.crud_category.get_category(db=db, user_id=current_user.id, category_id=category_id)
        if not db_category:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")

        return await crud.crud_category.update_category(db=db, db_obj=db_category, obj_in=category_in)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Error updating category %s", category_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not update category")


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    *,
    category_id: int,
    db: AsyncSession = Depends(deps.get_async_db),
    current_user: models.User = Depends(deps.get_current_user)
):
    """
    Delete a category. Refused with 409 while transactions still use it.
    """
    try:
        deleted_category = await crud.crud_category.remove_category(
            db=db, user_id=current_user.id, category_id=category_id
        )
    except CategoryInUseError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except IntegrityError:
        # A transaction was added between the usage check and the delete
        logger.warning("Category %s became referenced while being deleted", category_id)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Category is in use and cannot be deleted")
    except Exception:
        logger.exception("Error deleting category %s", category_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not delete category")

    if not deleted_category:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")

    return None # 204 No Content
