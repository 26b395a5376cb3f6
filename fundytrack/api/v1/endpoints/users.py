# fundytrack/api/v1/endpoints/users.py
from fastapi import APIRouter, Depends
from typing import Optional

from fundytrack import schemas
from fundytrack.db import models
from fundytrack.api.v1 import deps

router = APIRouter()


@router.get("/me", response_model=schemas.CurrentUserResponse)
async def read_current_user(current_user: Optional[models.User] = Depends(deps.get_optional_user)):
    """
    The signed-in user, or {"user": null} for anonymous callers.
    """
    if current_user is None:
        return schemas.CurrentUserResponse(user=None)
    return schemas.CurrentUserResponse(user=schemas.User.model_validate(current_user))
