# fundytrack/api/v1/deps.py
import logging
from fastapi import Depends, HTTPException, status, Header
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from fundytrack.core.security import parse_and_validate_identity
from fundytrack.core.config import settings
from fundytrack.core.dates import local_today
from fundytrack.db.database import get_async_db
from fundytrack.db.models.user import User as UserModel
from fundytrack import crud

logger = logging.getLogger(__name__)


async def get_optional_user(
    identity_token: Optional[str] = Header(None, alias="X-Identity-Token"),
    db: AsyncSession = Depends(get_async_db)
) -> Optional[UserModel]:
    """
    Verify the identity assertion forwarded by the login gateway and return
    the matching user, creating it on first login.
    Returns None for anonymous callers and for assertions that do not verify.
    """
    if identity_token is None:
        logger.debug("No X-Identity-Token header")
        return None

    identity = parse_and_validate_identity(
        token=identity_token,
        secret=settings.IDENTITY_SHARED_SECRET,
        expiration_hours=settings.IDENTITY_TOKEN_TTL_HOURS,
    )
    if not identity:
        return None

    try:
        return await crud.crud_user.upsert_user_from_identity(
            db=db,
            google_id=identity["sub"],
            email=identity.get("email"),
            name=identity.get("name"),
            avatar_url=identity.get("picture"),
        )
    except Exception:
        logger.exception("Auth failed: error storing user %s", identity["sub"])
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Database error processing user")


async def get_current_user(
    current_user: Optional[UserModel] = Depends(get_optional_user)
) -> UserModel:
    """
    Same as get_optional_user, but anonymous callers get 401.
    """
    if current_user is None:
        logger.info("Auth failed: missing or invalid X-Identity-Token header")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return current_user


def get_today():
    """Reference day for month-scoped views, in the configured timezone."""
    return local_today()
