# fundytrack/crud/crud_user.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from typing import Optional

from fundytrack.db.models.user import User as UserModel
from fundytrack.schemas.user import UserCreate, UserUpdate

# --- Read Operations ---

async def get_user(db: AsyncSession, user_id: int) -> Optional[UserModel]:
    """
    Get a user by internal id.
    """
    result = await db.execute(select(UserModel).filter(UserModel.id == user_id))
    return result.scalar_one_or_none()

async def get_user_by_provider_id(db: AsyncSession, google_id: str) -> Optional[UserModel]:
    """
    Get a user by the identity provider subject id.
    """
    if not google_id:
        return None
    result = await db.execute(select(UserModel).filter(UserModel.google_id == google_id))
    return result.scalar_one_or_none()

# --- Create Operation ---

async def create_user(db: AsyncSession, *, user_in: UserCreate) -> UserModel:
    db_user = UserModel(
        google_id=user_in.google_id,
        email=user_in.email,
        name=user_in.name,
        avatar_url=user_in.avatar_url,
    )
    db.add(db_user)
    await db.flush() # Need the generated id right away
    return db_user

# --- Update Operation ---

async def update_user(db: AsyncSession, *, db_obj: UserModel, obj_in: UserUpdate) -> UserModel:
    """
    Apply the profile fields that were explicitly set on obj_in.
    """
    update_data = obj_in.model_dump(exclude_unset=True)

    for field, value in update_data.items():
        if hasattr(db_obj, field):
            setattr(db_obj, field, value)

    db.add(db_obj)
    await db.flush()
    return db_obj

# --- Login upsert ---

async def upsert_user_from_identity(
    db: AsyncSession,
    *,
    google_id: str,
    email: Optional[str] = None,
    name: Optional[str] = None,
    avatar_url: Optional[str] = None,
) -> UserModel:
    """
    Create the user on first login, otherwise refresh the profile fields
    (email, name, avatar) when the provider reports new values.
    """
    db_user = await get_user_by_provider_id(db, google_id=google_id)

    profile = {
        "email": email,
        "name": name,
        "avatar_url": avatar_url,
    }

    if db_user is None:
        return await create_user(db=db, user_in=UserCreate(google_id=google_id, **profile))

    changed = {key: value for key, value in profile.items() if getattr(db_user, key, None) != value}
    if changed:
        db_user = await update_user(db=db, db_obj=db_user, obj_in=UserUpdate(**changed))
    return db_user
