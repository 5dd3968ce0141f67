"""Service layer for user persistence and profile updates."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.user import User
from schemas.user import UserUpdate


async def create_user(
    db: AsyncSession,
    email: str,
    password_hash: str,
) -> User:
    """
    Insert a new user.

    Raises:
        IntegrityError: If the email is already registered. The unique index
            on users.email is the only uniqueness check.

    Note: Uses flush(), not commit. Session generator handles commit at request end.
    """
    user = User(email=email, password_hash=password_hash)
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    """Get a user by (already normalized) email. Returns None if not registered."""
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_user_by_id(db: AsyncSession, user_id: int) -> User | None:
    """Get a user by ID. Returns None if not found."""
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def update_password_hash(
    db: AsyncSession,
    user: User,
    password_hash: str,
) -> None:
    """Replace a user's stored hash (used when upgrading hash parameters)."""
    user.password_hash = password_hash
    await db.flush()
    await db.refresh(user)


async def update_user(
    db: AsyncSession,
    user: User,
    data: UserUpdate,
) -> User:
    """
    Apply a partial profile update to the given user.

    Note: Does not commit. Caller (session generator) handles commit at request end.
    """
    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(user, field, value)

    await db.flush()
    await db.refresh(user)
    return user
